import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from redis.exceptions import RedisError

from .config import settings
from .database import init_db
from .redis_client import redis_client
from .routers import availability, bookings
from .services.reminder_checker import reminder_checker_loop

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    init_db()

    reminder_task = None
    if settings.reminders_enabled:
        reminder_task = asyncio.create_task(reminder_checker_loop())

    yield

    if reminder_task is not None:
        reminder_task.cancel()
        await asyncio.gather(reminder_task, return_exceptions=True)


app = FastAPI(title="Barbershop Booking API", lifespan=lifespan)

app.include_router(availability.router)
app.include_router(bookings.router)


@app.get("/health")
def health():
    try:
        return {"redis": redis_client.ping()}
    except RedisError:
        logger.exception("Redis health check failed")
        return {"redis": False}
