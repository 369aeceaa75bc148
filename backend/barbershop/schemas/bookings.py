# backend/barbershop/schemas/bookings.py

import re
from datetime import date
from typing import Literal, Optional
from pydantic import BaseModel, Field, field_validator

BookingStatus = Literal["pending", "confirmed", "completed", "cancelled", "no_show"]

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
# Spanish mobile/landline, optionally prefixed with +34 / 34
_PHONE_RE = re.compile(r"^(\+?34)?[6-9]\d{8}$")


class BookingCreate(BaseModel):
    service_id: int
    barber_id: int

    date: date
    time: str = Field(pattern=r"^([01]\d|2[0-3]):[0-5]\d$")

    client_name: str
    client_email: str
    client_phone: str

    notes: Optional[str] = None

    @field_validator("client_name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("Name must have at least 2 characters")
        return v

    @field_validator("client_email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        v = v.strip()
        if not _EMAIL_RE.match(v):
            raise ValueError("Invalid e-mail")
        return v

    @field_validator("client_phone")
    @classmethod
    def validate_phone(cls, v: str) -> str:
        v = re.sub(r"[\s\-]", "", v)
        if not _PHONE_RE.match(v):
            raise ValueError("Invalid phone (expected a Spanish 9-digit number)")
        return v


class BookingUpdate(BaseModel):
    status: Optional[BookingStatus] = None
    notes: Optional[str] = None


class BookingRead(BaseModel):
    id: int

    client_id: Optional[int] = None
    barber_id: int
    service_id: int

    date: date
    start_time: str
    end_time: str

    client_name: str
    client_email: Optional[str] = None
    client_phone: str

    service_name: str
    service_price: float

    status: BookingStatus
    notes: Optional[str] = None

    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    cancelled_at: Optional[str] = None
    completed_at: Optional[str] = None

    model_config = {"from_attributes": True}
