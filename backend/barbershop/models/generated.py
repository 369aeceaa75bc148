from sqlalchemy import Column, Float, ForeignKey, Index, Integer, Text, text

from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()
metadata = Base.metadata


class Settings(Base):
    __tablename__ = 'settings'

    key = Column(Text, primary_key=True)
    value = Column(Text)
    description = Column(Text)


class Barbers(Base):
    __tablename__ = 'barbers'

    name = Column(Text, nullable=False)
    start_time = Column(Text)
    end_time = Column(Text)
    start_time_2 = Column(Text)  # second shift (split schedule)
    end_time_2 = Column(Text)
    working_days = Column(Text, nullable=False, server_default=text("'[1,2,3,4,5,6]'"))  # 0 = Sunday
    is_active = Column(Integer, nullable=False, server_default=text('1'))
    color = Column(Text, nullable=False, server_default=text("'#3b82f6'"))
    id = Column(Integer, primary_key=True)
    email = Column(Text)
    phone = Column(Text)
    photo_url = Column(Text)
    created_at = Column(Text, server_default=text('CURRENT_TIMESTAMP'))
    updated_at = Column(Text, server_default=text('CURRENT_TIMESTAMP'))

    bookings = relationship('Bookings', back_populates='barber')
    special_hours = relationship('SpecialHours', back_populates='barber')


class Services(Base):
    __tablename__ = 'services'

    name = Column(Text, nullable=False)
    duration_minutes = Column(Integer, nullable=False)
    price = Column(Float, nullable=False)
    is_active = Column(Integer, nullable=False, server_default=text('1'))
    sort_order = Column(Integer, nullable=False, server_default=text('0'))
    id = Column(Integer, primary_key=True)
    description = Column(Text)
    created_at = Column(Text, server_default=text('CURRENT_TIMESTAMP'))
    updated_at = Column(Text, server_default=text('CURRENT_TIMESTAMP'))

    bookings = relationship('Bookings', back_populates='service')


class Clients(Base):
    __tablename__ = 'clients'

    name = Column(Text, nullable=False)
    phone = Column(Text, nullable=False)
    total_visits = Column(Integer, nullable=False, server_default=text('0'))
    id = Column(Integer, primary_key=True)
    email = Column(Text)
    notes = Column(Text)
    last_visit = Column(Text)
    created_at = Column(Text, server_default=text('CURRENT_TIMESTAMP'))
    updated_at = Column(Text, server_default=text('CURRENT_TIMESTAMP'))

    bookings = relationship('Bookings', back_populates='client')


class SpecialHours(Base):
    __tablename__ = 'special_hours'

    date = Column(Text, nullable=False)
    is_closed = Column(Integer, nullable=False, server_default=text('0'))
    id = Column(Integer, primary_key=True)
    barber_id = Column(ForeignKey('barbers.id', ondelete='CASCADE'))  # NULL = whole shop
    start_time = Column(Text)
    end_time = Column(Text)
    reason = Column(Text)

    barber = relationship('Barbers', back_populates='special_hours')


class Bookings(Base):
    __tablename__ = 'bookings'
    __table_args__ = (
        Index('ix_bookings_barber_date', 'barber_id', 'date'),
    )

    barber_id = Column(ForeignKey('barbers.id'), nullable=False)
    service_id = Column(ForeignKey('services.id'), nullable=False)
    date = Column(Text, nullable=False)
    start_time = Column(Text, nullable=False)
    end_time = Column(Text, nullable=False)
    client_name = Column(Text, nullable=False)
    client_phone = Column(Text, nullable=False)
    service_name = Column(Text, nullable=False)
    service_price = Column(Float, nullable=False)
    status = Column(Text, nullable=False, server_default=text("'pending'"))
    reminder_sent = Column(Integer, nullable=False, server_default=text('0'))
    created_at = Column(Text, nullable=False, server_default=text('CURRENT_TIMESTAMP'))
    updated_at = Column(Text, nullable=False, server_default=text('CURRENT_TIMESTAMP'))
    id = Column(Integer, primary_key=True)
    client_id = Column(ForeignKey('clients.id', ondelete='SET NULL'))
    client_email = Column(Text)
    notes = Column(Text)
    cancelled_at = Column(Text)
    completed_at = Column(Text)

    barber = relationship('Barbers', back_populates='bookings')
    client = relationship('Clients', back_populates='bookings')
    service = relationship('Services', back_populates='bookings')
