from sqlalchemy import (
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    Text,
    UniqueConstraint,
    func,
    text,
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()
metadata = Base.metadata


class Company(Base):
    __tablename__ = 'companies'

    id = Column(Integer, primary_key=True)
    name = Column(Text, nullable=False)
    slug = Column(Text, nullable=False, unique=True)
    is_active = Column(Integer, nullable=False, server_default=text('1'))
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    users = relationship('User', back_populates='company')
    company_services = relationship('CompanyService', back_populates='company')


class User(Base):
    __tablename__ = 'users'

    id = Column(Integer, primary_key=True)
    email = Column(Text, nullable=False, unique=True)
    password_hash = Column(Text, nullable=False)
    role = Column(Text, nullable=False)
    company_id = Column(ForeignKey('companies.id', ondelete='SET NULL'))
    is_active = Column(Integer, nullable=False, server_default=text('1'))
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    company = relationship('Company', back_populates='users')

    __table_args__ = (
        Index('ix_users_company_role', 'company_id', 'role'),
    )


class ServiceCategory(Base):
    __tablename__ = 'service_categories'

    id = Column(Integer, primary_key=True)
    name = Column(Text, nullable=False)
    type = Column(Text, nullable=False)
    slug = Column(Text, nullable=False, unique=True)
    description = Column(Text)
    is_active = Column(Integer, nullable=False, server_default=text('1'))
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    services = relationship('Service', back_populates='category')

    __table_args__ = (
        Index('ix_service_categories_type', 'type'),
    )


class Service(Base):
    __tablename__ = 'services'

    id = Column(Integer, primary_key=True)
    name = Column(Text, nullable=False)
    description = Column(Text)
    category_id = Column(ForeignKey('service_categories.id', ondelete='SET NULL'))
    duration = Column(Integer, nullable=False)  # minutes
    price = Column(Float, nullable=False)
    is_active = Column(Integer, nullable=False, server_default=text('1'))
    notes = Column(Text)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    category = relationship('ServiceCategory', back_populates='services')
    company_services = relationship('CompanyService', back_populates='service')


class CompanyService(Base):
    __tablename__ = 'company_services'

    id = Column(Integer, primary_key=True)
    company_id = Column(ForeignKey('companies.id', ondelete='CASCADE'), nullable=False)
    service_id = Column(ForeignKey('services.id', ondelete='CASCADE'), nullable=False)
    custom_price = Column(Float)
    is_active = Column(Integer, nullable=False, server_default=text('1'))
    notes = Column(Text)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    company = relationship('Company', back_populates='company_services')
    service = relationship('Service', back_populates='company_services')

    __table_args__ = (
        UniqueConstraint('company_id', 'service_id', name='uq_company_service'),
    )


class Booking(Base):
    __tablename__ = 'bookings'

    id = Column(Integer, primary_key=True)
    customer_id = Column(ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    booking_date = Column(Date, nullable=False)
    booking_time = Column(Text, nullable=False)  # HH:MM
    duration = Column(Integer, nullable=False)  # minutes
    total_price = Column(Float, nullable=False)
    status = Column(Text, nullable=False, server_default=text("'pending'"))
    payment_status = Column(Text, nullable=False, server_default=text("'pending'"))
    assigned_company_id = Column(ForeignKey('companies.id', ondelete='SET NULL'))
    assigned_user_id = Column(ForeignKey('users.id', ondelete='SET NULL'))
    assigned_by = Column(ForeignKey('users.id', ondelete='SET NULL'))
    customer_notes = Column(Text)
    admin_notes = Column(Text)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    customer = relationship('User', foreign_keys=[customer_id])
    assigned_company = relationship('Company', foreign_keys=[assigned_company_id])
    assigned_user = relationship('User', foreign_keys=[assigned_user_id])
    assigner = relationship('User', foreign_keys=[assigned_by])
    services = relationship(
        'BookingServiceLine',
        back_populates='booking',
        order_by='BookingServiceLine.position',
        cascade='all, delete-orphan',
    )

    __table_args__ = (
        Index('ix_bookings_customer_created', 'customer_id', 'created_at'),
        Index('ix_bookings_company_status', 'assigned_company_id', 'status'),
        Index('ix_bookings_user_status', 'assigned_user_id', 'status'),
        Index('ix_bookings_date_time', 'booking_date', 'booking_time'),
    )


class BookingServiceLine(Base):
    __tablename__ = 'booking_services'

    id = Column(Integer, primary_key=True)
    booking_id = Column(ForeignKey('bookings.id', ondelete='CASCADE'), nullable=False)
    position = Column(Integer, nullable=False, server_default=text('0'))
    service_id = Column(ForeignKey('services.id'), nullable=False)
    company_service_id = Column(ForeignKey('company_services.id', ondelete='SET NULL'))
    quantity = Column(Integer, nullable=False, server_default=text('1'))
    custom_price = Column(Float)

    booking = relationship('Booking', back_populates='services')
    service = relationship('Service')
