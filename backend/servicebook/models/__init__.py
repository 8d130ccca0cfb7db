from .entities import (
    Base,
    Booking,
    BookingServiceLine,
    Company,
    CompanyService,
    Service,
    ServiceCategory,
    User,
    metadata,
)

__all__ = [
    "Base",
    "Booking",
    "BookingServiceLine",
    "Company",
    "CompanyService",
    "Service",
    "ServiceCategory",
    "User",
    "metadata",
]
