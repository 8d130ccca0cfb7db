# backend/servicebook/services/pricing.py
"""
Booking totals.

Unit price precedence (first non-empty wins):
  line custom_price > company-service custom_price > service base price
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class PricedLine:
    """One validated booking line with the data pricing needs."""
    service_id: int
    quantity: int
    service_duration: int
    service_price: float
    company_service_id: Optional[int] = None
    company_service_price: Optional[float] = None
    custom_price: Optional[float] = None

    @property
    def unit_price(self) -> float:
        return resolve_unit_price(
            self.service_price,
            self.company_service_price,
            self.custom_price,
        )


def resolve_unit_price(
    service_price: float,
    company_service_price: Optional[float] = None,
    custom_price: Optional[float] = None,
) -> float:
    if custom_price is not None:
        return custom_price
    if company_service_price is not None:
        return company_service_price
    return service_price


def calculate_booking_totals(lines: list[PricedLine]) -> tuple[int, float]:
    """Return (total_duration_minutes, total_price)."""
    total_duration = 0
    total_price = 0.0

    for line in lines:
        total_duration += line.service_duration * line.quantity
        total_price += line.unit_price * line.quantity

    return total_duration, total_price
