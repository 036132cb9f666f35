"""
Platform fee computation.

The service charge is collected from the client on top of the project
amount, and only for admin-managed projects. The commission is
informational at collection time: it is deducted from the freelancer's
share when funds are released.

All amounts are Decimals in whole currency units. Fees round half-up to
the nearest unit.

Usage:
    from payments.fees import compute_fees

    fees = compute_fees(Decimal("1200"), admin_managed=True)
    fees.service_charge   # Decimal("60")
    fees.commission_fee   # Decimal("120")
    fees.grand_total      # Decimal("1260")
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from django.conf import settings

from core.exceptions import ValidationError

WHOLE_UNIT = Decimal("1")


@dataclass(frozen=True)
class FeeBreakdown:
    """Result of compute_fees."""

    total_amount: Decimal
    service_charge: Decimal
    commission_fee: Decimal

    @property
    def grand_total(self) -> Decimal:
        """Amount actually collected from the client."""
        return self.total_amount + self.service_charge

    @property
    def release_amount(self) -> Decimal:
        return self.total_amount - self.service_charge - self.commission_fee


def to_amount(value) -> Decimal:
    """Coerce ints, strings and floats to Decimal without float artefacts."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_amount(value: Decimal) -> Decimal:
    return value.quantize(WHOLE_UNIT, rounding=ROUND_HALF_UP)


def percent_of(amount: Decimal, percent) -> Decimal:
    return round_amount(amount * to_amount(percent) / Decimal("100"))


def compute_fees(
    total_amount,
    admin_managed: bool,
    *,
    service_charge_percent=None,
    commission_percent=None,
) -> FeeBreakdown:
    """
    Compute the platform fees for a project amount.

    Args:
        total_amount: Base project amount, must be positive
        admin_managed: Whether the project is under admin management
        service_charge_percent: Override for PLATFORM_SERVICE_CHARGE_PERCENT
        commission_percent: Override for PLATFORM_COMMISSION_PERCENT

    Raises:
        ValidationError: total_amount is not positive
    """
    amount = to_amount(total_amount)
    if amount <= 0:
        raise ValidationError(
            "Total amount must be greater than zero",
            error_code="INVALID_AMOUNT",
            details={"total_amount": str(amount)},
        )

    if service_charge_percent is None:
        service_charge_percent = settings.PLATFORM_SERVICE_CHARGE_PERCENT
    if commission_percent is None:
        commission_percent = settings.PLATFORM_COMMISSION_PERCENT

    service_charge = percent_of(amount, service_charge_percent) if admin_managed else Decimal("0")
    commission_fee = percent_of(amount, commission_percent)

    return FeeBreakdown(
        total_amount=amount,
        service_charge=service_charge,
        commission_fee=commission_fee,
    )
