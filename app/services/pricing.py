"""Cart pricing.

All arithmetic happens in integer minor units (cents); ``Decimal`` values
only appear at the edges, when reading prices and when building the
breakdown that gets persisted or serialized.
"""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Sequence

from app.errors import EmptyCart, InvalidQuantity, InvalidUnitPrice
from app.schemas.checkout_schemas import CartLine, PricingBreakdown

CENT = Decimal("0.01")
MINOR_UNITS = 100


@dataclass(frozen=True)
class ShippingPolicy:
    flat_rate: Decimal = Decimal("0.00")
    free_threshold: Optional[Decimal] = None

    def cost_minor(self, subtotal_minor: int) -> int:
        if self.free_threshold is not None and subtotal_minor >= to_minor_units(self.free_threshold):
            return 0
        return to_minor_units(self.flat_rate)


def to_minor_units(amount) -> int:
    """Decimal/str/int amount -> integer cents, rounding half up."""
    value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    return int((value * MINOR_UNITS).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_minor_units(units: int) -> Decimal:
    return (Decimal(units) / MINOR_UNITS).quantize(CENT)


def format_money(amount) -> str:
    if amount is None:
        return None
    return str(from_minor_units(to_minor_units(amount)))


def line_total_minor(line: CartLine) -> int:
    return to_minor_units(line.unit_price) * line.quantity


def validate_lines(lines: Sequence[CartLine]) -> None:
    if not lines:
        raise EmptyCart()

    for line in lines:
        # bool is an int subclass, reject it explicitly
        if isinstance(line.quantity, bool) or not isinstance(line.quantity, int) or line.quantity <= 0:
            raise InvalidQuantity(line.product_id, line.quantity)
        if to_minor_units(line.unit_price) < 0:
            raise InvalidUnitPrice(line.product_id, line.unit_price)


def calculate_pricing(
    lines: Sequence[CartLine],
    tax_rate: Decimal,
    shipping_policy: ShippingPolicy,
) -> PricingBreakdown:
    validate_lines(lines)

    subtotal = sum(line_total_minor(line) for line in lines)
    tax = int((Decimal(subtotal) * Decimal(str(tax_rate))).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    shipping = shipping_policy.cost_minor(subtotal)

    return PricingBreakdown(
        subtotal=from_minor_units(subtotal),
        tax_amount=from_minor_units(tax),
        shipping_cost=from_minor_units(shipping),
        grand_total=from_minor_units(subtotal + tax + shipping),
    )


def pricing_from_settings(lines: Sequence[CartLine], settings) -> PricingBreakdown:
    policy = ShippingPolicy(
        flat_rate=settings.shipping_flat_rate,
        free_threshold=settings.free_shipping_threshold,
    )
    return calculate_pricing(lines, settings.tax_rate, policy)
