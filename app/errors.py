"""Typed errors raised by the storefront services.

Routes translate these into HTTP responses; the checkout orchestrator
catches them per stage to decide between aborting and degrading.
"""


class StorefrontError(Exception):
    """Base exception for all storefront errors."""

    pass


# ---------- validation ----------

class CheckoutValidationError(StorefrontError):
    """Rejected before any mutation."""

    pass


class EmptyCart(CheckoutValidationError):
    def __init__(self):
        super().__init__("Your cart is empty")


class InvalidQuantity(CheckoutValidationError):
    def __init__(self, product_id, quantity):
        self.product_id = product_id
        self.quantity = quantity
        super().__init__(f"Invalid quantity {quantity!r} for product {product_id}")


class InvalidUnitPrice(CheckoutValidationError):
    def __init__(self, product_id, unit_price):
        self.product_id = product_id
        self.unit_price = unit_price
        super().__init__(f"Invalid unit price {unit_price} for product {product_id}")


class MissingShippingAddress(CheckoutValidationError):
    def __init__(self, missing: list[str] | None = None):
        self.missing = missing or []
        msg = "Shipping address is required"
        if self.missing:
            msg = f"{msg} (missing: {', '.join(self.missing)})"
        super().__init__(msg)


class ProductUnavailable(CheckoutValidationError):
    def __init__(self, product_id):
        self.product_id = product_id
        super().__init__(f"Product {product_id} is not available")


# ---------- reservation conflict ----------

class InsufficientStock(StorefrontError):
    def __init__(self, product_id, requested: int, available: int):
        self.product_id = product_id
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient stock for product {product_id}: "
            f"requested {requested}, available {available}"
        )

    def __eq__(self, other):
        if not isinstance(other, InsufficientStock):
            return NotImplemented
        return (self.product_id, self.requested, self.available) == (
            other.product_id, other.requested, other.available
        )

    def __hash__(self):
        return hash((self.product_id, self.requested, self.available))


# ---------- critical write failures ----------

class OrderCreationFailed(StorefrontError):
    def __init__(self, reason: str | None = None):
        self.reason = reason
        msg = "Order could not be created"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)


class OrderNumberExhausted(OrderCreationFailed):
    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(f"no unique order number after {attempts} attempts")


# ---------- soft failures ----------

class FulfillmentFailed(StorefrontError):
    def __init__(self, record: str, order_id: int, reason: str | None = None):
        self.record = record
        self.order_id = order_id
        self.reason = reason
        msg = f"Could not create {record} for order {order_id}"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)


class InvoiceGenerationFailed(StorefrontError):
    def __init__(self, order_id: int, reason: str | None = None):
        self.order_id = order_id
        self.reason = reason
        msg = f"Could not generate invoice for order {order_id}"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)


# ---------- state machines ----------

class InvalidStatusTransition(StorefrontError):
    def __init__(self, entity: str, current: str, target: str):
        self.entity = entity
        self.current = current
        self.target = target
        super().__init__(f"Cannot move {entity} from '{current}' to '{target}'")
