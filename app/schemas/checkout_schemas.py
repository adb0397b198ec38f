# app/schemas/checkout_schemas.py
from decimal import Decimal
from pydantic import BaseModel, Field
from typing import List, Optional


class CartLine(BaseModel):
    product_id: int
    quantity: int
    unit_price: Decimal          # live catalog price when the cart is read
    product_name: str
    product_image: Optional[str] = None


class PricingBreakdown(BaseModel):
    subtotal: Decimal
    tax_amount: Decimal
    shipping_cost: Decimal
    grand_total: Decimal


class ShippingDetails(BaseModel):
    address: str = ""
    city: str = ""
    postal_code: Optional[str] = None
    country: Optional[str] = "Ecuador"


class PlaceOrderRequest(BaseModel):
    shipping: ShippingDetails
    payment_method: str = Field(default="card", pattern="^(card|paypal|cash)$")
    # a saved method overrides payment_method
    payment_method_id: Optional[int] = None


class CheckoutWarningOut(BaseModel):
    stage: str
    message: str


class CheckoutSummaryLine(BaseModel):
    product_id: int
    product_name: str
    product_image: Optional[str] = None
    unit_price: Decimal
    quantity: int
    line_total: Decimal


class CheckoutSummary(BaseModel):
    items: List[CheckoutSummaryLine]
    pricing: PricingBreakdown


class PlaceOrderResponse(BaseModel):
    message: str
    order_id: int
    order_number: str
    status: str
    pricing: PricingBreakdown
    warnings: List[CheckoutWarningOut] = []
    needs_followup: bool = False
