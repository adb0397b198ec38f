from enum import Enum


class OrderEvent(str, Enum):
    ORDER_PLACED = "order_placed"
    ORDER_STATUS_CHANGED = "order_status_changed"
    SHIPMENT_UPDATED = "shipment_updated"
    LOW_STOCK = "low_stock"
