from app.notifications.events import OrderEvent
from app.notifications.channels import Channel


NOTIFICATION_RULES = {

    OrderEvent.ORDER_PLACED: {
        Channel.INAPP_ADMIN: True,
        Channel.SUBSCRIBERS: True,
    },

    OrderEvent.ORDER_STATUS_CHANGED: {
        Channel.SUBSCRIBERS: True,
    },

    OrderEvent.SHIPMENT_UPDATED: {
        Channel.SUBSCRIBERS: True,
    },

    OrderEvent.LOW_STOCK: {
        Channel.INAPP_ADMIN: True,
        Channel.SUBSCRIBERS: True,
    },

}
