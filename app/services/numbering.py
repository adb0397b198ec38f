import secrets
import string
import time

ALPHABET = string.ascii_uppercase + string.digits
SUFFIX_LENGTH = 5

ORDER_PREFIX = "ORD"
INVOICE_PREFIX = "INV"
TRACKING_PREFIX = "NEXO"
TRANSACTION_PREFIX = "TXN"


def _millis() -> int:
    return int(time.time() * 1000)


def generate_number(prefix: str) -> str:
    """PREFIX-<epoch millis>-<5 random chars>, e.g. ORD-1718031234567-X7K2Q"""
    suffix = "".join(secrets.choice(ALPHABET) for _ in range(SUFFIX_LENGTH))
    return f"{prefix}-{_millis()}-{suffix}"


def generate_order_number() -> str:
    return generate_number(ORDER_PREFIX)


def generate_invoice_number() -> str:
    return generate_number(INVOICE_PREFIX)


def generate_tracking_number() -> str:
    return generate_number(TRACKING_PREFIX)


def generate_transaction_id() -> str:
    return generate_number(TRANSACTION_PREFIX)
