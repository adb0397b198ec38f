from app.services.pricing import format_money


def product_out(p, low_stock_threshold: int | None = None) -> dict:
    data = {
        "id": p.id,
        "name": p.name,
        "slug": p.slug,
        "description": p.description,
        "image_url": p.image_url,
        "price": format_money(p.price),
        "stock": p.stock,
        "in_stock": p.in_stock,
        "is_active": p.is_active,
        "is_featured": p.is_featured,
        "category_id": p.category_id,
    }
    if low_stock_threshold is not None:
        data["low_stock"] = p.stock <= low_stock_threshold
    return data


def order_summary_out(o) -> dict:
    return {
        "id": o.id,
        "order_number": o.order_number,
        "status": o.status,
        "total_amount": format_money(o.total_amount),
        "created_at": o.created_at,
    }


def order_item_out(i) -> dict:
    return {
        "product_id": i.product_id,
        "product_name": i.product_name,
        "product_image": i.product_image,
        "unit_price": format_money(i.unit_price),
        "quantity": i.quantity,
        "line_total": format_money(i.line_total),
    }


def order_detail_out(o, items, payment=None, shipment=None, invoice=None) -> dict:
    return {
        **order_summary_out(o),
        "user_id": o.user_id,
        "subtotal": format_money(o.subtotal),
        "tax_amount": format_money(o.tax_amount),
        "shipping_cost": format_money(o.shipping_cost),
        "shipping": {
            "address": o.shipping_address,
            "city": o.shipping_city,
            "postal_code": o.shipping_postal_code,
            "country": o.shipping_country,
        },
        "items": [order_item_out(i) for i in items],
        "payment": payment_out(payment) if payment else None,
        "shipment": shipment_out(shipment) if shipment else None,
        "invoice": invoice_out(invoice) if invoice else None,
    }


def payment_out(p) -> dict:
    return {
        "id": p.id,
        "transaction_id": p.transaction_id,
        "amount": format_money(p.amount),
        "status": p.status,
        "method": p.method,
    }


def shipment_out(s) -> dict:
    return {
        "id": s.id,
        "order_id": s.order_id,
        "status": s.status,
        "tracking_number": s.tracking_number,
        "carrier": s.carrier,
        "updated_at": s.updated_at,
    }


def invoice_out(inv) -> dict:
    return {
        "id": inv.id,
        "invoice_number": inv.invoice_number,
        "order_id": inv.order_id,
        "subtotal": format_money(inv.subtotal),
        "tax_amount": format_money(inv.tax_amount),
        "shipping_cost": format_money(inv.shipping_cost),
        "total_amount": format_money(inv.total_amount),
        "status": inv.status,
        "created_at": inv.created_at,
    }
