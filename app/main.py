import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.database import create_db_and_tables
from app.routes import (
    admin_dashboard,
    admin_notifications,
    admin_orders,
    admin_products,
    admin_shipments,
    admin_users,
    auth,
    cart,
    categories_admin,
    categories_public,
    checkout,
    health,
    product_inventory,
    products_public,
    user_orders,
    users,
)

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Run DB creation ONLY in local, migrations own every other environment
    if settings.env == "local":
        create_db_and_tables()
    yield

app = FastAPI(title="NexoShop API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
app.include_router(users.router, prefix="/users", tags=["Users"])
app.include_router(products_public.router, prefix="/products", tags=["Public Products"])
app.include_router(categories_public.router, prefix="/categories", tags=["Public Categories"])
app.include_router(cart.router, prefix="/cart", tags=["Cart"])
app.include_router(checkout.router, prefix="/checkout", tags=["Checkout"])
app.include_router(user_orders.router, prefix="/orders", tags=["Orders"])
app.include_router(admin_products.router, prefix="/admin/products", tags=["Admin Products"])
app.include_router(categories_admin.router, prefix="/admin/categories", tags=["Admin Categories"])
app.include_router(admin_orders.router, prefix="/admin/orders", tags=["Admin Orders"])
app.include_router(product_inventory.router, prefix="/admin/inventory", tags=["Admin Inventory"])
app.include_router(admin_shipments.router, prefix="/admin/shipments", tags=["Admin Shipments"])
app.include_router(admin_users.router, prefix="/admin/users", tags=["Admin Users"])
app.include_router(admin_dashboard.router, prefix="/admin/dashboard", tags=["Admin Dashboard"])
app.include_router(admin_notifications.router, prefix="/admin/notifications", tags=["Admin Notifications"])
app.include_router(health.router, prefix="/health", tags=["Health"])


@app.get("/")
def root():
    return {
        "auth_endpoints": ["/auth/register", "/auth/login", "/auth/logout"],
        "user_endpoints": ["/users/me", "/users/update-profile", "/users/payment-methods"],
        "catalog": ["/products", "/products/{product_id}", "/categories", "/categories/{category_id}"],
        "cart": ["/cart", "/cart/add", "/cart/update/{id}", "/cart/remove/{id}", "/cart/clear"],
        "checkout": ["/checkout/summary", "/checkout/place-order"],
        "orders": ["/orders", "/orders/{order_id}", "/orders/{order_id}/invoice"],
    }
