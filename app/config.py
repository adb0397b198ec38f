from decimal import Decimal
from typing import List, Optional
from urllib.parse import quote_plus

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    env: str = "local"
    log_level: str = "INFO"

    postgres_user: str = "nexoshop"
    postgres_password: str = "nexoshop"
    postgres_db: str = "nexoshop"
    postgres_host: str = "localhost"
    postgres_port: str = "5432"

    # Full SQLAlchemy URL, takes precedence over the postgres_* parts
    database_url_override: Optional[str] = None
    db_statement_timeout_ms: int = 5000

    secret_key: str = "change-me"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60

    # Checkout
    tax_rate: Decimal = Decimal("0.12")
    shipping_flat_rate: Decimal = Decimal("0.00")
    free_shipping_threshold: Optional[Decimal] = None
    shipping_carrier: str = "NexoExpress"
    strict_order_confirmation: bool = False
    low_stock_threshold: int = 5

    invoice_dir: str = "invoices"

    cors_origins: List[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
        "http://127.0.0.1:5173",
    ]

    @property
    def database_url(self):
        if self.database_url_override:
            return self.database_url_override

        encoded_password = quote_plus(self.postgres_password)
        return (
            f"postgresql+psycopg2://{self.postgres_user}:"
            f"{encoded_password}@{self.postgres_host}:"
            f"{self.postgres_port}/{self.postgres_db}"
        )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "allow"

settings = Settings()
