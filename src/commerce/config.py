"""Application settings.

Protean's own configuration (databases, processing mode) lives in
``domain.toml``. Everything the application layer needs (gateway and image
store selection, credentials, retry policy, logging) is read here once and
passed to components explicitly.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="COMMERCE_", env_file=".env", extra="ignore")

    environment: str = "development"
    log_level: str | None = None
    log_dir: str | None = "logs"

    # Optimistic-concurrency retries per command
    max_transaction_attempts: int = 3

    payment_gateway: str = "fake"  # fake | razorpay
    payment_currency: str = "INR"
    razorpay_key_id: str = ""
    razorpay_key_secret: str = ""
    razorpay_api_url: str = "https://api.razorpay.com/v1"

    image_store: str = "fake"  # fake | cloudinary
    cloudinary_cloud_name: str = ""
    cloudinary_api_key: str = ""
    cloudinary_api_secret: str = ""

    email_backend: str = "fake"  # fake | smtp
    smtp_host: str = "localhost"
    smtp_port: int = 587
    smtp_username: str = ""
    smtp_password: str = ""
    smtp_use_tls: bool = True
    notification_sender: str = "no-reply@commerce.local"

    request_timeout_seconds: float = 10.0

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"


@lru_cache
def get_settings() -> Settings:
    """Settings for the running process, read from the environment once."""
    return Settings()
