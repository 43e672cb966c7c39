from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    # Core
    environment: str = Field(default="dev", alias="ENVIRONMENT")
    app_name: str = Field(default="Ehub Project Management", alias="APP_NAME")
    tz_default: str = Field(default="UTC", alias="TZ_DEFAULT")

    # Backend API
    api_base_url: str = Field(
        default="/api",
        alias="EHUB_API_URL",
        description="e.g., https://ehub.example.com/api",
    )
    api_timeout_s: float = Field(default=30.0, alias="EHUB_API_TIMEOUT")  # per attempt
    rate_limit_max_retries: int = Field(default=3, alias="RATE_LIMIT_MAX_RETRIES")
    network_max_retries: int = Field(default=2, alias="NETWORK_MAX_RETRIES")

    # Token storage
    token_store_path: str = Field(default="var/auth.json", alias="EHUB_TOKEN_STORE")

    # Mail
    mail_from: str = Field(default="noreply@ehub.com", alias="MAIL_FROM")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


settings = Settings()
