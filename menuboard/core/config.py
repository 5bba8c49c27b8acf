from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: Optional[str] = None
    sql_echo: bool = False
    log_level: str = "INFO"
    cors_origins: List[str] = ["*"]

    # 🔐 Replace with something strong and secure
    auth_secret: str = "menuboard-super-secret-key"
    jwt_lifetime_seconds: int = 3600
    jwt_audience: str = "fastapi-users:auth"

    # Object storage (DigitalOcean Spaces / any S3 endpoint)
    spaces_key: Optional[str] = None
    spaces_secret: Optional[str] = None
    spaces_region: str = "nyc3"
    spaces_bucket: Optional[str] = None
    spaces_endpoint: Optional[str] = None  # e.g. https://nyc3.digitaloceanspaces.com
    spaces_cdn_base: Optional[str] = None  # e.g. https://<bucket>.nyc3.cdn.digitaloceanspaces.com
    spaces_prefix: str = "prod"

    # Email
    resend_api_key: Optional[str] = None
    mail_from: Optional[str] = None
    frontend_url: str = "http://localhost:5173"

    default_menu_logo_url: Optional[str] = None


settings = Settings()
