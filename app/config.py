from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Literal
from pathlib import Path


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    database_url: str = ""

    # Redis
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: str | None = None

    # JWT
    jwt_secret_key: str = "dev-secret-key-change-in-production"
    jwt_algorithm: str = "HS256"
    jwt_access_token_expire_minutes: int = 15
    jwt_refresh_token_expire_days: int = 7

    # Security
    bcrypt_cost_factor: int = 12
    rate_limit_failed_logins: int = 5
    rate_limit_window_minutes: int = 15

    # CORS
    cors_origins: str = "*"  # Comma-separated origins or * for dev

    # Logging
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "text"

    # Environment
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = True

    # Lesson materials
    upload_base_dir: Path = Path("./uploads")
    materials_url_prefix: str = "/materials"
    max_material_size_mb: int = 50

    # Hotmart webhook
    hotmart_hottok: str = ""
    default_display_name: str = "Estudiante"
    generated_password_bytes: int = 12

    @property
    def cors_origin_list(self) -> list[str]:
        if self.cors_origins == "*":
            return ["*"]
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    def missing_required(self) -> List[str]:
        """Names of required keys that are empty for the current environment."""
        missing = []
        if not self.database_url:
            missing.append("DATABASE_URL")
        if not self.hotmart_hottok:
            missing.append("HOTMART_HOTTOK")
        if self.environment != "development" and (
            not self.jwt_secret_key or self.jwt_secret_key.startswith("dev-")
        ):
            missing.append("JWT_SECRET_KEY")
        return missing


# Global settings instance
settings = Settings()
