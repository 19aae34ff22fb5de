from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional
from urllib.parse import quote_plus


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="allow",
    )
    # Application
    APP_NAME: str = "CampusCircle"
    PROJECT_NAME: str = "CampusCircle Marketplace API"
    API_PREFIX: str = "/api"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    ALLOWED_ORIGINS: List[str] = ["*"]

    # Public URL of the web client, used to build deep links in emails
    APP_BASE_URL: str = "http://localhost:3000"

    # Database
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USERNAME: str = "postgres"
    POSTGRES_PASSWORD: str = ""
    POSTGRES_DATABASE: str = "campuscircle"
    POSTGRES_SCHEMA: str = "public"

    # Overrides the POSTGRES_* components when set (e.g. sqlite:///./local.db)
    DATABASE_URL: Optional[str] = None
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20

    @property
    def database_url(self) -> str:
        """Construct database URL from individual components"""
        if self.DATABASE_URL:
            return self.DATABASE_URL

        # URL encode the password to handle special characters
        encoded_password = quote_plus(self.POSTGRES_PASSWORD)
        return f"postgresql+psycopg2://{self.POSTGRES_USERNAME}:{encoded_password}@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DATABASE}"

    # Security
    SECRET_KEY: str = "change-me"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # Shared secret for scheduler-triggered endpoints (Authorization: Bearer <secret>)
    CRON_SECRET: str = ""

    # AWS
    AWS_REGION: str = "ap-southeast-1"
    AWS_ACCESS_KEY_ID: Optional[str] = None
    AWS_SECRET_ACCESS_KEY: Optional[str] = None

    # Email
    SES_FROM_EMAIL: str = "CampusCircle <no-reply@campuscircle.id>"
    USE_REAL_EMAILS: bool = False
    SANDBOX_EMAIL: str = "delivered@resend.dev"

    # Business Rules
    HOLD_PERIOD_DAYS: int = 3  # 판매 대금 보류 기간
    PLATFORM_FEE_RATE: float = 0.05  # 플랫폼 수수료율
    GRACE_PERIOD_SECONDS: int = 60  # 안 읽은 메시지 이메일 발송 전 대기 시간

    # Sweep limits
    SWEEP_BATCH_SIZE: int = 100
    SWEEP_MAX_ROWS: int = 1000

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"


settings = Settings()
