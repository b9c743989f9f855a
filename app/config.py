from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    randomization_secret: str | None = Field(default=None, alias="RANDOMIZATION_SECRET")
    token_secret: str | None = Field(default=None, alias="TOKEN_SECRET")
    app_url: str = Field(default="http://localhost:8000", alias="APP_URL")
    database_url: str = Field(default="postgresql+asyncpg://postgres:postgres@db:5432/strengths_db", alias="DATABASE_URL")
    sync_database_url: str = Field(default="postgresql+psycopg2://postgres:postgres@db:5432/strengths_db", alias="SYNC_DATABASE_URL")
    environment: str = Field(default="development", alias="ENVIRONMENT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    max_team_size: int = Field(default=100, alias="MAX_TEAM_SIZE")

    smtp_host: str = Field(default="localhost", alias="SMTP_HOST")
    smtp_port: int = Field(default=1025, alias="SMTP_PORT")
    smtp_username: str | None = Field(default=None, alias="SMTP_USERNAME")
    smtp_password: str | None = Field(default=None, alias="SMTP_PASSWORD")
    smtp_use_tls: bool = Field(default=False, alias="SMTP_USE_TLS")
    smtp_from_email: str = Field(default="assessment@example.com", alias="SMTP_FROM_EMAIL")
    smtp_from_name: str = Field(default="Operating Strengths Assessment", alias="SMTP_FROM_NAME")

    class Config:
        env_file = ".env"
        case_sensitive = False

    @property
    def base_url(self) -> str:
        return self.app_url.rstrip("/")


settings = Settings()
