from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    log_level: str = "INFO"

    database_url: str = "postgresql+psycopg://app:app@db:5432/app"
    redis_url: str = "redis://redis:6379/0"

    # per-statement deadline; a store call past it surfaces as transient
    db_statement_timeout_ms: int = 5000

    jwt_secret: str = "dev-secret-change-me"
    jwt_issuer: str = "taskhub-api"
    jwt_audience: str = "taskhub-api"
    jwt_expires_minutes: int = 60

    cors_origins: str = "*"

    # rate limiting (redis)
    rate_limit_enabled: bool = True
    rate_limit_auth_register_per_min: int = 10
    rate_limit_auth_login_per_min: int = 30

settings = Settings()
