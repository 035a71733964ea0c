from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Override from environment (.env / deployment secrets)
    database_url: str = "sqlite:///./gigboard.db"
    secret_key: str = "replace-with-a-long-random-secret-key"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 30  # 30 days
    app_env: str = "development"  # development, staging, production

    # CORS origins as comma-separated values
    # Example: "http://localhost:8081,https://gigboard.example.com"
    cors_allow_origins: str = "http://localhost:8081"

    log_level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR

    # Feed assembly
    feed_default_radius_km: float | None = None  # None = no radius cut
    feed_max_results: int = 200

    # Chat and notifications
    message_max_length: int = 2000
    notification_inbox_size: int = 50

    # Request guards
    rate_limit_apply_per_min: int = 30
    rate_limit_messages_per_min: int = 60

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
