from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = "sqlite:///./askbuddy.db"
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    # Comma-separated allowed origins, or "*" to allow all.
    # Example: "https://askmebuddy.app,https://admin.askmebuddy.app"
    CORS_ORIGINS: str = "*"

    # Insert the default badge catalog on startup when the badges table is empty.
    SEED_BADGES_ON_STARTUP: bool = True

    RECENT_QUESTIONS_LIMIT: int = 20

    @property
    def cors_origins_list(self) -> list[str]:
        if self.CORS_ORIGINS.strip() == "*":
            return ["*"]
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
