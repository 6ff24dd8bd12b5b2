
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    PROJECT_NAME: str = "Bookshelf API"
    API_V1_STR: str = "/api/v1"
    LOG_LEVEL: str = "INFO"

    # Compared against the X-Admin-Secret header on /admin routes
    ADMIN_SECRET_KEY: str = "change-this-admin-secret"

    # Database
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "12345"
    POSTGRES_DB: str = "bookshelf_db"
    POSTGRES_PORT: int = 5432
    DATABASE_URL: str = ""

    # Slugs
    SLUG_PLACEHOLDER_PREFIX: str = "book-"
    SLUG_FALLBACK: str = "untitled"
    SLUG_MAX_ATTEMPTS: int = 10000
    SLUG_MAX_LENGTH: int = 255

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore"
    )

    def assemble_db_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

settings = Settings()
settings.DATABASE_URL = settings.assemble_db_url()
