import os
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# Load the appropriate environment file
env_file = '.env.local' # if local or prod or staging
load_dotenv(env_file)


def _default_database_url() -> str:
    """Build the Postgres URL from the individual DB_* variables."""
    user = os.getenv('DB_USER', 'postgres')
    password = os.getenv('DB_PASSWORD', 'postgres')
    host = os.getenv('DB_HOST', 'localhost')
    port = os.getenv('DB_PORT', '5432')
    name = os.getenv('DB_NAME', 'school_records')
    return f"postgresql+psycopg://{user}:{password}@{host}:{port}/{name}"


class Settings(BaseSettings):
    """Application settings."""
    # App settings
    APP_ENV: str = os.getenv('APP_ENV', 'production')
    PORT: int = int(os.getenv('PORT', 5000))

    # Database settings (DATABASE_URL wins over the DB_* pieces)
    DATABASE_URL: str = os.getenv('DATABASE_URL') or _default_database_url()
    DB_ECHO: bool = os.getenv('DB_ECHO', 'false').lower() == 'true'

    # Auth tokens
    JWT_SECRET: str = os.getenv('JWT_SECRET', 'change-me-in-production')
    JWT_ALGORITHM: str = os.getenv('JWT_ALGORITHM', 'HS256')
    JWT_EXPIRES_HOURS: int = int(os.getenv('JWT_EXPIRES_HOURS', 24))

    # Marks policy: when false, one record per student+subject+exam type+academic year
    ALLOW_DUPLICATE_MARKS: bool = os.getenv('ALLOW_DUPLICATE_MARKS', 'false').lower() == 'true'

    # CORS
    FRONTEND_URL: str = os.getenv('FRONTEND_URL', '')
    ALLOW_ALL_ORIGINS: bool = os.getenv('ALLOW_ALL_ORIGINS', 'false').lower() == 'true'

    # API settings
    API_TITLE: str = "School Records API"
    API_DESCRIPTION: str = "Backend API for student, teacher and exam marks records"
    API_VERSION: str = "1.0.0"
    API_DOCS_URL: str = "/api/docs"
    API_REDOC_URL: str = "/api/redoc"
    API_OPENAPI_URL: str = "/api/openapi.json"

    class Config:
        env_file = env_file
        extra = "ignore"

settings = Settings()
