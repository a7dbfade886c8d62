"""
Database connection and session management.
"""
from sqlalchemy import create_engine
from sqlalchemy.ext.declarative import declarative_base
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from pathlib import Path
import os
from dotenv import load_dotenv

load_dotenv()

BACKEND_DIR = Path(__file__).resolve().parents[2]

# Get settings from environment
database_url = os.getenv("DATABASE_URL", "sqlite:///./tatdocs.db")
sql_echo = os.getenv("SQL_ECHO", "").lower() in ("1", "true", "yes")
export_dir = os.getenv("EXPORT_DIR", str(BACKEND_DIR / "exports"))
cors_origins = os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:5173")


class Settings:
    database_url = database_url
    sql_echo = sql_echo
    export_dir = export_dir
    cors_origins = [origin.strip() for origin in cors_origins.split(",") if origin.strip()]


settings = Settings()


def _engine_kwargs(url: str) -> dict:
    kwargs = {"echo": settings.sql_echo}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        # In-memory databases must share one connection across threads
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
    return kwargs


engine = create_engine(settings.database_url, **_engine_kwargs(settings.database_url))
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """Dependency for getting database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
