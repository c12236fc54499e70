import os
from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.exc import SQLAlchemyError
from loguru import logger
import time
import pandas as pd

from ..models.orm import Base

# Get database URL from environment variables with fallback
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./gym.db")


def _engine_options(url: str) -> dict:
    # SQLite connections are shared with the request threadpool
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True}


# Create SQLAlchemy engine and session
try:
    engine = create_engine(DATABASE_URL, **_engine_options(DATABASE_URL))
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    logger.info(f"Database connection initialized to {DATABASE_URL.rsplit('@', 1)[-1]}")
except SQLAlchemyError as e:
    logger.error(f"Failed to initialize database connection: {e}")
    raise


def get_db():
    """
    Dependency to get a database session
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None):
    """Create any missing tables"""
    Base.metadata.create_all(bind=bind or engine)
    logger.info("Database tables ensured")


async def check_db_connection(max_retries: int = 3, retry_interval: int = 2) -> bool:
    """
    Check database connection with retry mechanism
    """
    for attempt in range(max_retries):
        try:
            with SessionLocal() as db:
                db.execute(text("SELECT 1"))
                logger.info("Database connection successful")
                return True
        except SQLAlchemyError as e:
            logger.warning(f"Database connection attempt {attempt+1}/{max_retries} failed: {e}")
            if attempt < max_retries - 1:
                logger.info(f"Retrying in {retry_interval} seconds...")
                time.sleep(retry_interval)

    logger.error("All database connection attempts failed")
    return False


def query_to_dataframe(db: Session, query: str, params: dict = None) -> pd.DataFrame:
    """
    Execute SQL query and return results as pandas DataFrame
    """
    result = db.execute(text(query), params or {})
    columns = list(result.keys())
    return pd.DataFrame(result.fetchall(), columns=columns)
