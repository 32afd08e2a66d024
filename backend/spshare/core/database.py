from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, SQLModel, select
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type
import logging
from fastapi import HTTPException, Request

from .config import settings
from .exceptions import StoreError

logger = logging.getLogger(__name__)


@retry(
    stop=stop_after_attempt(5),
    wait=wait_exponential(multiplier=1, min=2, max=10),
    retry=retry_if_exception_type((SQLAlchemyError,)),
    reraise=True
)
def create_database_engine(database_url: Optional[str] = None) -> Engine:
    """Create database engine and probe the connection, retrying on failure.

    Only process startup retries; requests never do.
    """
    url = database_url or settings.DATABASE_URL
    logger.info(f"Attempting to connect to database: {url.split('@')[1] if '@' in url else 'hidden'}")

    if url.startswith("sqlite"):
        engine = create_engine(url, echo=settings.DEBUG, connect_args={"check_same_thread": False})
    else:
        engine = create_engine(
            url,
            echo=settings.DEBUG,
            pool_pre_ping=True,
            pool_recycle=300,  # Recycle connections every 5 minutes
            pool_size=10,
            max_overflow=20,
        )

    # Test the connection
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
        logger.info("Database connection successful!")

    return engine


def init_db(engine: Engine) -> None:
    """Create tables and seed the rows the application cannot run without."""
    # Imported here so every table is registered on SQLModel.metadata
    from ..models import ItemType, ItemTypeLimit, User, WorkflowStatus
    from .security import get_password_hash

    if settings.AUTO_CREATE_TABLES:
        logger.info("Auto-creating database tables...")
        SQLModel.metadata.create_all(engine)

    with Session(engine) as session:
        seeds = {
            ItemType.PICTURE: settings.PICTURE_MAX_ITEM_SPACE,
            ItemType.VIDEO: settings.VIDEO_MAX_ITEM_SPACE,
        }
        for item_type, max_space in seeds.items():
            if session.get(ItemTypeLimit, item_type) is None:
                logger.info(f"Seeding item-type limit for {item_type.label}: {max_space} MB")
                session.add(
                    ItemTypeLimit(
                        item_type=item_type,
                        name=item_type.label,
                        max_item_space=max_space,
                    )
                )

        if settings.FIRST_ADMIN_USERNAME and settings.FIRST_ADMIN_PASSWORD:
            username = settings.FIRST_ADMIN_USERNAME.lower()
            existing = session.exec(select(User).where(User.username == username)).first()
            if existing is None:
                logger.info(f"Creating bootstrap admin '{username}'")
                session.add(
                    User(
                        first_name="Admin",
                        last_name="User",
                        email=f"{username}@localhost",
                        username=username,
                        hashed_password=get_password_hash(settings.FIRST_ADMIN_PASSWORD),
                        is_admin=True,
                        workflow_status=WorkflowStatus.APPROVED,
                        max_item_count=settings.USER_MAX_ALLOWED_ITEMS,
                        max_item_space=settings.USER_MAX_ALLOWED_SPACE,
                    )
                )

        session.commit()


def get_db(request: Request):
    """Get database session bound to the application's engine."""
    engine = getattr(request.app.state, "engine", None)
    if engine is None:
        raise HTTPException(
            status_code=503,
            detail="Database is temporarily unavailable. Please try again later."
        )

    with Session(engine) as session:
        try:
            yield session
        finally:
            session.close()


def commit_or_raise(db: Session, message: str, context: str) -> None:
    """Commit the session; log and surface a generic error on failure."""
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"{context}. Error: {e}")
        raise StoreError(message) from e
