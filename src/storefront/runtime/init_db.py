"""Database initialization script."""

from src.storefront.core.services.database.db_session import DbSessionService


def init_db(db_session_service: DbSessionService | None = None) -> None:
    """Create all database tables."""
    (db_session_service or DbSessionService()).create_all()


if __name__ == "__main__":
    init_db()
