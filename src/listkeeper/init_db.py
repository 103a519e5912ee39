"""Create the example application's tables in the configured database."""

from listkeeper.core.settings import settings
from listkeeper.db.session import create_tables


def init_db() -> None:
    """Initialize the database by creating all tables."""
    create_tables()


if __name__ == "__main__":
    init_db()
    print(f"Database initialized at {settings.effective_database_url}.")
