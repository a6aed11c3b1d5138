"""Session dependencies for FastAPI endpoints.

Mutating endpoints take `get_db_write`; read-only ones take `get_db_read` so
reads can be routed to a replica. Tests override both on the app.
"""

from .database import get_read_session, get_write_session


def get_db_write():
    """Yield a session bound to the primary (write) database."""
    yield from get_write_session()


def get_db_read():
    """Yield a session bound to the read database."""
    yield from get_read_session()
