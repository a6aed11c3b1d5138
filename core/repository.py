"""Repository pattern base class for database operations.

Provides common CRUD operations and transaction helpers to keep routers and
services free of session boilerplate.
"""

import math
from sqlalchemy.orm import Session
from typing import TypeVar, Generic, Type, Optional, List, Any, Tuple, Dict
from database.models import Base

T = TypeVar('T', bound=Base)


class BaseRepository(Generic[T]):
    """Generic repository for common database operations.

    Attributes:
        model: SQLAlchemy model class to operate on.
        session: Database session for executing queries.
    """

    def __init__(self, model: Type[T], session: Session):
        self.model = model
        self.session = session

    def create(self, obj: T) -> T:
        """Add, commit and refresh a new object."""
        return save(self.session, obj)

    def get_by_id(self, id: Any) -> Optional[T]:
        """Retrieve an object by its primary key, or None."""
        return self.session.get(self.model, id)

    def update(self, obj: T) -> T:
        """Commit changes to an existing object and refresh."""
        self.session.commit()
        self.session.refresh(obj)
        return obj

    def delete(self, obj: T) -> None:
        """Delete an object and commit."""
        self.session.delete(obj)
        self.session.commit()

    def count(self, *criteria) -> int:
        """Count records matching optional filter criteria."""
        return self.session.query(self.model).filter(*criteria).count()

    def paginate(self, query, page: int, limit: int) -> Tuple[List[T], Dict[str, int]]:
        """Apply 1-based page/limit to a query.

        Returns:
            The rows of the page and a pagination summary with
            ``total``, ``page``, ``limit`` and ``totalPages``.
        """
        total = query.count()
        rows = query.offset((page - 1) * limit).limit(limit).all()
        return rows, {
            "total": total,
            "page": page,
            "limit": limit,
            "totalPages": math.ceil(total / limit) if limit else 0,
        }


def save(session: Session, obj: Base) -> Base:
    """Convenience function to add, commit and refresh an object.

    Args:
        session: Database session.
        obj: Model instance to persist.

    Returns:
        The persisted object with refreshed attributes.
    """
    session.add(obj)
    session.commit()
    session.refresh(obj)
    return obj


def save_all(session: Session, objects: List[Base]) -> List[Base]:
    """Add multiple objects, commit and refresh them."""
    session.add_all(objects)
    session.commit()
    for obj in objects:
        session.refresh(obj)
    return objects
