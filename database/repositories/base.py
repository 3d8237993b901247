from typing import Any, List, Optional

from sqlalchemy.orm import Session
from sqlalchemy.sql import Select


class BaseRepository:
    """Repositories share the caller's Session; sds_uow owns commit and rollback."""

    def __init__(self, db: Session):
        self.db = db

    def _first(self, stmt: Select) -> Optional[Any]:
        return self.db.execute(stmt).scalars().first()

    def _all(self, stmt: Select) -> List[Any]:
        return list(self.db.execute(stmt).scalars().all())
