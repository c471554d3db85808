"""Base repository: holds the session and the commit/refresh helper."""

from sqlalchemy.orm import Session


class BaseRepository:
    """Each public method is its own unit of work: it commits before returning."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def _save(self, obj):
        self.db.add(obj)
        self.db.commit()
        self.db.refresh(obj)
        return obj
