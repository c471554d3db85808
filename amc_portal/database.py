# amc_portal/database.py
# Persistence gateway: owns the SQLAlchemy engine and the session factory

import logging
import time
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Union

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi import Request

logger = logging.getLogger(__name__)

Base = declarative_base()


class Database:
    """Explicitly constructed connection pool with an open/query/close lifecycle"""

    def __init__(self, url: str, echo: bool = False, sslmode: Optional[str] = None):
        self.url = url
        self.echo = echo
        self.sslmode = sslmode
        self.engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    @property
    def is_open(self) -> bool:
        return self.engine is not None

    def open(self) -> "Database":
        if self.engine is not None:
            return self

        kwargs: Dict[str, Any] = {"echo": self.echo}
        if self.url.startswith("sqlite"):
            kwargs["connect_args"] = {"check_same_thread": False}
            # in-memory databases live inside one connection
            if self.url in ("sqlite://", "sqlite:///:memory:"):
                kwargs["poolclass"] = StaticPool
        else:
            kwargs["pool_pre_ping"] = True
            if self.sslmode:
                kwargs["connect_args"] = {"sslmode": self.sslmode}

        self.engine = create_engine(self.url, **kwargs)
        self._attach_query_logging(self.engine)
        self._session_factory = sessionmaker(
            autocommit=False, autoflush=False, expire_on_commit=False, bind=self.engine
        )
        logger.info(f"Database engine created for {self.engine.url.render_as_string(hide_password=True)}")
        return self

    def close(self) -> None:
        if self.engine is not None:
            self.engine.dispose()
            logger.info("Database engine disposed")
        self.engine = None
        self._session_factory = None

    def _require_open(self) -> sessionmaker:
        if self._session_factory is None:
            raise RuntimeError("Database is not open")
        return self._session_factory

    def new_session(self) -> Session:
        return self._require_open()()

    @contextmanager
    def session(self) -> Iterator[Session]:
        db = self.new_session()
        try:
            yield db
        finally:
            db.close()

    def query(self, sql: str, params: Optional[Dict[str, Any]] = None) -> Union[List[Dict[str, Any]], int]:
        """Run one parameterized statement in its own transaction.

        Returns the rows as dicts for statements that produce rows, otherwise
        the affected row count.
        """
        self._require_open()
        with self.engine.begin() as conn:
            result = conn.execute(text(sql), params or {})
            if result.returns_rows:
                return [dict(row) for row in result.mappings()]
            return result.rowcount

    def create_all(self) -> None:
        # models register themselves on Base when imported
        import amc_portal.models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def drop_all(self) -> None:
        import amc_portal.models  # noqa: F401

        Base.metadata.drop_all(bind=self.engine)

    @staticmethod
    def _attach_query_logging(engine: Engine) -> None:
        @event.listens_for(engine, "before_cursor_execute")
        def _before(conn, cursor, statement, parameters, context, executemany):
            conn.info.setdefault("query_start", []).append(time.perf_counter())

        @event.listens_for(engine, "after_cursor_execute")
        def _after(conn, cursor, statement, parameters, context, executemany):
            started = conn.info["query_start"].pop()
            duration_ms = (time.perf_counter() - started) * 1000
            logger.debug(f"Query executed: {statement[:50]!r} ({duration_ms:.1f} ms, {cursor.rowcount} rows)")


def get_db(request: Request) -> Iterator[Session]:
    db: Session = request.app.state.database.new_session()
    try:
        yield db
    finally:
        db.close()
