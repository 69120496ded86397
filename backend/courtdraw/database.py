"""
Engine and session wiring.

DATABASE_URL selects the backend (a local SQLite file by default) and
SQL_ECHO=1 logs every statement. Both are read from the environment or a
.env file at import time.
"""

import os
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

from dotenv import load_dotenv
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

load_dotenv()

DEFAULT_DATABASE_URL = "sqlite:///./courtdraw.db"
_TRUTHY = {"1", "true", "yes", "on"}


def engine_options(url: str, echo_flag: str = "") -> Dict[str, Any]:
    """Keyword arguments for create_engine, derived from the URL scheme."""
    options: Dict[str, Any] = {"echo": echo_flag.strip().lower() in _TRUTHY}
    if url.startswith("sqlite"):
        # Request handlers run on a threadpool and share the connection
        options["connect_args"] = {"check_same_thread": False}
    return options


def sqlite_file(url: str) -> Optional[Path]:
    """Filesystem path of a file-backed SQLite URL, or None."""
    if not url.startswith("sqlite:///") or ":memory:" in url:
        return None
    return Path(url[len("sqlite:///"):])


def build_engine(url: str) -> Engine:
    db_file = sqlite_file(url)
    if db_file is not None:
        db_file.parent.mkdir(parents=True, exist_ok=True)
    return create_engine(url, **engine_options(url, os.getenv("SQL_ECHO", "")))


DATABASE_URL = os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)
engine: Engine = build_engine(DATABASE_URL)


def get_session() -> Iterator[Session]:
    """FastAPI dependency yielding one session per request."""
    with Session(engine) as session:
        yield session


def init_db() -> None:
    """Register the tournament, participant and match tables, then create any that are missing."""
    from courtdraw.models import match, participant, tournament  # noqa: F401

    SQLModel.metadata.create_all(engine)
