"""Engine options derived from DATABASE_URL and SQL_ECHO."""
from pathlib import Path

from sqlmodel import SQLModel

from courtdraw.database import engine_options, init_db, sqlite_file


def test_sqlite_allows_cross_thread_connections():
    options = engine_options("sqlite:///./courtdraw.db")
    assert options == {"echo": False, "connect_args": {"check_same_thread": False}}


def test_postgres_gets_no_connect_args():
    options = engine_options("postgresql://user:pw@db/courtdraw", "yes")
    assert options == {"echo": True}


def test_echo_flag_parsing():
    assert engine_options("sqlite://", " TRUE ")["echo"] is True
    assert engine_options("sqlite://", "0")["echo"] is False


def test_sqlite_file_path():
    assert sqlite_file("sqlite:///./data/courtdraw.db") == Path("./data/courtdraw.db")
    assert sqlite_file("sqlite:///:memory:") is None
    assert sqlite_file("postgresql://db/courtdraw") is None


def test_init_db_registers_all_tables():
    init_db()
    assert {"tournament", "participant", "match"} <= set(SQLModel.metadata.tables)
