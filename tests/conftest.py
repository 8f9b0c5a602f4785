"""Shared test fixtures."""

from datetime import date

import pytest

from flashsr.app import App
from flashsr.db import init_db


@pytest.fixture
def today():
    return date(2025, 3, 10)


@pytest.fixture
def tmp_sr_dir(tmp_path):
    """Create a temporary flashsr directory."""
    sr_dir = tmp_path / "sr_dir"
    sr_dir.mkdir()
    return sr_dir


@pytest.fixture
def db_conn():
    """In-memory SQLite database with schema applied."""
    conn = init_db(":memory:")
    yield conn
    conn.close()


@pytest.fixture
def app(tmp_sr_dir):
    """App instance with tmp sr_dir and in-memory DB."""
    a = App(sr_dir=tmp_sr_dir)
    a.init_db(":memory:")
    yield a
    a.close()
