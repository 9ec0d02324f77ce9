import pytest

from qrdine.core.db import close_db, init_db


@pytest.fixture
async def db(tmp_path):
    """Fresh SQLite database per test, schemas generated from the models."""
    await init_db(f"sqlite://{tmp_path / 'qrdine.sqlite3'}")
    yield
    await close_db()
