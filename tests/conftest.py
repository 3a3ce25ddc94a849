"""Shared test fixtures."""

from __future__ import annotations

import pytest

from edgewise.storage.db import close_db, open_db
from edgewise.storage.repo import EdgeRepository


@pytest.fixture
async def storage():
    db = await open_db(":memory:")
    repo = EdgeRepository(db, prefix="test_")
    await repo.init_schema()
    yield repo
    await close_db(db)
