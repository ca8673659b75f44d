"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest
from bru_to_oc.models import Request
from bru_to_oc.parser import parse
from bru_to_oc.transform import transform

from tests.fixtures.sample_bru import CREATE_USER_BRU, GET_USERS_BRU


@pytest.fixture
def get_users_bru() -> str:
    """Return the minimal GET request source."""
    return GET_USERS_BRU


@pytest.fixture
def create_user_bru() -> str:
    """Return the full-featured POST request source."""
    return CREATE_USER_BRU


@pytest.fixture
def create_user_request() -> Request:
    """Return the transformed full-featured request."""
    return transform(parse(CREATE_USER_BRU))


@pytest.fixture
def collection_dir(tmp_path: Path) -> Path:
    """Create a small collection tree with one broken file.

    Layout::

        collection/
          collection.bru
          get-users.bru
          broken.bru
          users/
            folder.bru
            create-user.bru
    """
    root = tmp_path / "collection"
    (root / "users").mkdir(parents=True)
    (root / "collection.bru").write_text("meta {\n  name: collection\n}\n")
    (root / "get-users.bru").write_text(GET_USERS_BRU)
    (root / "broken.bru").write_text("meta {\n  name: broken\n")
    (root / "users" / "folder.bru").write_text("meta {\n  name: users\n}\n")
    (root / "users" / "create-user.bru").write_text(CREATE_USER_BRU)
    return root
