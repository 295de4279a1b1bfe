from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Tests import springops from the checkout, installed or not.
SRC = Path(__file__).resolve().parent / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from springops.api.session import REFRESH_KEY, ROLE_KEY, TOKEN_KEY, USER_KEY  # noqa: E402


@pytest.fixture
def signed_in_storage() -> dict:
    """Browser storage as it looks after a manager logged in."""
    return {
        TOKEN_KEY: "t",
        REFRESH_KEY: "r",
        ROLE_KEY: "manager",
        USER_KEY: {"id": 1, "email": "mgr@plant.test", "first_name": "Mira", "last_name": "Shah"},
    }
