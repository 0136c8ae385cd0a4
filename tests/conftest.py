# Test configuration
import os
import sys
import time
from pathlib import Path

import pytest
from jose import jwt

REPO_ROOT = Path(__file__).parent.parent
FIXTURES = Path(__file__).parent / "fixtures"

# Add repo root to path so tests can import modules
sys.path.insert(0, str(REPO_ROOT))

# Settings are read at import time by tool_gateway.main
TEST_SECRET = "test-secret-key"
os.environ["JWT_SECRET_KEY"] = TEST_SECRET
os.environ["TOOLS_CONFIG_PATH"] = str(FIXTURES / "tools.config.json")
os.environ.setdefault("LOG_LEVEL", "WARNING")


def make_token(
    sub: str | None = "user123",
    role: str | None = "admin",
    expires_in: int = 600,
    secret: str = TEST_SECRET,
    **extra,
) -> str:
    """Sign a test JWT with the shared test secret."""
    payload = dict(extra)
    if sub is not None:
        payload["sub"] = sub
    if role is not None:
        payload["role"] = role
    payload["exp"] = int(time.time()) + expires_in
    return jwt.encode(payload, secret, algorithm="HS256")


@pytest.fixture
def token() -> str:
    return make_token()


@pytest.fixture
def auth_headers(token) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def tools_config_path() -> Path:
    return FIXTURES / "tools.config.json"


@pytest.fixture
def token_factory():
    return make_token
