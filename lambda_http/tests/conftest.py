import json

import pytest

from lambda_http.config import BridgeConfig

from .events import SAMPLE_EVENT


@pytest.fixture
def sample_event():
    return json.loads(json.dumps(SAMPLE_EVENT))


@pytest.fixture
def make_config():
    """Build a BridgeConfig isolated from .env files."""

    def _make(**overrides) -> BridgeConfig:
        return BridgeConfig(_env_file=None, **overrides)

    return _make
