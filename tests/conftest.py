import pytest

from wecall.networking.config import reset_default_config


@pytest.fixture(autouse=True)
def _reset_default_config():
    reset_default_config()
    yield
    reset_default_config()
