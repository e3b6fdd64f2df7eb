import pytest

from tests.fixtures.fake_transport import FakeTransport
from vault_token_auth.api.auth import TokenAuth
from vault_token_auth.logging_config import error_aggregator
from vault_token_auth.utils import retry as retry_module


@pytest.fixture(autouse=True)
def _reset_error_aggregator(monkeypatch):
    """Keep error counts and rate alerts from leaking between tests."""
    error_aggregator.reset()
    monkeypatch.setattr(error_aggregator, "alerts_enabled", False)
    yield
    error_aggregator.reset()


@pytest.fixture(autouse=True)
def _no_retry_backoff(monkeypatch):
    """Collapse tenacity's exponential backoff to zero-second waits."""
    monkeypatch.setattr(retry_module, "RETRY_BACKOFF_MULTIPLIER", 0)
    monkeypatch.setattr(retry_module, "RETRY_MAX_BACKOFF_SECONDS", 0)


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def auth(transport: FakeTransport) -> TokenAuth:
    return TokenAuth(transport)
