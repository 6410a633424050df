import pytest

from rest_sdk import config as sdk_config


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "slow: tests waiting for real retry intervals")


@pytest.fixture
def no_retry_delay(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(sdk_config, "REQUEST_RETRY_INTERVAL", 0.0)
