import pytest
from pytest import MonkeyPatch

from previewlinks.constants import ENV


@pytest.fixture(autouse=True)
def lambda_environment(monkeypatch: MonkeyPatch) -> None:
    """Run handlers as deployed (not SAM local) with no optional settings."""
    monkeypatch.setenv(ENV.App.APP_ENV, 'test')
    monkeypatch.setenv(ENV.App.APP_NAME, 'previewlinks')
    monkeypatch.delenv(ENV.App.AWS_SAM_LOCAL, raising=False)
    monkeypatch.delenv(ENV.App.PUBLIC_BASE_URL, raising=False)
    monkeypatch.delenv(ENV.App.REGISTRATION_TIMEOUT, raising=False)
    for name in ENV.Screenshot:
        monkeypatch.delenv(name, raising=False)
