import pytest

from lockerhub.config.settings import Settings, get_settings
from lockerhub.core.session import SessionStore


@pytest.fixture
def settings() -> Settings:
    base = get_settings()
    return base.model_copy(update={"api": base.api.model_copy(update={"base_url": "https://api.test"})})


@pytest.fixture
def session(tmp_path) -> SessionStore:
    return SessionStore(tmp_path / "session.json")
