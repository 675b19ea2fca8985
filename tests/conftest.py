import pytest

from sunrisescore.config.settings import Settings, get_settings


@pytest.fixture
def settings() -> Settings:
    return get_settings()
