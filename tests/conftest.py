import pytest

from gyazo.config import GyazoConfig


@pytest.fixture
def config() -> GyazoConfig:
    return GyazoConfig(
        api_url="https://api.example.test",
        upload_url="https://upload.example.test",
        auth_url="https://auth.example.test/oauth/authorize",
        token_url="https://auth.example.test/oauth/token",
        timeout=5.0,
    )
