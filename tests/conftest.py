import pytest


@pytest.fixture
def mock_settings():
    """Settings with no competitor feeds, so nothing reaches the network."""
    from hostseo.models.settings import Settings

    return Settings(
        brand="TurnUpHosting",
        openai_api_key="test_key",
        competitor_feeds="",
        duplicate_threshold=95,
        wordpress_url="https://blog.example.com",
        wordpress_user="editor",
        wordpress_app_password="abcd efgh ijkl",
    )
