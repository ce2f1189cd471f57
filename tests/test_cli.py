"""Tests for the hosting SEO bot CLI."""

import pytest
from click.testing import CliRunner

from hostseo.seo_bot import cli


@pytest.fixture
def offline_env(monkeypatch):
    """No competitor feeds, no OpenAI key and no WordPress credentials."""
    monkeypatch.setenv("COMPETITOR_FEEDS", "")
    monkeypatch.setenv("OPENAI_API_KEY", "")
    for name in ("WORDPRESS_URL", "WORDPRESS_USER", "WORDPRESS_APP_PASSWORD"):
        monkeypatch.delenv(name, raising=False)


def test_cli_group_exists():
    """Test that the CLI group is properly defined."""
    runner = CliRunner()
    result = runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "Hosting SEO content bot CLI." in result.output
    for command in ("run", "topics", "headlines", "check-duplicate", "health", "config"):
        assert command in result.output


def test_topics_command(monkeypatch):
    monkeypatch.setenv("COMPETITOR_FEEDS", "https://www.bluehost.com/blog/feed/")
    monkeypatch.setenv("BRAND", "TurnUpHosting")
    result = CliRunner().invoke(cli, ["topics", "--limit", "2"])

    assert result.exit_code == 0
    assert "1. TurnUpHosting vs Bluehost" in result.output
    assert "2. Best Web Hosting for Small Businesses in 2025" in result.output
    assert "3." not in result.output


def test_dry_run_without_api_key_publishes_nothing(offline_env):
    result = CliRunner().invoke(cli, ["run", "--max", "2", "--dry-run"])

    assert result.exit_code == 0
    assert "Published 0 item(s)." in result.output
    assert result.output.count("skipped - ") == 2


def test_run_requires_wordpress(offline_env):
    result = CliRunner().invoke(cli, ["run"])
    assert result.exit_code == 1
    assert "WordPress is not configured" in result.output


def test_headlines_without_feeds(offline_env):
    result = CliRunner().invoke(cli, ["headlines"])
    assert result.exit_code == 0
    assert "No competitor headlines available" in result.output


def test_config_hides_secrets(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-secret-value")
    result = CliRunner().invoke(cli, ["config"])

    assert result.exit_code == 0
    assert "OpenAI: ✅ Configured" in result.output
    assert "sk-secret-value" not in result.output
