"""
Unit tests for settings loading.
"""

from config import Settings


def test_defaults(monkeypatch):
    monkeypatch.delenv("JUDGMENT_API_KEY", raising=False)
    settings = Settings(_env_file=None)

    assert settings.min_free_form_length == 3
    assert settings.get_adaptation_config() == {
        "upper_threshold": 0.8,
        "lower_threshold": 0.6,
        "remediation_threshold": 2,
    }
    assert not settings.has_judgment_configured()


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("JUDGMENT_API_KEY", "secret")
    monkeypatch.setenv("REMEDIATION_THRESHOLD", "3")
    settings = Settings(_env_file=None)

    assert settings.has_judgment_configured()
    assert settings.remediation_threshold == 3
    assert settings.get_judgment_config()["api_key"] == "secret"
