"""Tests for configuration loading and validation."""

from utils.config import load_config, validate_config

VALID_CONFIG = {
    'gemini_api_key': 'key',
    'gemini_model': 'gemini-2.5-flash',
    'gemini_plan_model': 'gemini-3-pro-preview',
    'request_timeout_seconds': 180.0,
    'log_level': 'WARNING',
}


def test_valid_config_has_no_errors():
    assert validate_config(VALID_CONFIG) == []


def test_missing_api_key():
    errors = validate_config({**VALID_CONFIG, 'gemini_api_key': None})
    assert errors == ["GEMINI_API_KEY is required"]


def test_non_positive_timeout():
    errors = validate_config({**VALID_CONFIG, 'request_timeout_seconds': 0})
    assert errors == ["REQUEST_TIMEOUT_SECONDS must be a positive number"]


def test_unknown_log_level():
    errors = validate_config({**VALID_CONFIG, 'log_level': 'LOUD'})
    assert len(errors) == 1
    assert errors[0].startswith("LOG_LEVEL")


def test_load_config_reads_environment(monkeypatch):
    monkeypatch.setenv('GEMINI_API_KEY', 'from-env')
    monkeypatch.setenv('GEMINI_PLAN_MODEL', 'plan-model')
    monkeypatch.setenv('REQUEST_TIMEOUT_SECONDS', '45')

    config = load_config()

    assert config['gemini_api_key'] == 'from-env'
    assert config['gemini_plan_model'] == 'plan-model'
    assert config['request_timeout_seconds'] == 45.0
    assert config['export_destination_url'] == 'https://docs.new'


def test_load_config_accepts_api_key_fallback(monkeypatch):
    monkeypatch.delenv('GEMINI_API_KEY', raising=False)
    monkeypatch.setenv('API_KEY', 'fallback-key')

    assert load_config()['gemini_api_key'] == 'fallback-key'
