import json
import logging

import pytest

from research_chat.agent.effort import derive_research_budget
from research_chat.settings import (
    AppSettings,
    ResearchSettings,
    StreamSettings,
    load_app_settings,
)

pytestmark = pytest.mark.unit


def test_defaults():
    settings = AppSettings()

    assert settings.stream.api_url == "http://localhost:8123"
    assert settings.stream.dev_api_url == "http://localhost:2024"
    assert settings.stream.assistant_id == "agent"
    assert settings.stream.messages_key == "messages"
    assert settings.stream.api_key is None
    assert settings.research.effort == "medium"
    assert settings.research.reasoning_model == "gemini-2.5-flash"
    assert settings.ui.log_level == logging.WARNING


def test_stream_urls_are_normalised():
    stream = StreamSettings(base_url="https://agent.example/ ", dev_api_url="")

    assert stream.api_url == "https://agent.example"
    assert stream.dev_api_url == "http://localhost:2024"
    assert stream.resolve_api_url() == "https://agent.example"
    assert stream.resolve_api_url(dev=True) == "http://localhost:2024"


def test_use_dev_server_switches_default_endpoint():
    stream = StreamSettings(use_dev_server=True)

    assert stream.resolve_api_url() == "http://localhost:2024"
    assert stream.resolve_api_url(dev=False) == "http://localhost:8123"


def test_blank_identifiers_fall_back_to_defaults():
    stream = StreamSettings(assistant_id="  ", messages_key=None, api_key="  ")

    assert stream.assistant_id == "agent"
    assert stream.messages_key == "messages"
    assert stream.api_key is None


def test_effort_stored_unchanged():
    assert ResearchSettings(effort="LOW").effort == "LOW"
    assert ResearchSettings(effort=" high").effort == " high"
    assert ResearchSettings(effort="extreme").effort == "extreme"
    assert ResearchSettings(effort=None).effort == "medium"


def test_configured_effort_budget_matches_direct_derivation(tmp_path):
    path = tmp_path / "settings.toml"
    path.write_text('[research]\neffort = "LOW"\n', encoding="utf-8")

    effort = load_app_settings(path).research.effort

    assert derive_research_budget(effort).as_tuple() == (0, 0)
    assert derive_research_budget(effort) == derive_research_budget("LOW")


def test_load_toml(tmp_path):
    path = tmp_path / "settings.toml"
    path.write_text(
        '[stream]\napi_url = "http://remote:8123/"\napi_key = "k"\n'
        '[research]\neffort = "low"\n'
        '[ui]\nlanguage = "ru"\nlog_level = 10\n',
        encoding="utf-8",
    )

    settings = load_app_settings(path)

    assert settings.stream.api_url == "http://remote:8123"
    assert settings.stream.api_key == "k"
    assert settings.research.effort == "low"
    assert settings.ui.language == "ru"
    assert settings.ui.log_level == logging.DEBUG


def test_load_json(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(
        json.dumps({"research": {"reasoning_model": "gemini-2.5-pro"}}),
        encoding="utf-8",
    )

    settings = load_app_settings(path)

    assert settings.research.reasoning_model == "gemini-2.5-pro"
    assert settings.stream == StreamSettings()


def test_invalid_settings_raise_value_error(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"stream": {"timeout_seconds": 0}}), encoding="utf-8")

    with pytest.raises(ValueError, match="timeout_seconds"):
        load_app_settings(path)


def test_dumped_settings_validate_back():
    settings = AppSettings()

    assert AppSettings.model_validate(settings.model_dump()) == settings
