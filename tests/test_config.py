"""Tests for settings resolution from the environment."""

from haven.config import Settings


class TestGeminiKey:
    def test_blank_primary_name_falls_back_to_alternate(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "")
        monkeypatch.setenv("GOOGLE_AI_API_KEY", "alt-key")

        assert Settings(_env_file=None).gemini_api_key == "alt-key"

    def test_primary_name_wins_when_both_are_set(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "main-key")
        monkeypatch.setenv("GOOGLE_AI_API_KEY", "alt-key")

        assert Settings(_env_file=None).gemini_api_key == "main-key"

    def test_alternate_name_alone(self, monkeypatch):
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        monkeypatch.setenv("GOOGLE_AI_API_KEY", "alt-key")

        assert Settings(_env_file=None).gemini_api_key == "alt-key"

    def test_neither_name_set(self, monkeypatch):
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        monkeypatch.delenv("GOOGLE_AI_API_KEY", raising=False)

        assert Settings(_env_file=None).gemini_api_key == ""
