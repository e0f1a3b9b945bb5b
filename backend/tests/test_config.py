"""Tests for environment-backed configuration."""

import logging

from cellar.config import Config


class TestSearchLanguages:
    def test_default(self, monkeypatch):
        monkeypatch.delenv("SEARCH_LANGUAGES", raising=False)
        assert Config.search_languages() == ["en", "fr"]

    def test_unsupported_codes_skipped_with_warning(self, monkeypatch, caplog):
        monkeypatch.setenv("SEARCH_LANGUAGES", "EN, de,fr,en")
        with caplog.at_level(logging.WARNING):
            assert Config.search_languages() == ["en", "fr"]
        assert "de" in caplog.text

    def test_nothing_supported_falls_back_to_defaults(self, monkeypatch, caplog):
        monkeypatch.setenv("SEARCH_LANGUAGES", "nl,es")
        with caplog.at_level(logging.WARNING):
            assert Config.search_languages() == ["en", "fr"]

    def test_recognition_service_builds_with_unsupported_code(self, monkeypatch):
        from cellar.models.enums import SearchLanguage
        from cellar.services.recognition import WineRecognitionService

        monkeypatch.setenv("SEARCH_LANGUAGES", "fr,xx")
        service = WineRecognitionService(client=object())
        assert service.languages == [SearchLanguage.FR]
