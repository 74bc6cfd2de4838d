"""Tests for waypoint.config: AppConfig, Settings validation, default transformer."""

import logging

import pytest

from waypoint.config import (
    GET_TRANSFORMER,
    AppConfig,
    Settings,
    Transformer,
    configure_logging,
    transformer_key,
)
from waypoint.errors import ConfigurationError
from waypoint.testing import FakeTransport
from waypoint.transport import HttpxTransport


class TestAppConfig:
    def test_defaults(self) -> None:
        cfg = AppConfig()
        assert cfg.base_url == ""
        assert cfg.timeout == 30.0
        assert cfg.follow_redirects is True
        assert cfg.debug is False
        assert cfg.log_level == "warning"

    def test_override(self) -> None:
        cfg = AppConfig(base_url="https://api.example.com", timeout=5.0)
        assert cfg.base_url == "https://api.example.com"
        assert cfg.timeout == 5.0

    def test_frozen(self) -> None:
        cfg = AppConfig()
        with pytest.raises(AttributeError):
            cfg.debug = True  # type: ignore[misc]


class TestSettings:
    def test_transformer_key(self) -> None:
        assert transformer_key("get") == "http GET transformer"

    def test_get_transformer_default(self) -> None:
        assert Settings().get("http GET transformer") is GET_TRANSFORMER

    def test_requester_default_built_from_config(self) -> None:
        cfg = AppConfig(base_url="https://example.com")
        settings = Settings(cfg)
        requester = settings.get("http requester")
        assert isinstance(requester, HttpxTransport)
        assert requester.config is cfg
        assert settings.get("http requester") is requester

    def test_contains(self) -> None:
        settings = Settings()
        assert "http requester" in settings
        assert "http GET transformer" in settings
        assert "nope" not in settings

    def test_free_form_keys(self) -> None:
        settings = Settings()
        settings.set("theme", "dark")
        assert settings.get("theme") == "dark"
        assert settings.get("other", "fallback") == "fallback"

    def test_requester_must_have_fetch(self) -> None:
        with pytest.raises(ConfigurationError, match="fetch"):
            Settings().set("http requester", "not a transport")

    def test_requester_accepted(self) -> None:
        settings = Settings()
        transport = FakeTransport()
        settings.set("http requester", transport)
        assert settings.get("http requester") is transport

    def test_transformer_needs_a_callable_field(self) -> None:
        with pytest.raises(ConfigurationError, match="http POST transformer"):
            Settings().set("http POST transformer", Transformer())

    def test_transformer_rejects_non_callable_field(self) -> None:
        with pytest.raises(ConfigurationError):
            Settings().set("http POST transformer", {"uri": "/fixed"})

    def test_transformer_can_be_cleared(self) -> None:
        settings = Settings()
        settings.set("http GET transformer", None)
        assert settings.get("http GET transformer") is None

    def test_transformer_key_is_case_insensitive_on_method(self) -> None:
        settings = Settings()
        transformer = Transformer(uri=lambda *, uri, headers, data: uri)
        settings.set("http post transformer", transformer)
        assert settings.get("http POST transformer") is transformer
        assert settings.get("http post transformer") is transformer
        assert "http Post transformer" in settings

    def test_name_must_be_string(self) -> None:
        with pytest.raises(ConfigurationError):
            Settings().set("", 1)


class TestGetTransformer:
    def _uri(self, uri: str, data) -> str:
        return GET_TRANSFORMER.uri(uri=uri, headers={}, data=data)  # type: ignore[misc]

    def test_no_data(self) -> None:
        assert self._uri("/a", None) == "/a"

    def test_query_before_fragment(self) -> None:
        assert self._uri("/a#frag", {"q": "x y"}) == "/a?q=x+y#frag"

    def test_sequences_repeat_keys(self) -> None:
        assert self._uri("/a", {"t": ["1", "2"]}) == "/a?t=1&t=2"

    def test_non_mapping_data_untouched(self) -> None:
        assert self._uri("/a", "raw") == "/a"
        assert GET_TRANSFORMER.data(uri="/a", headers={}, data="raw") == "raw"  # type: ignore[misc]


class TestConfigureLogging:
    def test_level_from_config(self) -> None:
        configure_logging(AppConfig(log_level="info"))
        assert logging.getLogger("waypoint").level == logging.INFO

    def test_debug_wins(self) -> None:
        configure_logging(AppConfig(debug=True, log_level="error"))
        assert logging.getLogger("waypoint").level == logging.DEBUG

    def test_unknown_level(self) -> None:
        with pytest.raises(ConfigurationError, match="verbose"):
            configure_logging(AppConfig(log_level="verbose"))
