# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Tests for building the encoding filter and middleware from configuration."""

from __future__ import annotations

import json
import logging

import pytest
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import PlainTextResponse
from starlette.routing import Route
from starlette.testclient import TestClient

from webcharset.core.config import Config
from webcharset.kernel.exceptions import InvalidConfigurationException, UnsupportedEncodingException
from webcharset.logging.structlog_adapter import StructlogAdapter
from webcharset.web.adapters.starlette.filter_chain import WebFilterChainMiddleware
from webcharset.web.auto_configuration import (
    character_encoding_filter,
    configure_logging,
    encoding_middleware,
)
from webcharset.web.character_encoding import CharacterEncodingFilter


def _encoding_config(**values) -> Config:
    return Config({"webcharset": {"encoding": values}})


class TestCharacterEncodingFilterFactory:
    def test_defaults_to_utf8_without_force(self):
        f = character_encoding_filter(Config({}))
        assert isinstance(f, CharacterEncodingFilter)
        assert f.encoding == "UTF-8"
        assert f.force_encoding is False

    def test_reads_charset_and_force(self):
        f = character_encoding_filter(_encoding_config(charset="ISO-8859-1", force=True))
        assert f is not None
        assert f.encoding == "ISO-8859-1"
        assert f.force_encoding is True

    def test_disabled_returns_none(self):
        assert character_encoding_filter(_encoding_config(enabled=False)) is None

    def test_empty_charset_rejected(self):
        with pytest.raises(InvalidConfigurationException):
            character_encoding_filter(_encoding_config(charset=""))

    def test_unknown_charset_fails_fast(self):
        with pytest.raises(UnsupportedEncodingException):
            character_encoding_filter(_encoding_config(charset="klingon-8"))

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("WEBCHARSET_ENCODING_FORCE", "yes")
        f = character_encoding_filter(Config({}))
        assert f is not None
        assert f.force_encoding is True


class TestEncodingMiddleware:
    def test_disabled_gives_no_middleware(self):
        assert encoding_middleware(_encoding_config(enabled=False)) == []

    def test_middleware_wraps_filter_chain(self):
        (middleware,) = encoding_middleware(Config({}))
        assert middleware.cls is WebFilterChainMiddleware

    def test_end_to_end(self):
        async def handler(request: Request) -> PlainTextResponse:
            return PlainTextResponse("ü")

        app = Starlette(
            routes=[Route("/", handler)],
            middleware=encoding_middleware(_encoding_config(charset="ISO-8859-1", force=True)),
        )
        resp = TestClient(app).get("/")
        assert resp.content == b"\xfc"
        assert resp.headers["content-type"] == "text/plain; charset=ISO-8859-1"


class TestConfigureLogging:
    def test_without_logging_settings_does_nothing(self):
        assert configure_logging(Config({})) is None

    def test_middleware_setup_applies_logging_settings(self, capsys):
        config = Config(
            {
                "webcharset": {
                    "logging": {"format": "json", "level": {"webcharset.web": "DEBUG"}},
                    "encoding": {"charset": "UTF-16"},
                }
            }
        )
        try:
            encoding_middleware(config)

            assert logging.getLogger("webcharset.web").level == logging.DEBUG
            lines = [line for line in capsys.readouterr().out.splitlines() if line.startswith("{")]
            events = [json.loads(line) for line in lines]
            assert [e["event"] for e in events] == [
                "character_encoding_filter_created",
                "character_encoding_filter_configured",
            ]
            assert events[1]["charset"] == "UTF-16"
        finally:
            StructlogAdapter().reset()
            logging.getLogger("webcharset.web").setLevel(logging.NOTSET)

    def test_warning_level_silences_setup_events(self, capsys):
        config = Config({"webcharset": {"logging": {"format": "json", "level": "WARNING"}}})
        try:
            encoding_middleware(config)
            assert capsys.readouterr().out == ""
        finally:
            StructlogAdapter().reset()
            logging.getLogger("webcharset").setLevel(logging.NOTSET)
