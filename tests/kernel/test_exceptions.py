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
"""Tests for the webcharset exception hierarchy."""

from __future__ import annotations

from webcharset.kernel.exceptions import (
    InvalidConfigurationException,
    UnsupportedEncodingException,
    WebCharsetException,
)


class TestWebCharsetException:
    def test_basic_creation(self):
        exc = WebCharsetException("something went wrong")
        assert str(exc) == "something went wrong"
        assert exc.code is None
        assert exc.context == {}

    def test_context_not_shared(self):
        a, b = WebCharsetException("a"), WebCharsetException("b")
        a.context["k"] = "v"
        assert b.context == {}


class TestSubclasses:
    def test_invalid_configuration(self):
        exc = InvalidConfigurationException("Encoding must not be empty", context={"encoding": ""})
        assert isinstance(exc, WebCharsetException)
        assert exc.code == "CONFIG_INVALID"
        assert exc.context == {"encoding": ""}

    def test_unsupported_encoding(self):
        exc = UnsupportedEncodingException("x-fake")
        assert isinstance(exc, WebCharsetException)
        assert exc.code == "ENCODING_UNSUPPORTED"
        assert exc.encoding == "x-fake"
        assert "x-fake" in str(exc)
