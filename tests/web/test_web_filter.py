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
"""Tests for WebFilter Protocol and OncePerRequestFilter base class."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from webcharset.testing import MockFilterChain, MockHttpRequest, MockHttpResponse
from webcharset.web.filters import OncePerRequestFilter
from webcharset.web.ports.filter import FilterChain, WebFilter

# ---------------------------------------------------------------------------
# WebFilter Protocol
# ---------------------------------------------------------------------------


class _DuckFilter:
    """Implements WebFilter via duck typing (no inheritance)."""

    def do_filter(self, request, response, chain):
        chain.do_filter(request, response)

    def should_not_filter(self, request) -> bool:
        return False


class TestWebFilterProtocol:
    def test_duck_typed_class_is_webfilter(self):
        assert isinstance(_DuckFilter(), WebFilter)

    def test_once_per_request_filter_is_webfilter(self):
        class _Concrete(OncePerRequestFilter):
            def do_filter_internal(self, request, response, chain):
                chain.do_filter(request, response)

        assert isinstance(_Concrete(), WebFilter)

    def test_non_filter_is_not_webfilter(self):
        class _NotAFilter:
            pass

        assert not isinstance(_NotAFilter(), WebFilter)

    def test_mock_chain_is_filter_chain(self):
        assert isinstance(MockFilterChain(), FilterChain)

    def test_abstract_base_cannot_be_instantiated(self):
        with pytest.raises(TypeError):
            OncePerRequestFilter()  # type: ignore[abstract]


# ---------------------------------------------------------------------------
# OncePerRequestFilter — should_not_filter
# ---------------------------------------------------------------------------


def _make_request(path: str) -> MagicMock:
    req = MagicMock()
    req.url.path = path
    return req


class _TestFilter(OncePerRequestFilter):
    def __init__(self) -> None:
        self.invocations = 0

    def do_filter_internal(self, request, response, chain):
        self.invocations += 1
        chain.do_filter(request, response)


class TestOncePerRequestFilterMatching:
    def test_no_patterns_matches_all(self):
        f = _TestFilter()
        assert not f.should_not_filter(_make_request("/anything"))
        assert not f.should_not_filter(_make_request("/api/v1/users"))

    def test_url_patterns_restrict(self):
        f = _TestFilter()
        f.url_patterns = ["/api/*"]
        assert not f.should_not_filter(_make_request("/api/orders"))
        assert f.should_not_filter(_make_request("/health"))

    def test_exclude_patterns_win(self):
        f = _TestFilter()
        f.url_patterns = ["/api/*"]
        f.exclude_patterns = ["/api/internal/*"]
        assert f.should_not_filter(_make_request("/api/internal/metrics"))
        assert not f.should_not_filter(_make_request("/api/orders"))


# ---------------------------------------------------------------------------
# OncePerRequestFilter — once-per-request guard
# ---------------------------------------------------------------------------


class _ReentrantChain:
    """Dispatches back through the same filter once, like a nested forward."""

    def __init__(self, web_filter: OncePerRequestFilter) -> None:
        self._filter = web_filter
        self.terminal = MockFilterChain(allow_reuse=True)
        self._depth = 0

    def do_filter(self, request, response):
        if self._depth == 0:
            self._depth += 1
            self._filter.do_filter(request, response, self.terminal)
        else:
            self.terminal.do_filter(request, response)


class TestOncePerRequestGuard:
    def test_nested_invocation_skips_filter(self):
        f = _TestFilter()
        chain = _ReentrantChain(f)
        f.do_filter(MockHttpRequest(), MockHttpResponse(), chain)

        assert f.invocations == 1
        assert chain.terminal.call_count == 1

    def test_skipped_path_still_calls_chain(self):
        f = _TestFilter()
        f.url_patterns = ["/api/*"]
        chain = MockFilterChain()
        f.do_filter(MockHttpRequest(path="/health"), MockHttpResponse(), chain)

        assert f.invocations == 0
        assert chain.call_count == 1

    def test_marker_removed_when_chain_fails(self):
        f = _TestFilter()
        request = MockHttpRequest()
        with pytest.raises(RuntimeError, match="boom"):
            f.do_filter(request, MockHttpResponse(), MockFilterChain(error=RuntimeError("boom")))

        assert request.attributes == {}

    def test_separate_requests_each_filtered(self):
        f = _TestFilter()
        for _ in range(3):
            f.do_filter(MockHttpRequest(), MockHttpResponse(), MockFilterChain())
        assert f.invocations == 3
