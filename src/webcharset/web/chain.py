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
"""ApplicationFilterChain — runs an ordered list of WebFilters, then a target."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

from webcharset.core.ordering import sort_by_order
from webcharset.web.ports.filter import FilterChain, WebFilter

Target = Callable[[Any, Any], None]


class _Link:
    """One position in the chain: a filter plus the chain after it."""

    __slots__ = ("_filter", "_next")

    def __init__(self, web_filter: WebFilter, next_link: FilterChain) -> None:
        self._filter = web_filter
        self._next = next_link

    def do_filter(self, request: Any, response: Any) -> None:
        self._filter.do_filter(request, response, self._next)


class _TargetLink:
    __slots__ = ("_target",)

    def __init__(self, target: Target) -> None:
        self._target = target

    def do_filter(self, request: Any, response: Any) -> None:
        self._target(request, response)


class ApplicationFilterChain:
    """A :class:`FilterChain` over filters sorted by ``@order``.

    The links are built once at construction and hold no per-request
    position, so a single instance may serve concurrent requests.
    ``should_not_filter`` is left to each filter (``OncePerRequestFilter``
    checks it in ``do_filter``).
    """

    def __init__(self, filters: Sequence[WebFilter], target: Target) -> None:
        self._filters = sort_by_order(filters)
        head: FilterChain = _TargetLink(target)
        for f in reversed(self._filters):
            head = _Link(f, head)
        self._head = head

    @property
    def filters(self) -> list[WebFilter]:
        return list(self._filters)

    def do_filter(self, request: Any, response: Any) -> None:
        self._head.do_filter(request, response)
