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
"""WebFilter and FilterChain protocols — framework-agnostic filter interface.

Filters run synchronously in the caller's thread. Each receives the request,
the response and a :class:`FilterChain` representing the rest of the pipeline.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class FilterChain(Protocol):
    """The remainder of a processing pipeline, invoked once per request."""

    def do_filter(self, request: Any, response: Any) -> None:
        """Pass the request and response to the next stage."""
        ...


@runtime_checkable
class WebFilter(Protocol):
    """Protocol for HTTP request/response filters.

    Filters are executed in order (sorted by ``@order``) inside an
    ``ApplicationFilterChain``. A filter inspects or mutates the request and
    response, then either delegates to ``chain.do_filter`` or short-circuits.

    Implement this protocol directly *or* extend ``OncePerRequestFilter``
    for URL-pattern matching and re-entrancy protection.
    """

    def do_filter(self, request: Any, response: Any, chain: FilterChain) -> None:
        """Execute this filter's logic.

        Args:
            request: The incoming HTTP request.
            response: The outgoing HTTP response.
            chain: The next filter in the chain (or the target handler).
        """
        ...

    def should_not_filter(self, request: Any) -> bool:
        """Return ``True`` to skip this filter for the given request."""
        ...
