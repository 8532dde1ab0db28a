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
"""OncePerRequestFilter — base class for WebFilter with URL-pattern matching.

Framework-agnostic: accesses ``request.url.path`` and ``request.attributes``
via attribute protocol so no Starlette import is needed.
"""

from __future__ import annotations

import abc
from fnmatch import fnmatch

from webcharset.web.ports.filter import FilterChain
from webcharset.web.ports.http import HttpRequest, HttpResponse

ALREADY_FILTERED_SUFFIX = ".FILTERED"


class OncePerRequestFilter(abc.ABC):
    """Abstract base class for :class:`WebFilter` implementations.

    Guarantees a single execution per request: if the same filter is reached
    again while it is already running for a request (e.g. via a nested
    dispatch), the nested call goes straight to the chain.

    Attributes:
        url_patterns: Glob patterns that this filter applies to.
            If empty (default), the filter applies to *all* paths.
        exclude_patterns: Glob patterns to exclude even if ``url_patterns``
            matches.  Checked *after* ``url_patterns``.
    """

    url_patterns: list[str] = []
    exclude_patterns: list[str] = []

    @property
    def already_filtered_attribute_name(self) -> str:
        return type(self).__name__ + ALREADY_FILTERED_SUFFIX

    def should_not_filter(self, request: HttpRequest) -> bool:
        """Return ``True`` if the request path does not match this filter's patterns."""
        path: str = request.url.path

        if self.url_patterns and not any(fnmatch(path, p) for p in self.url_patterns):
            return True

        return bool(
            self.exclude_patterns and any(fnmatch(path, p) for p in self.exclude_patterns)
        )

    def do_filter(self, request: HttpRequest, response: HttpResponse, chain: FilterChain) -> None:
        attribute = self.already_filtered_attribute_name
        attributes = request.attributes

        if attributes.get(attribute) or self.should_not_filter(request):
            chain.do_filter(request, response)
            return

        attributes[attribute] = True
        try:
            self.do_filter_internal(request, response, chain)
        finally:
            attributes.pop(attribute, None)

    @abc.abstractmethod
    def do_filter_internal(self, request: HttpRequest, response: HttpResponse, chain: FilterChain) -> None:
        """Execute the filter logic. Must call ``chain.do_filter(request, response)`` to proceed."""
        ...
