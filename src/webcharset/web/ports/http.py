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
"""Request/response ports consumed by web filters.

Adapters (e.g. Starlette) implement these so that filters never import a
vendor-specific request type.
"""

from __future__ import annotations

from collections.abc import MutableMapping
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class HttpRequest(Protocol):
    """An inbound HTTP request whose character encoding can be read and set."""

    @property
    def url(self) -> Any:
        """URL object exposing at least ``path``."""
        ...

    @property
    def attributes(self) -> MutableMapping[str, Any]:
        """Per-request attribute storage shared by all filters."""
        ...

    def get_character_encoding(self) -> str | None:
        """Return the request's character encoding, or ``None`` if unspecified."""
        ...

    def set_character_encoding(self, encoding: str) -> None:
        """Override the encoding used to decode the request body.

        Raises:
            UnsupportedEncodingException: If *encoding* is not recognized.
        """
        ...


@runtime_checkable
class HttpResponse(Protocol):
    """An outbound HTTP response whose character encoding can be set."""

    @property
    def character_encoding(self) -> str | None: ...

    def set_character_encoding(self, encoding: str) -> None:
        """Set the encoding used to encode the response body.

        Raises:
            UnsupportedEncodingException: If *encoding* is not recognized.
        """
        ...
