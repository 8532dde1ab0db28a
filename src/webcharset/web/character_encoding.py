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
"""CharacterEncodingFilter — applies a configured character encoding."""

from __future__ import annotations

import structlog

from webcharset.core.ordering import HIGHEST_PRECEDENCE, order
from webcharset.kernel.exceptions import InvalidConfigurationException
from webcharset.web.filters import OncePerRequestFilter
from webcharset.web.ports.filter import FilterChain
from webcharset.web.ports.http import HttpRequest, HttpResponse

logger = structlog.get_logger("webcharset.web")


@order(HIGHEST_PRECEDENCE)
class CharacterEncodingFilter(OncePerRequestFilter):
    """Sets a character encoding on the request, and optionally the response.

    Without ``force_encoding`` the encoding is only applied when the request
    does not already declare one, and the response is left alone. With
    ``force_encoding`` it overrides any request encoding and is applied to the
    response as well.

    Configure the filter before it receives traffic: the setters are not
    synchronized against concurrent :meth:`apply` calls.

    Args:
        encoding: The encoding to apply, e.g. ``"UTF-8"``. May be omitted and
            supplied later through :meth:`set_encoding`.
        force_encoding: Whether the encoding overrides existing request and
            response encodings.

    Raises:
        InvalidConfigurationException: If *encoding* is given but empty.
    """

    def __init__(self, encoding: str | None = None, force_encoding: bool = False) -> None:
        if encoding is not None and not encoding.strip():
            raise InvalidConfigurationException(
                "Encoding must not be empty",
                context={"encoding": encoding},
            )
        self._encoding = encoding
        self._force_encoding = force_encoding
        logger.debug(
            "character_encoding_filter_created",
            encoding=encoding,
            force_encoding=force_encoding,
        )

    @property
    def encoding(self) -> str | None:
        return self._encoding

    @property
    def force_encoding(self) -> bool:
        return self._force_encoding

    def set_encoding(self, encoding: str | None) -> None:
        """Set the encoding to use for requests (``None`` disables the filter)."""
        self._encoding = encoding
        logger.debug("character_encoding_changed", encoding=encoding)

    def set_force_encoding(self, force_encoding: bool) -> None:
        """Set whether the encoding overrides existing request and response encodings."""
        self._force_encoding = force_encoding
        logger.debug("force_encoding_changed", force_encoding=force_encoding)

    def apply(self, request: HttpRequest, response: HttpResponse, chain: FilterChain) -> None:
        """Apply the configured encoding, then invoke *chain* exactly once.

        Errors raised by the encoding setters or by *chain* propagate
        unchanged; mutations made before the failure are kept.
        """
        encoding = self._encoding
        force = self._force_encoding
        if encoding is not None and (force or request.get_character_encoding() is None):
            request.set_character_encoding(encoding)
            if force:
                response.set_character_encoding(encoding)
        chain.do_filter(request, response)

    def do_filter_internal(self, request: HttpRequest, response: HttpResponse, chain: FilterChain) -> None:
        self.apply(request, response, chain)
