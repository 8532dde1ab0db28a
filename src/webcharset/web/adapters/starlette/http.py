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
"""Starlette implementations of the HttpRequest/HttpResponse ports."""

from __future__ import annotations

from collections.abc import MutableMapping
from typing import Any

from starlette.datastructures import URL, MutableHeaders
from starlette.requests import Request, empty_receive
from starlette.responses import Response
from starlette.types import Receive, Scope

from webcharset.web.content_type import check_encoding, parse_content_type, replace_charset

REQUEST_ENCODING_ATTRIBUTE = "character_encoding"
RESPONSE_ENCODING_ATTRIBUTE = "response_character_encoding"


def _state(scope: Scope) -> dict[str, Any]:
    return scope.setdefault("state", {})


class StarletteHttpRequest:
    """Wraps a Starlette :class:`Request` as an ``HttpRequest``.

    The effective encoding lives in ``request.state.character_encoding`` so
    route handlers can read it, and is mirrored into the Content-Type header
    of the ASGI scope when the request has one.
    """

    def __init__(self, scope: Scope, receive: Receive = empty_receive) -> None:
        self._request = Request(scope, receive)
        self.dispatched = False

    @property
    def request(self) -> Request:
        return self._request

    @property
    def url(self) -> URL:
        return self._request.url

    @property
    def attributes(self) -> MutableMapping[str, Any]:
        return _state(self._request.scope)

    def get_character_encoding(self) -> str | None:
        explicit = self.attributes.get(REQUEST_ENCODING_ATTRIBUTE)
        if explicit is not None:
            return explicit
        content_type = self._request.headers.get("content-type")
        if content_type is None:
            return None
        return parse_content_type(content_type)[1]

    def set_character_encoding(self, encoding: str) -> None:
        check_encoding(encoding)
        self.attributes[REQUEST_ENCODING_ATTRIBUTE] = encoding

        scope = self._request.scope
        headers = []
        for name, value in scope.get("headers", []):
            if name.lower() == b"content-type":
                value = replace_charset(value.decode("latin-1"), encoding).encode("latin-1")
            headers.append((name, value))
        scope["headers"] = headers


class StarletteHttpResponse:
    """Collects response settings made by filters before the handler runs.

    The response encoding is recorded in request state and applied by
    :class:`WebFilterChainMiddleware` once the handler's body is available.
    ``status_code``, ``headers`` and ``body`` are only sent when a filter
    short-circuits the chain.
    """

    def __init__(self, scope: Scope) -> None:
        self._scope = scope
        self.status_code = 200
        self.headers = MutableHeaders()
        self.body = b""

    @property
    def character_encoding(self) -> str | None:
        return _state(self._scope).get(RESPONSE_ENCODING_ATTRIBUTE)

    def set_character_encoding(self, encoding: str) -> None:
        check_encoding(encoding)
        _state(self._scope)[RESPONSE_ENCODING_ATTRIBUTE] = encoding

    def to_starlette(self) -> Response:
        media_type = self.headers.get("content-type")
        if media_type is not None and self.character_encoding is not None:
            media_type = replace_charset(media_type, self.character_encoding)
        headers = {k: v for k, v in self.headers.items() if k.lower() != "content-type"}
        return Response(
            content=self.body,
            status_code=self.status_code,
            headers=headers,
            media_type=media_type,
        )
