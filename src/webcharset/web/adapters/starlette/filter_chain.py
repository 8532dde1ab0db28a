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
"""WebFilterChainMiddleware — pure ASGI middleware wrapping all WebFilters."""

from __future__ import annotations

import codecs
from collections.abc import Sequence

import structlog
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from webcharset.web.adapters.starlette.http import StarletteHttpRequest, StarletteHttpResponse
from webcharset.web.chain import ApplicationFilterChain
from webcharset.web.content_type import is_textual, parse_content_type, replace_charset
from webcharset.web.ports.filter import WebFilter

logger = structlog.get_logger("webcharset.web")

RawHeaders = list[tuple[bytes, bytes]]


def _mark_dispatched(request: StarletteHttpRequest, response: StarletteHttpResponse) -> None:
    """Terminal of the filter chain: the downstream app should run."""
    request.dispatched = True


class WebFilterChainMiddleware:
    """Pure ASGI middleware that executes a sorted chain of :class:`WebFilter` instances.

    Filters run synchronously before the downstream app. If every filter
    delegates, the app is invoked; otherwise the response assembled by the
    filters is sent as-is.

    When a filter has set a response character encoding, textual response
    bodies are re-encoded chunk by chunk as the app sends them; other
    responses are forwarded untouched.
    """

    def __init__(self, app: ASGIApp, filters: Sequence[WebFilter] = ()) -> None:
        self.app = app
        self._chain = ApplicationFilterChain(filters, _mark_dispatched)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = StarletteHttpRequest(scope, receive)
        response = StarletteHttpResponse(scope)
        self._chain.do_filter(request, response)

        if not request.dispatched:
            await response.to_starlette()(scope, receive, send)
            return

        encoding = response.character_encoding
        if encoding is None:
            await self.app(scope, receive, send)
            return

        recoder: ResponseRecoder | None = None

        async def _send(message: Message) -> None:
            nonlocal recoder
            if message["type"] == "http.response.start":
                recoder = ResponseRecoder.for_headers(list(message.get("headers", [])), encoding)
                if recoder is not None:
                    message = {**message, "headers": recoder.headers}
            elif message["type"] == "http.response.body" and recoder is not None:
                final = not message.get("more_body", False)
                message = {**message, "body": recoder.feed(message.get("body", b""), final=final)}
            await send(message)

        await self.app(scope, receive, _send)


class ResponseRecoder:
    """Incrementally re-encodes a textual response body into a target encoding.

    The source charset comes from the Content-Type header (UTF-8 when absent
    or unknown). Characters the target cannot represent become ``?``. Since
    the re-encoded length is not known up front, Content-Length is dropped.
    """

    def __init__(self, headers: RawHeaders, content_type: str, encoding: str) -> None:
        source = parse_content_type(content_type)[1] or "utf-8"
        try:
            decoder_cls = codecs.getincrementaldecoder(source)
        except LookupError:
            logger.warning("unknown_response_charset", charset=source, target=encoding)
            decoder_cls = codecs.getincrementaldecoder("utf-8")
        self._decoder = decoder_cls(errors="replace")
        self._encoder = codecs.getincrementalencoder(encoding)(errors="replace")

        self.headers: RawHeaders = []
        for name, value in headers:
            lowered = name.lower()
            if lowered == b"content-length":
                continue
            if lowered == b"content-type":
                value = replace_charset(content_type, encoding).encode("latin-1")
            self.headers.append((name, value))

    @classmethod
    def for_headers(cls, headers: RawHeaders, encoding: str) -> ResponseRecoder | None:
        """Return a recoder for a textual response, ``None`` for anything else."""
        for name, value in headers:
            if name.lower() == b"content-type":
                content_type = value.decode("latin-1")
                if is_textual(content_type):
                    return cls(headers, content_type, encoding)
                return None
        return None

    def feed(self, chunk: bytes, final: bool = False) -> bytes:
        text = self._decoder.decode(chunk, final)
        return self._encoder.encode(text, final)
