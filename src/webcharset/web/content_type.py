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
"""Helpers for the ``charset`` parameter of Content-Type values."""

from __future__ import annotations

import codecs

from webcharset.kernel.exceptions import UnsupportedEncodingException


def check_encoding(encoding: str) -> str:
    """Return the canonical codec name for *encoding*.

    Raises:
        UnsupportedEncodingException: If the codec registry does not know it.
    """
    try:
        return codecs.lookup(encoding).name
    except LookupError as exc:
        raise UnsupportedEncodingException(encoding) from exc


def parse_content_type(value: str) -> tuple[str, str | None]:
    """Split a Content-Type value into ``(media_type, charset)``.

    >>> parse_content_type('text/html; charset="ISO-8859-1"')
    ('text/html', 'ISO-8859-1')
    """
    media_type, *params = value.split(";")
    charset = None
    for param in params:
        key, sep, val = param.partition("=")
        if sep and key.strip().lower() == "charset":
            charset = val.strip().strip('"') or None
    return media_type.strip().lower(), charset


def replace_charset(value: str, charset: str) -> str:
    """Return *value* with its charset parameter set to *charset*."""
    media_type, *params = value.split(";")
    kept = [
        p.strip()
        for p in params
        if p.strip() and p.partition("=")[0].strip().lower() != "charset"
    ]
    return "; ".join([media_type.strip(), *kept, f"charset={charset}"])


def is_textual(value: str) -> bool:
    """Whether a body with this Content-Type is text that can be re-encoded."""
    media_type, charset = parse_content_type(value)
    return media_type.startswith("text/") or charset is not None
