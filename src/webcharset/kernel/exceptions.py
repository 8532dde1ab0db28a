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
"""Exception hierarchy for webcharset.

All package errors derive from :class:`WebCharsetException`, so callers can
catch the base class or a specific subclass.
"""

from __future__ import annotations


class WebCharsetException(Exception):
    """Base exception for all webcharset errors.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "CONFIG_INVALID").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


class InvalidConfigurationException(WebCharsetException):
    """A component was constructed with an invalid configuration value."""

    def __init__(self, message: str, context: dict | None = None) -> None:
        super().__init__(message, code="CONFIG_INVALID", context=context)


class UnsupportedEncodingException(WebCharsetException):
    """The named character encoding is not known to the codec registry."""

    def __init__(self, encoding: str) -> None:
        super().__init__(
            f"Unsupported character encoding: '{encoding}'",
            code="ENCODING_UNSUPPORTED",
            context={"encoding": encoding},
        )
        self.encoding = encoding
