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
"""Builds the character encoding filter from configuration."""

from __future__ import annotations

import structlog
from starlette.middleware import Middleware

from webcharset.config.properties import EncodingProperties
from webcharset.core.config import Config
from webcharset.logging.structlog_adapter import StructlogAdapter
from webcharset.web.adapters.starlette.filter_chain import WebFilterChainMiddleware
from webcharset.web.character_encoding import CharacterEncodingFilter
from webcharset.web.content_type import check_encoding

logger = structlog.get_logger("webcharset.web")


def character_encoding_filter(config: Config) -> CharacterEncodingFilter | None:
    """Create a :class:`CharacterEncodingFilter` from ``webcharset.encoding.*``.

    Returns ``None`` when ``webcharset.encoding.enabled`` is false. The
    charset is checked against the codec registry so that a misconfigured
    name fails at startup rather than on the first request.

    Raises:
        InvalidConfigurationException: If the charset is empty.
        UnsupportedEncodingException: If the charset is not a known codec.
    """
    props = config.bind(EncodingProperties)
    if not props.enabled:
        logger.info("character_encoding_filter_disabled")
        return None

    web_filter = CharacterEncodingFilter(props.charset, force_encoding=props.force)
    check_encoding(props.charset)
    logger.info(
        "character_encoding_filter_configured",
        charset=props.charset,
        force=props.force,
    )
    return web_filter


def configure_logging(config: Config) -> StructlogAdapter | None:
    """Apply ``webcharset.logging.*`` if any of it is set.

    Returns the configured adapter, or ``None`` when the application has not
    asked for package logging and its own setup should stay in charge.
    """
    if config.get("webcharset.logging.level") is None and config.get("webcharset.logging.format") is None:
        return None
    adapter = StructlogAdapter()
    adapter.configure(config)
    return adapter


def encoding_middleware(config: Config) -> list[Middleware]:
    """Starlette middleware list running the configured encoding filter.

    Logging is configured first so the filter's setup events honour it.
    """
    configure_logging(config)
    web_filter = character_encoding_filter(config)
    if web_filter is None:
        return []
    return [Middleware(WebFilterChainMiddleware, filters=[web_filter])]
