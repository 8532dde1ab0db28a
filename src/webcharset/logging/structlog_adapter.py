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
"""StructlogAdapter — renders webcharset's structlog events via stdlib logging."""

from __future__ import annotations

import logging
import sys
from typing import Any, TextIO

import structlog

from webcharset.core.config import Config
from webcharset.kernel.exceptions import InvalidConfigurationException

PACKAGE_LOGGER = "webcharset"
FORMATS = ("console", "json")
_HANDLER_NAME = "webcharset.structlog"


class StructlogAdapter:
    """Configures logging for the ``webcharset`` logger hierarchy.

    Settings under ``webcharset.logging``:

    * ``level`` — a single level for the whole package, or a mapping of
      logger names to levels where ``root`` stands for ``webcharset``.
    * ``format`` — ``console`` (default) or ``json``.

    The host application's root logger is left alone: events are rendered by
    a dedicated handler on the ``webcharset`` logger, which stops propagating
    while the adapter is configured.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream
        self._format = "console"
        self._levels: dict[str, str] = {}

    @property
    def format(self) -> str:
        return self._format

    @property
    def levels(self) -> dict[str, str]:
        return dict(self._levels)

    def configure(self, config: Config) -> None:
        fmt = str(config.get("webcharset.logging.format", "console")).lower()
        if fmt not in FORMATS:
            raise InvalidConfigurationException(
                f"Unknown log format '{fmt}', expected one of {', '.join(FORMATS)}",
                context={"format": fmt},
            )
        self._format = fmt
        self._levels = self._parse_levels(config.get("webcharset.logging.level"))

        shared: list[structlog.types.Processor] = [
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
        ]
        structlog.configure(
            processors=[
                structlog.stdlib.filter_by_level,
                structlog.contextvars.merge_contextvars,
                *shared,
                structlog.processors.StackInfoRenderer(),
                structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
            ],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=False,
        )

        renderer: structlog.types.Processor = (
            structlog.processors.JSONRenderer()
            if fmt == "json"
            else structlog.dev.ConsoleRenderer(colors=False)
        )
        handler = logging.StreamHandler(self._stream or sys.stdout)
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
                foreign_pre_chain=shared,
            )
        )

        package_logger = logging.getLogger(PACKAGE_LOGGER)
        self._remove_handler(package_logger)
        package_logger.addHandler(handler)
        package_logger.propagate = False

        for name, level in self._levels.items():
            self.set_level(name, level)

    def reset(self) -> None:
        """Undo :meth:`configure`: detach the handler and restore defaults."""
        package_logger = logging.getLogger(PACKAGE_LOGGER)
        self._remove_handler(package_logger)
        package_logger.propagate = True
        for name in self._levels:
            logging.getLogger(name).setLevel(logging.NOTSET)
        self._levels = {}
        structlog.reset_defaults()

    def get_logger(self, name: str) -> Any:
        return structlog.get_logger(name)

    def set_level(self, name: str, level: str) -> None:
        """Set the level of a stdlib logger, rejecting unknown level names."""
        value = logging.getLevelNamesMapping().get(level.upper())
        if value is None:
            raise InvalidConfigurationException(
                f"Unknown log level '{level}' for logger '{name}'",
                context={"logger": name, "level": level},
            )
        logging.getLogger(name).setLevel(value)

    @staticmethod
    def _parse_levels(value: Any) -> dict[str, str]:
        if value is None:
            return {}
        if isinstance(value, dict):
            return {
                (PACKAGE_LOGGER if name == "root" else name): str(level).upper()
                for name, level in value.items()
            }
        return {PACKAGE_LOGGER: str(value).upper()}

    @staticmethod
    def _remove_handler(package_logger: logging.Logger) -> None:
        for existing in list(package_logger.handlers):
            if existing.get_name() == _HANDLER_NAME:
                package_logger.removeHandler(existing)
