"""
Diagnostic sinks.

The emitter reports non-fatal conditions (capacity reached, duplicate
listeners) and contained handler failures to a sink instead of raising.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol


class DiagnosticSink(Protocol):
    """
    Protocol for diagnostic sinks.
    """

    def warn(self, message: str) -> None: ...

    def error(self, message: str, cause: BaseException) -> None: ...


class LoggingSink:
    """
    Default sink: writes to a standard library logger.
    """

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self.logger = logger or logging.getLogger("microemitter")

    def warn(self, message: str) -> None:
        self.logger.warning(message)

    def error(self, message: str, cause: BaseException) -> None:
        self.logger.error(
            message, exc_info=(type(cause), cause, cause.__traceback__)
        )
