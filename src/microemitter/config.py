"""
Emitter configuration.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from .diagnostics import DiagnosticSink, LoggingSink
from .errors import InvalidArgument

ENV_MAX_LISTENERS = "MICROEMITTER_MAX_LISTENERS"


@dataclass(frozen=True)
class EmitterConfig:
    """
    Emitter-wide settings. Untouched by `EventEmitter.clear()`.

    Args:
        max_listeners (Optional[int]): Cap on listeners per event.
                                       None means unlimited.
        sink (DiagnosticSink): Where warnings and handler failures are reported.
                               Defaults to a `LoggingSink`.
    """

    max_listeners: Optional[int] = None
    sink: DiagnosticSink = field(default_factory=LoggingSink)

    def __post_init__(self) -> None:
        limit = self.max_listeners
        if limit is None:
            return
        # bool is an int subclass; True is not a meaningful cap
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
            raise InvalidArgument(
                f"max_listeners must be a positive integer or None, got {limit!r}"
            )

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        sink: Optional[DiagnosticSink] = None,
    ) -> "EmitterConfig":
        """
        Build a config from environment variables.

        Reads `MICROEMITTER_MAX_LISTENERS`; unset or blank means unlimited.

        Args:
            environ (Optional[Mapping[str, str]]): Defaults to `os.environ`.
            sink (Optional[DiagnosticSink]): Defaults to a `LoggingSink`.

        Returns:
            EmitterConfig: The resulting config.
        """
        env = os.environ if environ is None else environ
        raw = env.get(ENV_MAX_LISTENERS, "").strip()
        limit: Optional[int] = None
        if raw:
            try:
                limit = int(raw, 10)
            except ValueError as exc:
                raise InvalidArgument(
                    f"{ENV_MAX_LISTENERS} must be an integer, got {raw!r}"
                ) from exc
        if sink is None:
            return cls(max_listeners=limit)
        return cls(max_listeners=limit, sink=sink)
