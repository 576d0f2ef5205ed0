"""Exception hierarchy for sensor network construction, queries and I/O."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Union


class SensorNetworkError(Exception):
    """Base class for all sngraph errors."""


class ConfigurationError(SensorNetworkError, ValueError):
    """A network or configuration file is missing, empty or malformed.

    Attributes:
        path: File the problem was found in, if any.
        line: 1-based line number within ``path``, if known.
    """

    def __init__(
        self,
        message: str,
        path: Optional[Union[str, Path]] = None,
        line: Optional[int] = None,
    ) -> None:
        self.path = str(path) if path is not None else None
        self.line = line
        self.reason = message
        super().__init__(self._render())

    def _render(self) -> str:
        if self.path is None:
            return self.reason
        if self.line is None:
            return f"{self.path}: {self.reason}"
        return f"{self.path}:{self.line}: {self.reason}"


class ParseError(ConfigurationError):
    """A token in a network file could not be interpreted."""


class CapacityError(SensorNetworkError, ValueError):
    """A packet transfer exceeds what a producer holds or a storage node can take.

    Attributes:
        requested: Number of packets requested.
        details: Remaining amounts keyed by a short label (e.g. node name).
    """

    def __init__(self, message: str, requested: int, **details: Any) -> None:
        self.requested = requested
        self.details = details
        super().__init__(message)


class GenerationError(SensorNetworkError, RuntimeError):
    """Random network generation could not produce a valid network."""


class NoPathError(SensorNetworkError, LookupError):
    """The destination node is unreachable from the source node."""

    def __init__(self, src: Any, dst: Any) -> None:
        self.src = src
        self.dst = dst
        super().__init__(f"No path from {_label(src)} to {_label(dst)}")

    def __str__(self) -> str:
        # LookupError would otherwise repr() the message
        return self.args[0]


class NetworkWriteError(SensorNetworkError, OSError):
    """A network snapshot or flow problem could not be written."""

    def __init__(self, path: Union[str, Path], reason: str) -> None:
        self.path = str(path)
        super().__init__(f"Failed to write '{self.path}': {reason}")

    def __str__(self) -> str:
        return self.args[0]


def _label(node: Any) -> str:
    return getattr(node, "name", None) or repr(node)
