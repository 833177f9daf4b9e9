"""
Per-surface storage of recorded drawing calls.

A RecordedCall is immutable once created; a CallStore holds the calls of
one surface in recording order.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from .classification import CallClass


@dataclass(frozen=True)
class CallArgs:
    """Ordered positional arguments plus named arguments of one call."""
    positional: tuple = ()
    named: dict = field(default_factory=dict)

    def get(self, name: str, position: Optional[int] = None, default=None):
        """Look an argument up by keyword first, then by position."""
        if name in self.named:
            return self.named[name]
        if position is not None and position < len(self.positional):
            return self.positional[position]
        return default

    def has(self, name: str, position: Optional[int] = None) -> bool:
        return self.get(name, position) is not None

    def __len__(self) -> int:
        return len(self.positional) + len(self.named)


@dataclass(frozen=True)
class RecordedCall:
    """A drawing call captured while recording was active.

    Attributes:
        function_name: Normalized call name (after demotion).
        class_level: HIGH / LOW / LAYOUT / UNKNOWN.
        args: Arguments as passed.
        call_expression: Diagnostic rendering of the call.
        timestamp: Wall-clock time of the call (``time.time()``).
        sequence_index: 1-based, strictly increasing within a surface.
        axes: The matplotlib Axes the call drew on, if any.
        result: The value the original call returned.
    """
    function_name: str
    class_level: CallClass
    args: CallArgs
    call_expression: str
    timestamp: float
    sequence_index: int
    axes: Any = None
    result: Any = None


class CallStore:
    """Recorded calls of one surface, in recording order."""

    def __init__(self) -> None:
        self._calls: list[RecordedCall] = []

    @property
    def next_index(self) -> int:
        return self._calls[-1].sequence_index + 1 if self._calls else 1

    def append(self, call: RecordedCall) -> None:
        """Store a call; its sequence_index must exceed the last one."""
        if self._calls and call.sequence_index <= self._calls[-1].sequence_index:
            raise ValueError(
                f"sequence_index must increase: got {call.sequence_index} "
                f"after {self._calls[-1].sequence_index}"
            )
        self._calls.append(call)

    def get_calls(self) -> list[RecordedCall]:
        return list(self._calls)

    def get_calls_by_class(self, class_level: CallClass) -> list[RecordedCall]:
        return [c for c in self._calls if c.class_level == class_level]

    def clear(self) -> None:
        self._calls.clear()

    def __len__(self) -> int:
        return len(self._calls)
