"""Recording test doubles with configurable results."""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Any


class Recorder:
    """Thread-safe log of calls made on a fake, keyed by method name."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._calls: dict[str, list[tuple]] = {}

    def record(self, name: str, args: tuple) -> None:
        with self._lock:
            self._calls.setdefault(name, []).append(tuple(args))

    def invocations(self) -> dict[str, list[tuple]]:
        """Return a copy of every recorded call, grouped by method name."""
        with self._lock:
            return {name: list(calls) for name, calls in self._calls.items()}


def _snapshot(arg: Any) -> Any:
    if isinstance(arg, list):
        return list(arg)
    return arg


class FakeMethod:
    """A callable stand-in that records its arguments and answers as configured."""

    def __init__(self, name: str, recorder: Recorder | None = None) -> None:
        self.name = name
        self._recorder = recorder if recorder is not None else Recorder()
        self._lock = threading.Lock()
        self._calls: list[tuple] = []
        self._stub: Callable[..., Any] | None = None
        self._default: tuple[str, Any] = ("return", None)
        self._on_call: dict[int, tuple[str, Any]] = {}

    def __call__(self, *args: Any) -> Any:
        recorded = tuple(_snapshot(arg) for arg in args)
        with self._lock:
            outcome = self._on_call.get(len(self._calls), self._default)
            self._calls.append(recorded)
            stub = self._stub
        self._recorder.record(self.name, recorded)
        if stub is not None:
            return stub(*args)
        kind, value = outcome
        if kind == "raise":
            raise value
        return value

    def returns(self, value: Any) -> None:
        with self._lock:
            self._stub = None
            self._default = ("return", value)

    def raises(self, error: BaseException) -> None:
        with self._lock:
            self._stub = None
            self._default = ("raise", error)

    def returns_on_call(self, index: int, value: Any) -> None:
        with self._lock:
            self._stub = None
            self._on_call[index] = ("return", value)

    def raises_on_call(self, index: int, error: BaseException) -> None:
        with self._lock:
            self._stub = None
            self._on_call[index] = ("raise", error)

    def calls(self, stub: Callable[..., Any] | None) -> None:
        """Route every call through ``stub``."""
        with self._lock:
            self._stub = stub

    def call_count(self) -> int:
        with self._lock:
            return len(self._calls)

    def args_for_call(self, index: int) -> tuple:
        with self._lock:
            return self._calls[index]