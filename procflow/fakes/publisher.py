"""Recording double for the message publisher."""

from __future__ import annotations

from procflow.fakes.base import FakeMethod, Recorder


class FakePublisher:
    """Stand-in for a publisher; accepts every message unless told to raise."""

    def __init__(self) -> None:
        self._recorder = Recorder()
        self.close = FakeMethod("close", self._recorder)
        self.publish = FakeMethod("publish", self._recorder)

    def invocations(self) -> dict[str, list[tuple]]:
        """Return every recorded call, grouped by method name."""
        return self._recorder.invocations()