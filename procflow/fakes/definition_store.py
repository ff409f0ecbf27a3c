"""Recording double for the store the start-process handler reads from."""

from __future__ import annotations

from procflow.fakes.base import FakeMethod, Recorder


class FakeProcessDefinitionStore:
    """Stand-in for the definition store with configurable path lookups."""

    def __init__(self) -> None:
        self._recorder = Recorder()
        self.get_process_path_by_name = FakeMethod(
            "get_process_path_by_name", self._recorder
        )
        self.get_process_path_by_name.returns("")

    def invocations(self) -> dict[str, list[tuple]]:
        """Return every recorded call, grouped by method name."""
        return self._recorder.invocations()