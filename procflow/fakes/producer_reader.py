"""Recording double for the reader used by the start-process handler."""

from __future__ import annotations

from procflow.fakes.base import FakeMethod, Recorder
from procflow.model import ProcessDefinition


class FakeHandlerReader:
    """Stand-in for the config reader that parses and renders definitions."""

    def __init__(self) -> None:
        self._recorder = Recorder()
        self.apply_templating_to_tasks = FakeMethod(
            "apply_templating_to_tasks", self._recorder
        )
        self.apply_templating_to_tasks.returns([])
        self.get_process_name_from_file = FakeMethod(
            "get_process_name_from_file", self._recorder
        )
        self.get_process_name_from_file.returns("")
        self.parse_config_file = FakeMethod("parse_config_file", self._recorder)
        self.parse_config_file.returns(ProcessDefinition())

    def invocations(self) -> dict[str, list[tuple]]:
        """Return every recorded call, grouped by method name."""
        return self._recorder.invocations()