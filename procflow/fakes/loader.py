"""Recording doubles for the store and reader used by the loader service."""

from __future__ import annotations

from procflow.fakes.base import FakeMethod, Recorder


class FakeLoaderStore:
    """Stand-in for the store that records saved process metadata."""

    def __init__(self) -> None:
        self._recorder = Recorder()
        self.save_process_definition_meta = FakeMethod(
            "save_process_definition_meta", self._recorder
        )

    def invocations(self) -> dict[str, list[tuple]]:
        """Return every recorded call, grouped by method name."""
        return self._recorder.invocations()


class FakeLoaderReader:
    """Stand-in for the config reader with configurable answers."""

    def __init__(self) -> None:
        self._recorder = Recorder()
        self.read_yaml_files = FakeMethod("read_yaml_files", self._recorder)
        self.read_yaml_files.returns([])
        self.get_process_name_from_file = FakeMethod(
            "get_process_name_from_file", self._recorder
        )
        self.get_process_name_from_file.returns("")

    def invocations(self) -> dict[str, list[tuple]]:
        """Return every recorded call, grouped by method name."""
        return self._recorder.invocations()