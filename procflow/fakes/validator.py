"""Recording double for the process validator."""

from __future__ import annotations

from procflow.fakes.base import FakeMethod, Recorder


class FakeValidator:
    """Stand-in for the validator; passes everything unless told to raise."""

    def __init__(self) -> None:
        self._recorder = Recorder()
        self.validate = FakeMethod("validate", self._recorder)
        self.validate_mandatory_params = FakeMethod(
            "validate_mandatory_params", self._recorder
        )

    def invocations(self) -> dict[str, list[tuple]]:
        """Return every recorded call, grouped by method name."""
        return self._recorder.invocations()