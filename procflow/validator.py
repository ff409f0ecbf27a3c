"""Checks on process definitions and user-supplied parameters."""

from __future__ import annotations

from collections.abc import Mapping

from procflow.model import ProcessDefinition


class ValidationError(ValueError):
    """Raised when a process definition or its parameters are invalid."""


class ProcessValidator:
    """Validates process definitions before they are published."""

    def validate(self, proc: ProcessDefinition) -> None:
        """Raise ValidationError when the definition is malformed."""
        if not proc.name.strip():
            raise ValidationError("process name must not be empty")

        task_names: set[str] = set()
        for task in proc.tasks:
            if not task.name.strip():
                raise ValidationError("task name must not be empty")
            if not task.class_.strip():
                raise ValidationError(f"task '{task.name}' class must not be empty")
            if task.name in task_names:
                raise ValidationError(f"duplicate task name found: {task.name}")
            task_names.add(task.name)
            if task.name in task.wait_for:
                raise ValidationError(f"task '{task.name}' cannot wait for itself")

        param_names: set[str] = set()
        for param in proc.params:
            if not param.name.strip():
                raise ValidationError("param name must not be empty")
            if param.name in param_names:
                raise ValidationError(f"duplicate param name found: {param.name}")
            param_names.add(param.name)

        for task in proc.tasks:
            for dep in task.wait_for:
                if dep not in task_names:
                    raise ValidationError(f"task '{task.name}' waits for unknown task '{dep}'")

    def validate_mandatory_params(
        self, definition: ProcessDefinition, user_params: Mapping[str, str] | None
    ) -> None:
        """Raise ValidationError listing mandatory params that are absent or blank."""
        user_params = user_params or {}
        missing = [
            param.name
            for param in definition.params
            if param.mandatory and not user_params.get(param.name, "").strip()
        ]
        if missing:
            raise ValidationError(f"missing mandatory parameters: {', '.join(missing)}")