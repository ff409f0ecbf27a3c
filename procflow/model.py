"""Data model for process definitions and the messages that carry them."""

from __future__ import annotations

import uuid as _uuid
from dataclasses import dataclass, field
from typing import Any


def _text(value: Any, what: str) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    raise ValueError(f"{what} must be a scalar, got {type(value).__name__}")


def _flag(value: Any, what: str) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    raise ValueError(f"{what} must be a boolean, got {value!r}")


def _mapping(value: Any, what: str) -> dict:
    if value is None:
        return {}
    if isinstance(value, dict):
        return value
    raise ValueError(f"{what} must be a mapping, got {type(value).__name__}")


def _sequence(value: Any, what: str) -> list:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    raise ValueError(f"{what} must be a sequence, got {type(value).__name__}")


@dataclass
class Param:
    """A parameter that a process accepts."""

    name: str = ""
    mandatory: bool = False
    description: str = ""
    default: str = ""

    @classmethod
    def _from_dict(cls, data: Any) -> Param:
        data = _mapping(data, "param")
        return cls(
            name=_text(data.get("name"), "param name"),
            mandatory=_flag(data.get("mandatory"), "param mandatory"),
            description=_text(data.get("description"), "param description"),
            default=_text(data.get("default"), "param default"),
        )

    def _to_dict(self) -> dict:
        return {
            "name": self.name,
            "mandatory": self.mandatory,
            "description": self.description,
            "default": self.default,
        }


@dataclass
class Task:
    """A single step of a process."""

    name: str = ""
    class_: str = ""
    parameters: dict[str, str] = field(default_factory=dict)
    wait_for: list[str] = field(default_factory=list)

    @classmethod
    def _from_dict(cls, data: Any) -> Task:
        data = _mapping(data, "task")
        raw_params = _mapping(data.get("parameters"), "task parameters")
        wait_raw = data.get("waitFor", data.get("wait_for"))
        return cls(
            name=_text(data.get("name"), "task name"),
            class_=_text(data.get("class"), "task class"),
            parameters={
                _text(key, "parameter key"): _text(value, "parameter value")
                for key, value in raw_params.items()
            },
            wait_for=[_text(dep, "waitFor entry") for dep in _sequence(wait_raw, "task waitFor")],
        )

    def _to_dict(self) -> dict:
        return {
            "name": self.name,
            "class": self.class_,
            "parameters": dict(self.parameters),
            "waitFor": list(self.wait_for),
        }


@dataclass
class ProcessDefinition:
    """A named process with its parameters and tasks."""

    name: str = ""
    params: list[Param] = field(default_factory=list)
    tasks: list[Task] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> ProcessDefinition:
        """Build a definition from decoded YAML or JSON; raise ValueError on bad shapes."""
        data = _mapping(data, "process definition")
        return cls(
            name=_text(data.get("name"), "process name"),
            params=[Param._from_dict(p) for p in _sequence(data.get("params"), "params")],
            tasks=[Task._from_dict(t) for t in _sequence(data.get("tasks"), "tasks")],
        )

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "params": [p._to_dict() for p in self.params],
            "tasks": [t._to_dict() for t in self.tasks],
        }


@dataclass
class Message:
    """A process definition queued for execution under a unique id."""

    uuid: _uuid.UUID = field(default_factory=_uuid.uuid4)
    process_definition: ProcessDefinition = field(default_factory=ProcessDefinition)

    @classmethod
    def from_dict(cls, data: Any) -> Message:
        """Build a message from decoded JSON; raise ValueError on bad shapes."""
        data = _mapping(data, "message")
        raw_id = data.get("uuid")
        if not isinstance(raw_id, str):
            raise ValueError("message uuid must be a string")
        return cls(
            uuid=_uuid.UUID(raw_id),
            process_definition=ProcessDefinition.from_dict(data.get("processDefinition")),
        )

    def to_dict(self) -> dict:
        return {
            "uuid": str(self.uuid),
            "processDefinition": self.process_definition.to_dict(),
        }