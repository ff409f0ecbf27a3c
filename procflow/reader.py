"""Reading process definition files and rendering task parameter templates."""

from __future__ import annotations

import dataclasses
import os
import re
from collections.abc import Iterable, Mapping

import yaml

from procflow.model import ProcessDefinition, Task

_FIELD_CHAIN = re.compile(r"^(?:\.[A-Za-z_][A-Za-z0-9_]*)+$")
_NO_VALUE = "<no value>"


class ReaderError(Exception):
    """Raised when process definition files cannot be read or rendered."""


class TemplateError(Exception):
    """Raised when a template cannot be parsed or executed."""

    def __init__(self, message: str, stage: str) -> None:
        super().__init__(message)
        self.stage = stage


def _parse(template: str) -> list:
    nodes: list = []
    pos = 0
    trim_next = False
    while True:
        start = template.find("{{", pos)
        text = template[pos:] if start < 0 else template[pos:start]
        if trim_next:
            text = text.lstrip()
        if start < 0:
            if text:
                nodes.append(text)
            return nodes
        end = template.find("}}", start + 2)
        if end < 0:
            raise TemplateError("unclosed action", "parse")
        inner = template[start + 2 : end]
        if len(inner) >= 2 and inner[0] == "-" and inner[1].isspace():
            text = text.rstrip()
            inner = inner[1:]
        trim_next = len(inner) >= 2 and inner[-1] == "-" and inner[-2].isspace()
        if trim_next:
            inner = inner[:-1]
        if text:
            nodes.append(text)
        pos = end + 2

        inner = inner.strip()
        if inner.startswith("/*") and inner.endswith("*/"):
            continue
        if not inner:
            raise TemplateError("missing value for command", "parse")
        if inner == ".":
            nodes.append(())
        elif _FIELD_CHAIN.match(inner):
            nodes.append(tuple(inner[1:].split(".")))
        else:
            raise TemplateError(f"unsupported action {inner!r}", "parse")


def _format_map(inputs: Mapping[str, str]) -> str:
    return "map[" + " ".join(f"{k}:{inputs[k]}" for k in sorted(inputs)) + "]"


def _execute(nodes: Iterable, inputs: Mapping[str, str]) -> str:
    out: list[str] = []
    for node in nodes:
        if isinstance(node, str):
            out.append(node)
            continue
        if not node:
            out.append(_format_map(inputs))
            continue
        first, *rest = node
        if rest:
            raise TemplateError(f"can't evaluate field {rest[0]} in type string", "execute")
        out.append(str(inputs[first]) if first in inputs else _NO_VALUE)
    return "".join(out)


def render_template(template: str, inputs: Mapping[str, str] | None) -> str:
    """Render ``{{.key}}`` references in ``template`` from ``inputs``.

    Missing keys render as ``<no value>``. Raises TemplateError whose ``stage``
    is ``"parse"`` or ``"execute"``.
    """
    return _execute(_parse(template), inputs or {})


class ConfigReader:
    """Reads process definition YAML files from a directory."""

    def __init__(self, directory: str | os.PathLike) -> None:
        self.directory = os.fspath(directory)

    def read_yaml_files(self) -> list[str]:
        """Return paths of the ``.yaml``/``.yml`` files in the directory, sorted by name."""
        try:
            with os.scandir(self.directory) as entries:
                names = sorted(
                    entry.name
                    for entry in entries
                    if not entry.is_dir(follow_symlinks=False)
                )
        except OSError as err:
            raise ReaderError(f"failed to read dir: {err}") from err
        return [
            os.path.normpath(os.path.join(self.directory, name))
            for name in names
            if name.endswith((".yaml", ".yml"))
        ]

    def _load(self, path: str) -> ProcessDefinition:
        try:
            with open(path, encoding="utf-8") as handle:
                text = handle.read()
        except OSError as err:
            raise ReaderError(f"failed to read file {path}: {err}") from err
        try:
            return ProcessDefinition.from_dict(yaml.safe_load(text))
        except (yaml.YAMLError, ValueError) as err:
            raise ReaderError(f"failed to unmarshal file {path}: {err}") from err

    def parse_config_file(self, path: str) -> ProcessDefinition:
        """Load a process definition from ``path``."""
        return self._load(path)

    def get_process_name_from_file(self, path: str) -> str:
        """Return the process name declared in ``path``."""
        name = self._load(path).name
        if not name:
            raise ReaderError(f"process name missing in file {path}")
        return name

    def apply_templating_to_tasks(
        self, tasks: Iterable[Task], inputs: Mapping[str, str] | None
    ) -> list[Task]:
        """Return copies of ``tasks`` with every parameter rendered from ``inputs``."""
        rendered: list[Task] = []
        for task in tasks:
            params: dict[str, str] = {}
            for key, source in task.parameters.items():
                try:
                    nodes = _parse(source)
                except TemplateError as err:
                    raise ReaderError(
                        f"failed to parse template for task {task.name} param {key}: {err}"
                    ) from err
                try:
                    params[key] = _execute(nodes, inputs or {})
                except TemplateError as err:
                    raise ReaderError(
                        f"failed to render template for task {task.name} param {key}: {err}"
                    ) from err
            rendered.append(
                dataclasses.replace(task, parameters=params, wait_for=list(task.wait_for))
            )
        return rendered