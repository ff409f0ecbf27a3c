"""HTTP handling of requests that start a process."""

from __future__ import annotations

import dataclasses
import json
import logging
from dataclasses import dataclass, field
from typing import Any

from flask import Flask, jsonify, request

from procflow.model import Message

logger = logging.getLogger(__name__)

SUCCESSFULLY_ADDED_PROCESS = "successfully added process"


@dataclass
class StartProcessRequest:
    """Body of a start-process request."""

    name: str = ""
    parameters: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_json(cls, data: Any) -> StartProcessRequest:
        """Build a request from JSON text, bytes or a decoded object; raise ValueError."""
        if isinstance(data, (bytes, bytearray)):
            data = bytes(data).decode("utf-8")
        if isinstance(data, str):
            if not data.strip():
                return cls()
            try:
                data = json.loads(data)
            except json.JSONDecodeError as err:
                raise ValueError(f"invalid JSON: {err}") from err
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ValueError("request body must be a JSON object")

        name = data.get("name")
        if name is None:
            name = ""
        elif not isinstance(name, str):
            raise ValueError("name must be a string")

        raw_params = data.get("parameters")
        if raw_params is None:
            raw_params = {}
        elif not isinstance(raw_params, dict):
            raise ValueError("parameters must be an object")
        params: dict[str, str] = {}
        for key, value in raw_params.items():
            if value is None:
                value = ""
            elif not isinstance(value, str):
                raise ValueError(f"parameter {key!r} must be a string")
            params[key] = value
        return cls(name=name, parameters=params)


def _error(status: int, err: Exception, message: str | None = None):
    body = {"error": str(err)}
    if message is not None:
        body["message"] = message
    return jsonify(body), status


def _make_view(publisher, reader, store, validator):
    def start_process():
        body = request.get_data()
        if body and request.mimetype != "application/json":
            return _error(400, ValueError("Unsupported Media Type"))
        try:
            req = StartProcessRequest.from_json(body)
        except ValueError as err:
            return _error(400, err)

        try:
            path = store.get_process_path_by_name(req.name)
        except Exception as err:
            return _error(400, err, "Process definition template not found")

        try:
            definition = reader.parse_config_file(path)
        except Exception as err:
            return _error(400, err, "Could not parse process definition template")

        try:
            validator.validate_mandatory_params(definition, req.parameters)
        except Exception as err:
            return _error(400, err, "Missing mandatory parameters")

        try:
            tasks = reader.apply_templating_to_tasks(definition.tasks, req.parameters)
        except Exception as err:
            return _error(400, err, "Failed to apply parameters")

        definition = dataclasses.replace(definition, tasks=list(tasks or []))

        try:
            validator.validate(definition)
        except Exception as err:
            return _error(400, err, "Process validation failed")

        message = Message(process_definition=definition)
        try:
            publisher.publish(message)
        except Exception as err:
            return _error(500, err, "Process publishing failed")

        return jsonify({"message": SUCCESSFULLY_ADDED_PROCESS}), 200

    return start_process


def register_handlers(app: Flask | None, publisher, reader, store, validator) -> None:
    """Register ``POST /startProcess`` on ``app``; only warn when there is no app."""
    if app is None:
        logger.warning(
            "Running routes without a webapi server, did NOT register routes."
        )
        return
    app.add_url_rule(
        "/startProcess",
        endpoint="start_process",
        view_func=_make_view(publisher, reader, store, validator),
        methods=["POST"],
    )