"""Request/response bridge between a desktop shell and the record store.

Messages are JSON objects::

    {"id": 7, "command": "create_todo", "payload": {"request": {...}}}

and every message gets exactly one reply::

    {"id": 7, "ok": true, "data": {...}}
    {"id": 7, "ok": false, "error": "Todo not found: ..."}
"""
from __future__ import annotations

import json
from typing import Any, Dict, IO, Optional

from pydantic import ValidationError
from sqlmodel import SQLModel

from core.errors import StoreError
from core.logs import ensure_logger
from services.store import RecordStore


logger = ensure_logger("commands")


def to_jsonable(value: Any) -> Any:
    if isinstance(value, SQLModel):
        return value.model_dump(mode="json")
    if isinstance(value, (list, tuple)):
        return [to_jsonable(item) for item in value]
    return value


class CommandBridge:
    def __init__(self, store: RecordStore):
        self.store = store

    def _prepare(self, command: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        params = dict(payload)
        model = self.store.command(command).request_model
        if model is not None:
            if "request" not in params:
                raise ValueError(f"{command} requires a 'request' object")
            params["request"] = model.model_validate(params["request"])
        return params

    def handle(self, message: Dict[str, Any]) -> Dict[str, Any]:
        message_id = message.get("id") if isinstance(message, dict) else None
        try:
            if not isinstance(message, dict):
                raise ValueError("Message must be a JSON object")
            command = message.get("command")
            if not isinstance(command, str) or not command:
                raise ValueError("Message has no command")
            payload = message.get("payload") or {}
            if not isinstance(payload, dict):
                raise ValueError("Payload must be a JSON object")
            params = self._prepare(command, payload)
            result = self.store.execute(command, **params)
        except StoreError as exc:
            logger.info("Command rejected: %s", exc)
            return {"id": message_id, "ok": False, "error": str(exc)}
        except ValidationError as exc:
            return {"id": message_id, "ok": False, "error": f"Invalid request: {exc}"}
        except (TypeError, ValueError) as exc:
            # Wrong parameter names end up here as TypeError from the handler call.
            return {"id": message_id, "ok": False, "error": str(exc)}
        return {"id": message_id, "ok": True, "data": to_jsonable(result)}

    def handle_line(self, line: str) -> Optional[Dict[str, Any]]:
        line = line.strip()
        if not line:
            return None
        try:
            message = json.loads(line)
        except json.JSONDecodeError as exc:
            return {"id": None, "ok": False, "error": f"Malformed JSON: {exc}"}
        return self.handle(message)


def serve_stdio(bridge: CommandBridge, instream: IO[str], outstream: IO[str]) -> int:
    """Answer JSON-lines requests until ``instream`` is exhausted."""

    handled = 0
    for line in instream:
        response = bridge.handle_line(line)
        if response is None:
            continue
        outstream.write(json.dumps(response, ensure_ascii=False) + "\n")
        outstream.flush()
        handled += 1
    logger.info("Input closed after %d message(s)", handled)
    return handled


__all__ = ["CommandBridge", "serve_stdio", "to_jsonable"]
