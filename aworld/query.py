"""Queries received from clients as JSON documents."""

from __future__ import annotations

import enum
import json
from dataclasses import dataclass
from typing import Any


class QueryKind(enum.Enum):
    """The kind of request a query makes."""

    LOGIN = "login"
    ATTACK = "attack"
    FORWARD = "forward"
    BACKWARD = "backward"
    TURN_LEFT = "turn_left"
    TURN_RIGHT = "turn_right"
    PICKUP = "pickup"
    USE_ITEM = "use_item"
    UNKNOWN = "unknown"

    @classmethod
    def from_name(cls, name: str) -> QueryKind:
        """Map a wire name to its kind; names not recognised give UNKNOWN."""
        if name == cls.UNKNOWN.value:
            return cls.UNKNOWN
        try:
            return cls(name)
        except ValueError:
            return cls.UNKNOWN


def _require(document: dict, key: str) -> Any:
    if key not in document:
        raise ValueError(f"missing field `{key}`")
    return document[key]


@dataclass(frozen=True)
class Query:
    """A decoded client request."""

    salt: int
    addr: str
    kind: QueryKind
    payload: Any
    raw_kind: str = ""

    @classmethod
    def from_json(cls, text: str) -> Query:
        """Decode a query; raises ValueError when the document is malformed."""
        document = json.loads(text)
        if not isinstance(document, dict):
            raise ValueError("expected a JSON object")
        salt = _require(document, "salt")
        if isinstance(salt, bool) or not isinstance(salt, int):
            raise ValueError("field `salt` must be an integer")
        if not -(2**63) <= salt < 2**63:
            raise ValueError("field `salt` is out of range")
        addr = _require(document, "addr")
        if not isinstance(addr, str):
            raise ValueError("field `addr` must be a string")
        kind = _require(document, "kind")
        if not isinstance(kind, str):
            raise ValueError("field `kind` must be a string")
        payload = _require(document, "payload")
        return cls(
            salt=salt,
            addr=addr,
            kind=QueryKind.from_name(kind),
            payload=payload,
            raw_kind=kind,
        )