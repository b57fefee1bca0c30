"""Identity of a remote client."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Connection:
    """A client address together with the salt it identifies itself with."""

    addr: str
    salt: int