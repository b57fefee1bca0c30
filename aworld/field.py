"""Thread-safe value cell whose writes are logged."""

from __future__ import annotations

import copy
import threading
from typing import Generic, TypeVar

from aworld.utils import log

T = TypeVar("T")


class Field(Generic[T]):
    """A shared, lock-protected value; reads hand out copies."""

    def __init__(self, value: T) -> None:
        self._value = value
        self._lock = threading.Lock()

    def read(self) -> T:
        with self._lock:
            return copy.copy(self._value)

    def write(self, value: T) -> None:
        with self._lock:
            latest = self._value
            self._value = value
        log("WRITE", f"<{id(self):#x}: {latest!r}> ← {value!r} ... ok")

    def __repr__(self) -> str:
        return f"Field({self.read()!r})"