"""Base models shared by configuration and runtime state.

Lives apart from config.py so that log.py can build on it without a
circular import.
"""

from __future__ import annotations

import sys
from typing import Protocol, runtime_checkable

from pydantic import BaseModel


@runtime_checkable
class Closeable(Protocol):
    """Anything holding resources released by close()."""

    def close(self) -> None:
        ...


class BaseCloseable(BaseModel):
    """Pydantic model that closes its Closeable fields on exit.

    Closing walks the model fields and calls close() on every child
    that has one, so State -> Config -> Logger -> Sink all shut down
    from a single ``with`` block. A failing child does not stop the
    remaining children from closing.
    """

    def close(self):
        for field_name in self.__class__.model_fields:
            child = getattr(self, field_name, None)
            if child is None or not isinstance(child, Closeable):
                continue
            try:
                child.close()
            except Exception as e:
                print(
                    f"Warning: Error closing {field_name}: {e}",
                    file=sys.stderr,
                )

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):  # noqa: U100
        self.close()
        return False


class BaseConfig(BaseCloseable):
    """Marker base for sections loaded from YAML/env/CLI."""


class BaseState(BaseCloseable):
    """Marker base for sections mutated while a command runs."""


__all__ = ["Closeable", "BaseCloseable", "BaseConfig", "BaseState"]
