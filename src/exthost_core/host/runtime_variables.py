"""Runtime variables shared with the host."""

from collections.abc import Iterator, Mapping
from typing import Any

DEFAULT_RUNTIME_NAME = "wrt-service"


class RuntimeVariables:
    """String-to-string map handed to the host on startup and on requests.

    Only string values are stored; anything else passed to ``update`` is
    dropped, matching what the host accepts.
    """

    def __init__(self, runtime_name: str = DEFAULT_RUNTIME_NAME, **variables: str):
        self._values: dict[str, str] = {"runtime_name": runtime_name}
        self.update(variables, clear=False)

    def add(self, key: str, value: str) -> None:
        """Set one variable.

        Raises:
            TypeError: If ``value`` is not a string
        """
        if not isinstance(value, str):
            raise TypeError(f"Runtime variable '{key}' must be a string, got {type(value).__name__}")
        self._values[key] = value

    def get(self, key: str, default: str | None = None) -> str | None:
        return self._values.get(key, default)

    def clear(self) -> None:
        self._values.clear()

    def update(self, variables: Mapping[str, Any], clear: bool = True) -> None:
        """Replace (or extend, with ``clear=False``) the variables.

        Non-string values are skipped.
        """
        if clear:
            self.clear()
        for key, value in variables.items():
            if isinstance(value, str):
                self._values[key] = value

    def as_dict(self) -> dict[str, str]:
        return dict(self._values)

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"RuntimeVariables({self._values!r})"
