"""Per-profile storage of named level sequences."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

import numpy as np

from profqc.utils.exceptions import VariableNotFoundError

if TYPE_CHECKING:
    from numpy.typing import ArrayLike


class ProfileDataHandler:
    """Owns every per-level sequence of one profile.

    Checks read and write through the handler by name. Read access hands
    out a non-writeable view; write access hands out the stored array
    itself, so in-place updates (flag bits, counters) persist.

    The handler does not enforce that sequences share a length. That is
    left to the checks consuming them.
    """

    def __init__(self, data: dict[str, ArrayLike] | None = None) -> None:
        """Initialize handler.

        Args:
            data: Optional mapping of variable name to values.
        """
        self._data: dict[str, np.ndarray] = {}
        for name, values in (data or {}).items():
            self.set(name, values)

    def get(
        self,
        name: str,
        dtype: type = float,
        writable: bool = False,
    ) -> np.ndarray:
        """Get a named sequence.

        Args:
            name: Variable name.
            dtype: Expected element type (float or int).
            writable: Whether the caller intends to mutate the sequence.

        Returns:
            The stored array, or a read-only view of it.

        Raises:
            VariableNotFoundError: If ``name`` was never registered.
        """
        if name not in self._data:
            raise VariableNotFoundError(name)

        values = self._data[name]
        target = np.int64 if dtype is int else np.float64

        if writable:
            if values.dtype != target:
                values = values.astype(target)
                self._data[name] = values
            return values

        view = values.astype(target) if values.dtype != target else values.view()
        view.flags.writeable = False
        return view

    def set(self, name: str, values: ArrayLike) -> None:
        """Store a sequence under ``name``, replacing any prior value."""
        array = np.asarray(values)
        if array.dtype.kind in "iub":
            array = array.astype(np.int64)
        elif array.dtype.kind == "f":
            array = array.astype(np.float64)
        self._data[name] = np.atleast_1d(array).copy()

    def has(self, name: str) -> bool:
        """Check if a variable is registered."""
        return name in self._data

    def is_integer(self, name: str) -> bool:
        """Whether a registered sequence holds integers."""
        if name not in self._data:
            raise VariableNotFoundError(name)
        return self._data[name].dtype.kind == "i"

    def names(self) -> list[str]:
        """List registered variable names."""
        return list(self._data.keys())

    def ensure_counters(self, names: Iterable[str]) -> None:
        """Register zeroed single-element counters that do not exist yet."""
        for name in names:
            if name not in self._data:
                self._data[name] = np.zeros(1, dtype=np.int64)

    def __contains__(self, name: str) -> bool:
        return name in self._data

    def __len__(self) -> int:
        return len(self._data)
