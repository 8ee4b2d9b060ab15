from dataclasses import dataclass
from typing import Optional

import numpy as np


class ReferenceLevelError(ValueError):
    """The reference oxygen level is missing from a sweep or was lost during alignment."""


class OxygenLevelSkipped(UserWarning):
    """A single oxygen level (or parameter cell) could not be read or aggregated."""


@dataclass(frozen=True)
class CellResult:
    """
    Outcome of one (scenario, variable, oxygen level[, combination]) cell.

    Exactly one of `value` and `reason` is set: a global total when the cell
    succeeded, otherwise the reason it is absent.
    """
    value: Optional[float] = None
    reason: Optional[str] = None

    @classmethod
    def success(cls, value):
        return cls(value=float(value))

    @classmethod
    def absent(cls, reason):
        return cls(reason=str(reason))

    @property
    def ok(self):
        return self.reason is None

    def unwrap(self, default=np.nan):
        """The value, or `default` (NaN) for an absent cell."""
        return self.value if self.ok else default
