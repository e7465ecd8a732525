"""QC report for one profile and its serialization."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING

from profqc.models.flags import ProfileFlag

if TYPE_CHECKING:
    import pandas as pd


@dataclass
class LevelFlag:
    """Flag state of a single level after QC."""

    level: int
    pressure: float
    flags: int

    def to_dict(self) -> dict:
        """Convert level flag to dictionary representation."""
        return {
            "level": self.level,
            "pressure": self.pressure,
            "flags": self.flags,
            "reasons": ProfileFlag.describe(self.flags),
        }

    @classmethod
    def from_dict(cls, data: dict) -> LevelFlag:
        """Create LevelFlag from dictionary."""
        return cls(
            level=int(data["level"]),
            pressure=float(data["pressure"]),
            flags=int(data["flags"]),
        )


@dataclass
class ProfileReport:
    """Container for the QC results of one profile."""

    profile_id: str
    created_at: datetime = field(default_factory=datetime.now)
    checks_run: list[str] = field(default_factory=list)
    num_levels: int = 0
    counters: dict[str, int] = field(default_factory=dict)
    flagged_levels: list[LevelFlag] = field(default_factory=list)
    validation_mismatches: int = 0
    metadata: dict = field(default_factory=dict)

    @property
    def total_flagged(self) -> int:
        """Number of levels flagged by the checks."""
        return len(self.flagged_levels)

    def add_level(self, level: LevelFlag) -> None:
        """Add a flagged level to the report."""
        self.flagged_levels.append(level)

    def levels_with(self, flag: ProfileFlag) -> list[int]:
        """Indices of flagged levels that carry ``flag``."""
        return [lf.level for lf in self.flagged_levels if lf.flags & flag]

    def to_dict(self) -> dict:
        """Convert report to dictionary."""
        return {
            "profile_id": self.profile_id,
            "created_at": self.created_at.isoformat(),
            "checks_run": self.checks_run,
            "num_levels": self.num_levels,
            "counters": self.counters,
            "total_flagged": self.total_flagged,
            "flagged_levels": [lf.to_dict() for lf in self.flagged_levels],
            "validation_mismatches": self.validation_mismatches,
            "metadata": self.metadata,
        }

    @classmethod
    def from_dict(cls, data: dict) -> ProfileReport:
        """Create report from dictionary."""
        report = cls(
            profile_id=data["profile_id"],
            created_at=datetime.fromisoformat(data["created_at"]),
            checks_run=data.get("checks_run", []),
            num_levels=data.get("num_levels", 0),
            counters=dict(data.get("counters", {})),
            validation_mismatches=data.get("validation_mismatches", 0),
            metadata=data.get("metadata", {}),
        )
        report.flagged_levels = [
            LevelFlag.from_dict(lf) for lf in data.get("flagged_levels", [])
        ]
        return report

    def to_dataframe(self) -> pd.DataFrame:
        """One row per flagged level, with the profile counters repeated."""
        import pandas as pd

        rows = []
        for lf in self.flagged_levels:
            row = {
                "profile_id": self.profile_id,
                "level": lf.level,
                "pressure": lf.pressure,
                "flags": lf.flags,
                "reasons": "|".join(ProfileFlag.describe(lf.flags)),
            }
            row.update(self.counters)
            rows.append(row)

        columns = ["profile_id", "level", "pressure", "flags", "reasons", *self.counters]
        return pd.DataFrame(rows, columns=columns)
