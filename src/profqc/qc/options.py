"""Immutable options shared by the profile checks of one run."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from profqc.utils.exceptions import ConfigError

DEFAULT_CHECKS = ("Interpolation",)

# hPa
DEFAULT_STANDARD_LEVELS = (
    1000.0, 925.0, 850.0, 700.0, 500.0, 400.0, 300.0, 250.0,
    200.0, 150.0, 100.0, 70.0, 50.0, 30.0, 20.0, 10.0,
)

# (breakpoint hPa, gap hPa), descending pressure. WMO GDPS guidance,
# reduced to 50 hPa at 150 and 100 hPa.
DEFAULT_BIG_GAPS = (
    (1000.0, 150.0), (925.0, 150.0), (850.0, 150.0), (700.0, 150.0),
    (500.0, 100.0), (400.0, 100.0), (300.0, 100.0), (250.0, 75.0),
    (200.0, 75.0), (150.0, 50.0), (100.0, 50.0), (70.0, 20.0),
    (50.0, 20.0), (30.0, 20.0), (20.0, 10.0), (10.0, 10.0),
)


@dataclass(frozen=True)
class ProfileCheckOptions:
    """Thresholds and settings read by the profile checks.

    Attributes:
        checks: Ordered keys of the checks to run.
        standard_levels: Standard pressures in hPa.
        big_gaps: Breakpoint table of (pressure hPa, gap hPa), descending.
        big_gap_init: Gap in Pa used below the lowest breakpoint.
        t_interp_tol: Interpolation tolerance in K.
        tol_relax: Tolerance multiplier for low-pressure levels.
        tol_relax_p_thresh: Pressure (Pa) below which ``tol_relax`` applies.
        max_levels: Optional cap on the number of levels checked.
        comparison_tol: Float tolerance used by the validator.
        compare_with_reference: Validate published state after each check.
    """

    checks: tuple[str, ...] = DEFAULT_CHECKS
    standard_levels: tuple[float, ...] = DEFAULT_STANDARD_LEVELS
    big_gaps: tuple[tuple[float, float], ...] = DEFAULT_BIG_GAPS
    big_gap_init: float = 1000.0
    t_interp_tol: float = 1.0
    tol_relax: float = 1.5
    tol_relax_p_thresh: float = 30000.0
    max_levels: int | None = None
    comparison_tol: float = 0.1
    compare_with_reference: bool = False
    extra: dict = field(default_factory=dict, compare=False, hash=False)

    def __post_init__(self) -> None:
        if self.t_interp_tol <= 0:
            raise ConfigError(f"ICheck_TInterpTol must be positive, got {self.t_interp_tol}")
        if self.tol_relax <= 0:
            raise ConfigError(f"ICheck_TolRelax must be positive, got {self.tol_relax}")
        if self.big_gap_init < 0:
            raise ConfigError(f"ICheck_BigGapInit must be non-negative, got {self.big_gap_init}")
        if self.comparison_tol < 0:
            raise ConfigError(f"Comparison_Tol must be non-negative, got {self.comparison_tol}")
        if self.max_levels is not None and self.max_levels < 0:
            raise ConfigError(f"max_levels must be non-negative, got {self.max_levels}")
        for breakpoint, gap in self.big_gaps:
            if gap < 0:
                raise ConfigError(f"Negative big gap {gap} hPa at {breakpoint} hPa")

    @classmethod
    def from_config(cls, config: dict[str, Any] | None) -> ProfileCheckOptions:
        """Build options from a configuration dictionary.

        Keys absent from ``config`` keep their defaults. Unrecognised keys
        are kept in ``extra``.

        Raises:
            ConfigError: If a value is malformed or out of range.
        """
        config = dict(config or {})
        kwargs: dict[str, Any] = {}

        try:
            if "checks" in config:
                checks = config.pop("checks")
                if isinstance(checks, str):
                    checks = [c.strip() for c in checks.split(",") if c.strip()]
                kwargs["checks"] = tuple(str(c) for c in checks)
            if "StandardLevels" in config:
                kwargs["standard_levels"] = tuple(
                    float(p) for p in config.pop("StandardLevels")
                )
            if "ICheck_BigGaps" in config:
                kwargs["big_gaps"] = _parse_big_gaps(config.pop("ICheck_BigGaps"))
            for key, attr in _SCALAR_KEYS.items():
                if key in config:
                    kwargs[attr] = float(config.pop(key))
            if "max_levels" in config:
                max_levels = config.pop("max_levels")
                kwargs["max_levels"] = None if max_levels is None else int(max_levels)
            if "compare_with_reference" in config:
                kwargs["compare_with_reference"] = bool(config.pop("compare_with_reference"))
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid profile check option: {e}") from e

        return cls(extra=config, **kwargs)

    def big_gap_for(self, pressure_hpa: int | float) -> float:
        """Maximum bracket distance in Pa for a standard level.

        Scans the breakpoint table from high to low pressure and takes the
        gap of the first breakpoint not above ``pressure_hpa``.
        """
        for breakpoint, gap in self.big_gaps:
            if breakpoint <= pressure_hpa:
                return gap * 100.0  # hPa -> Pa
        return self.big_gap_init

    def tolerance_for(self, pressure: float) -> float:
        """Interpolation tolerance in K for a level at ``pressure`` Pa."""
        if pressure < self.tol_relax_p_thresh:
            return self.t_interp_tol * self.tol_relax
        return self.t_interp_tol


_SCALAR_KEYS = {
    "ICheck_BigGapInit": "big_gap_init",
    "ICheck_TInterpTol": "t_interp_tol",
    "ICheck_TolRelax": "tol_relax",
    "ICheck_TolRelaxPThresh": "tol_relax_p_thresh",
    "Comparison_Tol": "comparison_tol",
}


def _parse_big_gaps(value: Any) -> tuple[tuple[float, float], ...]:
    """Normalise a breakpoint table given as a mapping or a list of pairs."""
    if isinstance(value, dict):
        pairs = value.items()
    else:
        pairs = value
    try:
        table = [(float(p), float(g)) for p, g in pairs]
    except (TypeError, ValueError) as e:
        raise ConfigError(f"ICheck_BigGaps must map pressure to gap: {e}") from e
    if not table:
        raise ConfigError("ICheck_BigGaps must not be empty")
    table.sort(key=lambda pair: pair[0], reverse=True)
    return tuple(table)
