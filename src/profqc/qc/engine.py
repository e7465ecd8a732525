"""QC Engine - runs the configured profile checks."""

from __future__ import annotations

from typing import TYPE_CHECKING

from profqc.models.flags import ProfileFlag
from profqc.models.report import LevelFlag, ProfileReport
from profqc.qc import variable_names as vn
from profqc.qc.options import ProfileCheckOptions
from profqc.qc.profile_indices import ProfileIndices
from profqc.qc.registry import CheckRegistry, check_registry
from profqc.qc.validator import ProfileCheckValidator
from profqc.utils.logging import get_logger

if TYPE_CHECKING:
    from profqc.qc.checks import BaseCheck
    from profqc.qc.data_handler import ProfileDataHandler

logger = get_logger("qc.engine")


class ProfileQCEngine:
    """Main QC engine that runs checks on one profile at a time."""

    def __init__(
        self,
        config: dict | None = None,
        registry: CheckRegistry | None = None,
    ) -> None:
        """Initialize QC engine.

        Args:
            config: Configuration dictionary with thresholds and settings.
            registry: Check registry to read factories from (defaults to the
                process-wide one). It is used as given, never modified.
        """
        self.config = config or {}
        self.options = ProfileCheckOptions.from_config(self.config)
        self.registry = check_registry if registry is None else registry

    def run(
        self,
        handler: ProfileDataHandler,
        checks: list[str] | None = None,
        profile_id: str = "profile",
    ) -> ProfileReport:
        """Run QC checks on a profile.

        Checks run in the configured order, each exactly once, so later
        checks see the flags written by earlier ones.

        Args:
            handler: Data handler of the profile.
            checks: Check keys to run (None = configured checks).
            profile_id: Identifier recorded in the report.

        Returns:
            ProfileReport with counters and flagged levels.

        Raises:
            UnknownCheckError: If a check key is not registered.
        """
        checks_to_run = list(checks) if checks is not None else list(self.options.checks)

        handler.ensure_counters(vn.COUNTERS)
        profile_indices = ProfileIndices(handler, self.options)
        validator = ProfileCheckValidator(self.options) if self.options.compare_with_reference else None

        # Build every check first so a bad key fails before any flag is written
        instances = [
            self.registry.create(key, self.options, profile_indices, handler, validator)
            for key in checks_to_run
        ]

        for check in instances:
            self._run_one(check, profile_id)

        return self._build_report(handler, profile_id, checks_to_run, profile_indices, validator)

    def run_single_check(
        self,
        check_name: str,
        handler: ProfileDataHandler,
    ) -> BaseCheck:
        """Run a single check on a profile.

        Args:
            check_name: Key of check to run.
            handler: Data handler of the profile.

        Returns:
            The check instance, for inspection of its working state.
        """
        handler.ensure_counters(vn.COUNTERS)
        profile_indices = ProfileIndices(handler, self.options)
        check = self.registry.create(check_name, self.options, profile_indices, handler)
        check.run_check()
        return check

    def _run_one(self, check: BaseCheck, profile_id: str) -> None:
        logger.debug(f"Running {check.name} on {profile_id}")
        check.run_check()
        if check.validator is not None:
            mismatches = check.validate()
            if mismatches:
                logger.warning(f"{check.name}: {mismatches} mismatches against reference for {profile_id}")

    @staticmethod
    def _build_report(
        handler: ProfileDataHandler,
        profile_id: str,
        checks_run: list[str],
        profile_indices: ProfileIndices,
        validator: ProfileCheckValidator | None,
    ) -> ProfileReport:
        report = ProfileReport(
            profile_id=profile_id,
            checks_run=checks_run,
            num_levels=profile_indices.num_levels_to_check,
            counters={name: _counter_value(handler, name) for name in vn.COUNTERS},
            validation_mismatches=validator.n_mismatches if validator else 0,
        )

        if handler.has(vn.QC_T_FLAGS) and handler.has(vn.AIR_PRESSURE):
            flags = handler.get(vn.QC_T_FLAGS, int)
            pressures = handler.get(vn.AIR_PRESSURE)
            for jlev in range(min(len(flags), len(pressures))):
                if int(flags[jlev]) & ProfileFlag.INTERPOLATION:
                    report.add_level(LevelFlag(jlev, float(pressures[jlev]), int(flags[jlev])))

        return report


def _counter_value(handler: ProfileDataHandler, name: str) -> int:
    values = handler.get(name, int)
    return int(values[0]) if len(values) else 0
