"""Mismatch classifier: turns recorded mismatches into warnings or errors."""

from __future__ import annotations

from src.coherence.frameworks import TargetFramework
from src.coherence.models import (
    ClassifiedMismatch,
    GraphResult,
    Mismatch,
    PackageRecord,
    Severity,
    VerifyBehavior,
)
from src.shared.constants import UNSUPPORTED_FRAMEWORK_PLACEHOLDER


def render_framework(framework: TargetFramework | None) -> str:
    """Short moniker of *framework*, or a placeholder when it has none."""
    if framework is None:
        return UNSUPPORTED_FRAMEWORK_PLACEHOLDER
    return framework.short_name or UNSUPPORTED_FRAMEWORK_PLACEHOLDER


def format_mismatch(package: PackageRecord, mismatch: Mismatch) -> str:
    """Render the diagnostic line shared by warnings and errors."""
    dependency = mismatch.dependency
    return (
        f"{package.id} depends on {dependency.id} v{dependency.version_range} "
        f"({render_framework(mismatch.target_framework)}) "
        f"when the latest build is v{mismatch.resolved.version}."
    )


class MismatchClassifier:
    """Grades mismatches against the enforced :class:`VerifyBehavior` flags.

    A mismatch against a partner package is an error only when
    ``PARTNER_PACKAGES`` is enforced; any other mismatch is an error only
    when ``PRODUCT_PACKAGES`` is enforced.  Everything else is a warning.
    """

    def __init__(self, behavior: VerifyBehavior) -> None:
        self._behavior = behavior

    @property
    def behavior(self) -> VerifyBehavior:
        return self._behavior

    def classify(self, mismatch: Mismatch) -> Severity:
        if mismatch.resolved.is_partner_package:
            enforced = VerifyBehavior.PARTNER_PACKAGES in self._behavior
        else:
            enforced = VerifyBehavior.PRODUCT_PACKAGES in self._behavior
        return Severity.ERROR if enforced else Severity.WARNING

    def classify_all(self, result: GraphResult) -> list[ClassifiedMismatch]:
        """Classify every mismatch in *result*, preserving visitation order."""
        return [
            ClassifiedMismatch(
                package=package,
                mismatch=mismatch,
                severity=self.classify(mismatch),
                message=format_mismatch(package, mismatch),
            )
            for package, mismatch in result.iter_mismatches()
        ]
