"""Rules deciding which packages and dependency groups are not verified."""

from __future__ import annotations

from collections.abc import Iterable

from src.coherence.models import DependencyGroup, PackageRecord, SkippedPackage, SkipReason
from src.shared.utils import package_key


class ExemptionPolicy:
    """Skips partner, lineup and ignore-listed packages.

    Dependency groups without a target framework, or targeting a portable
    class library profile, are always exempt regardless of the package.
    """

    def __init__(self, skip_verification: Iterable[str] = ()) -> None:
        self._ignored: frozenset[str] = frozenset(
            package_key(package_id) for package_id in skip_verification
        )

    @property
    def ignored(self) -> frozenset[str]:
        return self._ignored

    def check(self, package: PackageRecord) -> SkippedPackage | None:
        """Return why *package* should not be visited, or ``None`` to visit it."""
        if package.is_partner_package:
            return SkippedPackage(package, SkipReason.PARTNER)
        if package.is_lineup_package:
            return SkippedPackage(package, SkipReason.LINEUP)
        if package_key(package.id) in self._ignored:
            return SkippedPackage(package, SkipReason.IGNORE_LIST)
        return None

    def is_exempt_group(self, group: DependencyGroup) -> bool:
        framework = group.target_framework
        return framework is None or framework.is_portable
