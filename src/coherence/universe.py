"""The package universe: every package produced by one build."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from src.coherence.models import PackageRecord
from src.shared.errors import DuplicatePackageError
from src.shared.utils import package_key


class PackageUniverse:
    """Case-insensitive, read-only lookup over a build's package records.

    Iteration yields records in the order they were supplied.  Construction
    fails with :class:`DuplicatePackageError` when two records share an id.
    """

    def __init__(self, packages: Iterable[PackageRecord]) -> None:
        self._packages: list[PackageRecord] = []
        self._lookup: dict[str, PackageRecord] = {}
        for package in packages:
            key = package_key(package.id)
            existing = self._lookup.get(key)
            if existing is not None:
                raise DuplicatePackageError(existing, package)
            self._lookup[key] = package
            self._packages.append(package)

    def get(self, package_id: str) -> PackageRecord | None:
        """Return the record for *package_id*, or ``None`` if it is not part of the build."""
        return self._lookup.get(package_key(package_id))

    def __contains__(self, package_id: object) -> bool:
        return isinstance(package_id, str) and package_key(package_id) in self._lookup

    def __iter__(self) -> Iterator[PackageRecord]:
        return iter(self._packages)

    def __len__(self) -> int:
        return len(self._packages)
