"""Test fixtures for coherence verification.

Provides a record factory and paths to the sample build drop:
- packages.yaml -- six packages covering mismatches, partner, lineup and ignore-list cases
- coherence.yaml -- product-only enforcement plus the historical ignore list
"""

from __future__ import annotations

from pathlib import Path

from src.coherence.models import (
    DependencyGroup,
    DependencyRef,
    PackageIdentity,
    PackageRecord,
)

SAMPLE_DROP_DIR = Path(__file__).resolve().parents[2] / "sample_data" / "build_drop"


def sample_path(name: str) -> Path:
    """Return the absolute path to a file in the sample build drop."""
    path = SAMPLE_DROP_DIR / name
    if not path.exists():
        raise FileNotFoundError(f"Sample file not found: {path}")
    return path


def make_package(
    package_id: str,
    version: str = "1.0.0",
    dependencies: dict[str | None, list[tuple[str, str]]] | None = None,
    partner: bool = False,
    lineup: bool = False,
) -> PackageRecord:
    """Create a PackageRecord from ``{framework: [(dep_id, dep_range), ...]}``."""
    groups = tuple(
        DependencyGroup(
            target_framework=framework,
            dependencies=tuple(
                DependencyRef(id=dep_id, version_range=dep_range) for dep_id, dep_range in deps
            ),
        )
        for framework, deps in (dependencies or {}).items()
    )
    return PackageRecord(
        identity=PackageIdentity(id=package_id, version=version),
        dependency_groups=groups,
        is_partner_package=partner,
        is_lineup_package=lineup,
    )
