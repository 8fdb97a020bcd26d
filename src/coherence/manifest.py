"""Package manifest loader.

A manifest lists the packages a build produced, already extracted from their
archives.  YAML and JSON are both accepted (JSON by ``.json`` suffix)::

    packages:
      - id: Microsoft.AspNetCore.Mvc
        version: "1.0.0"
        partner: false
        lineup: false
        dependency_groups:
          - target_framework: net451
            dependencies:
              - id: Microsoft.AspNetCore.Routing
                version: "1.0.0"

A dependency without a ``version`` accepts any version.

Quote versions in YAML: an unquoted ``1.10`` is read as the float ``1.1``
and rejected.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from src.coherence.models import (
    DependencyGroup,
    DependencyRef,
    PackageIdentity,
    PackageRecord,
)
from src.shared.errors import ManifestError

logger = logging.getLogger(__name__)


def _build_record(entry: dict[str, Any]) -> PackageRecord:
    groups = [
        DependencyGroup(
            target_framework=group.get("target_framework"),
            dependencies=tuple(
                DependencyRef(id=dep.get("id", ""), version_range=dep.get("version"))
                for dep in group.get("dependencies") or []
            ),
        )
        for group in entry.get("dependency_groups") or []
    ]
    return PackageRecord(
        identity=PackageIdentity(id=entry.get("id", ""), version=entry.get("version")),
        dependency_groups=tuple(groups),
        is_partner_package=entry.get("partner", False),
        is_lineup_package=entry.get("lineup", False),
    )


def parse_manifest(data: Any, source: str = "<manifest>") -> list[PackageRecord]:
    """Convert decoded manifest data into package records.

    Args:
        data: Either a list of package entries or a mapping with a
              ``packages`` list.
        source: Name used in error messages.

    Raises:
        ManifestError: If the structure or any entry is invalid.
    """
    if isinstance(data, dict):
        data = data.get("packages")
    if not isinstance(data, list):
        raise ManifestError(f"{source}: expected a list of packages")

    records: list[PackageRecord] = []
    for index, entry in enumerate(data):
        if not isinstance(entry, dict):
            raise ManifestError(f"{source}: package #{index} is not a mapping")
        try:
            records.append(_build_record(entry))
        except (ValidationError, AttributeError, TypeError, ValueError) as exc:
            name = entry.get("id") or f"#{index}"
            raise ManifestError(f"{source}: package {name} is invalid: {exc}") from exc

    logger.info("Loaded %d package(s) from %s", len(records), source)
    return records


def load_manifest(path: Path | str) -> list[PackageRecord]:
    """Read and parse a YAML or JSON manifest file.

    Raises:
        ManifestError: If the file is missing, undecodable, or invalid.
    """
    path = Path(path)
    if not path.is_file():
        raise ManifestError(f"Manifest {path} does not exist")

    try:
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix.lower() == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ManifestError(f"Could not decode {path}: {exc}") from exc

    return parse_manifest(data, source=str(path))
