"""Data models for coherence verification.

Input records (what a package loader produces) are frozen Pydantic v2
models.  Verification outputs are frozen dataclasses built fresh on every
run; nothing is ever appended to an input record.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum, Flag
from typing import Annotated, Any

import networkx as nx
from pydantic import BaseModel, BeforeValidator, Field

from src.coherence.frameworks import TargetFramework
from src.coherence.versioning import NuGetVersion, VersionRange
from src.shared.errors import ConfigurationError, VersionParseError
from src.shared.utils import package_key


def _coerce_version(value: Any) -> Any:
    if isinstance(value, float):
        # YAML turns an unquoted 1.10 into 1.1; refuse instead of guessing
        raise VersionParseError(f"Version {value!r} must be given as a string")
    if isinstance(value, int) and not isinstance(value, bool):
        value = str(value)
    return NuGetVersion.parse(value) if isinstance(value, str) else value


def _coerce_range(value: Any) -> Any:
    if value is None:
        return VersionRange.unbounded()
    if isinstance(value, float):
        raise VersionParseError(f"Version range {value!r} must be given as a string")
    if isinstance(value, int) and not isinstance(value, bool):
        value = str(value)
    return VersionRange.parse(value) if isinstance(value, str) else value


def _coerce_framework(value: Any) -> Any:
    return TargetFramework.parse(value) if value is None or isinstance(value, str) else value


VersionField = Annotated[NuGetVersion, BeforeValidator(_coerce_version)]
RangeField = Annotated[VersionRange, BeforeValidator(_coerce_range)]
FrameworkField = Annotated[TargetFramework | None, BeforeValidator(_coerce_framework)]


# ---------------------------------------------------------------------------
# Input records
# ---------------------------------------------------------------------------


class PackageIdentity(BaseModel):
    """Package id and the version the build produced."""
    id: str = Field(..., min_length=1)
    version: VersionField

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    def __str__(self) -> str:
        return f"{self.id} {self.version}"


class DependencyRef(BaseModel):
    """A declared dependency on another package."""
    id: str = Field(..., min_length=1)
    version_range: RangeField = Field(default=None, validate_default=True)

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    def __str__(self) -> str:
        return f"{self.id} {self.version_range}"


class DependencyGroup(BaseModel):
    """Dependencies that apply to one target framework (or to all of them)."""
    target_framework: FrameworkField = None
    dependencies: tuple[DependencyRef, ...] = ()

    model_config = {"frozen": True, "arbitrary_types_allowed": True}


class PackageRecord(BaseModel):
    """Metadata for one package produced by the build."""
    identity: PackageIdentity
    dependency_groups: tuple[DependencyGroup, ...] = ()
    is_partner_package: bool = False
    is_lineup_package: bool = False

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    @property
    def id(self) -> str:
        return self.identity.id

    @property
    def version(self) -> NuGetVersion:
        return self.identity.version

    def __str__(self) -> str:
        return str(self.identity)


# ---------------------------------------------------------------------------
# Verification settings
# ---------------------------------------------------------------------------


class VerifyBehavior(Flag):
    """Which mismatch categories fail the build.  ``NONE`` disables verification."""
    NONE = 0
    PRODUCT_PACKAGES = 1
    PARTNER_PACKAGES = 2
    ALL = PRODUCT_PACKAGES | PARTNER_PACKAGES

    @classmethod
    def parse(cls, value: VerifyBehavior | str | Iterable[str] | None) -> VerifyBehavior:
        """Build a behavior from flag names.

        Accepts a single name, a comma-separated string, or a list of names.
        Names are case-insensitive and may drop the ``_packages`` suffix
        (``"product,partner"``).

        Raises:
            ConfigurationError: If a name is not a known behavior.
        """
        if value is None:
            return cls.NONE
        if isinstance(value, cls):
            return value
        names = value.split(",") if isinstance(value, str) else list(value)

        behavior = cls.NONE
        for raw in names:
            name = str(raw).strip().casefold().replace("-", "").replace("_", "")
            if not name:
                continue
            if name.endswith("packages"):
                name = name[: -len("packages")]
            flag = _BEHAVIOR_NAMES.get(name)
            if flag is None:
                raise ConfigurationError(
                    f"Unknown verify behavior '{raw}'; expected one of "
                    "none, product_packages, partner_packages, all"
                )
            behavior |= flag
        return behavior

    def describe(self) -> str:
        if not self:
            return "none"
        return ", ".join(
            flag.name.lower()
            for flag in (VerifyBehavior.PRODUCT_PACKAGES, VerifyBehavior.PARTNER_PACKAGES)
            if flag in self
        )


_BEHAVIOR_NAMES: dict[str, VerifyBehavior] = {
    "none": VerifyBehavior.NONE,
    "product": VerifyBehavior.PRODUCT_PACKAGES,
    "partner": VerifyBehavior.PARTNER_PACKAGES,
    "all": VerifyBehavior.ALL,
}


class Severity(str, Enum):
    """Severity assigned to a version mismatch."""
    WARNING = "warning"
    ERROR = "error"


class SkipReason(str, Enum):
    """Why a package's own dependencies were not verified."""
    PARTNER = "partner"
    LINEUP = "lineup"
    IGNORE_LIST = "ignore_list"


# ---------------------------------------------------------------------------
# Verification outputs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SkippedPackage:
    """A package excluded from visitation by the exemption policy."""
    package: PackageRecord
    reason: SkipReason

    @property
    def message(self) -> str:
        if self.reason is SkipReason.PARTNER:
            return f"Skipping verification for external package {self.package.identity}."
        if self.reason is SkipReason.LINEUP:
            return f"Skipping verification for lineup package {self.package.identity}."
        return (
            f"Skipping verification for package {self.package.identity} "
            "because it is in ignore list."
        )


@dataclass(frozen=True)
class Mismatch:
    """A dependency whose declared minimum differs from the version built."""
    dependency: DependencyRef
    target_framework: TargetFramework | None
    resolved: PackageRecord


@dataclass(frozen=True)
class PackageVisit:
    """Everything the visitor found for one package."""
    package: PackageRecord
    mismatches: tuple[Mismatch, ...] = ()
    product_dependencies: tuple[PackageRecord, ...] = ()


@dataclass(frozen=True)
class GraphResult:
    """Result of visiting a package universe.

    ``visits`` maps each visited package identity to its :class:`PackageVisit`
    (skipped packages have no entry).  ``graph`` is a frozen
    :class:`networkx.DiGraph` whose nodes are case-insensitive package keys and
    whose edges are product dependencies.
    """
    visits: Mapping[PackageIdentity, PackageVisit]
    skipped: tuple[SkippedPackage, ...] = ()
    graph: nx.DiGraph = field(default_factory=nx.DiGraph)

    def for_package(self, package_id: str) -> PackageVisit | None:
        key = package_key(package_id)
        for identity, visit in self.visits.items():
            if package_key(identity.id) == key:
                return visit
        return None

    def iter_mismatches(self) -> Iterator[tuple[PackageRecord, Mismatch]]:
        """Yield ``(package, mismatch)`` pairs in visitation order."""
        for visit in self.visits.values():
            for mismatch in visit.mismatches:
                yield visit.package, mismatch

    def dependents_of(self, package_id: str) -> list[str]:
        """Ids of visited packages with a product dependency on *package_id*."""
        key = package_key(package_id)
        if key not in self.graph:
            return []
        return [self.graph.nodes[pred]["package"].id for pred in self.graph.predecessors(key)]

    def edges(self) -> list[tuple[str, str]]:
        """Product dependency edges as ``(dependent id, dependency id)`` pairs."""
        return [
            (self.graph.nodes[src]["package"].id, self.graph.nodes[dst]["package"].id)
            for src, dst in self.graph.edges()
        ]


@dataclass(frozen=True)
class ClassifiedMismatch:
    """A mismatch with its severity and rendered message."""
    package: PackageRecord
    mismatch: Mismatch
    severity: Severity
    message: str


@dataclass
class VerificationReport:
    """Outcome of a full verification run."""
    behavior: VerifyBehavior
    success: bool = True
    state: str = "init"
    warnings: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    findings: list[ClassifiedMismatch] = field(default_factory=list)
    skipped: list[SkippedPackage] = field(default_factory=list)
    graph: GraphResult | None = None

    @property
    def verified(self) -> bool:
        """False when verification was disabled and nothing was visited."""
        return self.graph is not None
