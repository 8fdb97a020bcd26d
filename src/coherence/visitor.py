"""Dependency graph visitor.

Walks every verifiable package in a :class:`PackageUniverse` and records,
for each dependency that resolves inside the universe, a version mismatch
and/or a product-dependency edge.  The input records are never modified;
all findings are returned in a fresh :class:`GraphResult`.
"""

from __future__ import annotations

import logging
from types import MappingProxyType

import networkx as nx

from src.coherence.exemptions import ExemptionPolicy
from src.coherence.models import (
    GraphResult,
    Mismatch,
    PackageIdentity,
    PackageRecord,
    PackageVisit,
    SkippedPackage,
    SkipReason,
)
from src.coherence.universe import PackageUniverse
from src.shared.utils import package_key

logger = logging.getLogger(__name__)


class DependencyGraphVisitor:
    """Builds the product dependency graph and collects version mismatches."""

    def __init__(self, universe: PackageUniverse, policy: ExemptionPolicy | None = None) -> None:
        self._universe = universe
        self._policy = policy or ExemptionPolicy()

    def visit(self) -> GraphResult:
        """Visit every package in universe order.

        Returns:
            A :class:`GraphResult` holding one :class:`PackageVisit` per
            visited package, the skipped packages, and the frozen graph.

        Raises:
            Exception: Whatever failed while visiting a package; the failure
                is logged with the package identity and aborts the run.
        """
        graph = nx.DiGraph()
        for package in self._universe:
            graph.add_node(package_key(package.id), package=package)

        visits: dict[PackageIdentity, PackageVisit] = {}
        skipped: list[SkippedPackage] = []

        for package in self._universe:
            skip = self._policy.check(package)
            if skip is not None:
                if skip.reason is SkipReason.IGNORE_LIST:
                    logger.warning(skip.message)
                else:
                    logger.info(skip.message)
                skipped.append(skip)
                continue

            logger.info("Processing package %s", package.identity)
            try:
                visit = self.visit_package(package)
            except Exception:
                logger.error("Unable to verify package %s", package.identity)
                raise

            visits[package.identity] = visit
            for dependency in visit.product_dependencies:
                graph.add_edge(package_key(package.id), package_key(dependency.id))

        return GraphResult(
            visits=MappingProxyType(visits),
            skipped=tuple(skipped),
            graph=nx.freeze(graph),
        )

    def visit_package(self, package: PackageRecord) -> PackageVisit:
        """Inspect one package's dependency groups.

        The exemption check for the package itself is the caller's job;
        exempt dependency groups are skipped here.
        """
        mismatches: list[Mismatch] = []
        product_dependencies: list[PackageRecord] = []

        for group in package.dependency_groups:
            if self._policy.is_exempt_group(group):
                continue

            for dependency in group.dependencies:
                resolved = self._universe.get(dependency.id)
                if resolved is None:
                    # External dependency
                    continue

                # Only the minimum bound matters: the build must reference
                # exactly what it produced.
                if resolved.version != dependency.version_range.min_version:
                    mismatches.append(
                        Mismatch(
                            dependency=dependency,
                            target_framework=group.target_framework,
                            resolved=resolved,
                        )
                    )

                if not resolved.is_partner_package:
                    product_dependencies.append(resolved)

        return PackageVisit(
            package=package,
            mismatches=tuple(mismatches),
            product_dependencies=tuple(product_dependencies),
        )
