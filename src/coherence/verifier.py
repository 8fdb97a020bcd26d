"""Verification orchestrator.

A run moves through a small state machine built with ``transitions``::

    init -> visiting -> classifying -> reporting -> passed | failed
    init -> disabled                          (behavior is NONE)

The whole universe is visited before anything is classified, so a failure
while visiting one package aborts the run before any message is emitted.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from transitions import Machine

from src.coherence.classifier import MismatchClassifier
from src.coherence.exemptions import ExemptionPolicy
from src.coherence.models import (
    ClassifiedMismatch,
    GraphResult,
    PackageRecord,
    Severity,
    VerificationReport,
    VerifyBehavior,
)
from src.coherence.universe import PackageUniverse
from src.coherence.visitor import DependencyGraphVisitor

logger = logging.getLogger(__name__)

WARNINGS_HEADER = (
    "Following packages have mismatches but are not failures due to disabled verifications:"
)

# ---------------------------------------------------------------------------
# States and transitions
# ---------------------------------------------------------------------------
STATES: list[str] = [
    "init",
    "disabled",
    "visiting",
    "classifying",
    "reporting",
    "passed",
    "failed",
]

TRANSITIONS: list[dict[str, Any]] = [
    {"trigger": "begin", "source": "init", "dest": "visiting", "conditions": ["is_enabled"]},
    {"trigger": "begin", "source": "init", "dest": "disabled", "unless": ["is_enabled"]},
    {"trigger": "visited", "source": "visiting", "dest": "classifying", "conditions": ["has_graph"]},
    {"trigger": "classified", "source": "classifying", "dest": "reporting"},
    {"trigger": "reported", "source": "reporting", "dest": "passed", "unless": ["has_errors"]},
    {"trigger": "reported", "source": "reporting", "dest": "failed", "conditions": ["has_errors"]},
]


class VerificationRun:
    """Model object for the verification state machine.

    Holds the intermediate results of one run.  The ``state`` attribute is
    managed by the machine.
    """

    def __init__(self, behavior: VerifyBehavior) -> None:
        self.state: str = "init"
        self.behavior = behavior
        self.graph: GraphResult | None = None
        self.findings: list[ClassifiedMismatch] = []

    # ---- Guard methods ---------------------------------------------------

    def is_enabled(self, *args, **kwargs) -> bool:
        """True unless the behavior disables verification entirely."""
        return bool(self.behavior)

    def has_graph(self, *args, **kwargs) -> bool:
        return self.graph is not None

    def has_errors(self, *args, **kwargs) -> bool:
        return any(finding.severity is Severity.ERROR for finding in self.findings)

    # ---- Results ---------------------------------------------------------

    def messages(self, severity: Severity) -> list[str]:
        return [finding.message for finding in self.findings if finding.severity is severity]

    def report(self) -> VerificationReport:
        errors = self.messages(Severity.ERROR)
        return VerificationReport(
            behavior=self.behavior,
            success=not errors,
            state=self.state,
            warnings=self.messages(Severity.WARNING),
            errors=errors,
            findings=list(self.findings),
            skipped=list(self.graph.skipped) if self.graph is not None else [],
            graph=self.graph,
        )


def create_verification_machine(model: VerificationRun) -> Machine:
    """Create and return a ``Machine`` bound to *model*.

    Invalid triggers raise, so a driver that skips a phase fails loudly.
    """
    return Machine(
        model=model,
        states=STATES,
        transitions=TRANSITIONS,
        initial="init",
        auto_transitions=False,
        send_event=True,
    )


class CoherenceVerifier:
    """Checks that every in-build dependency names the version the build produced.

    Usage
    -----
    ::

        verifier = CoherenceVerifier(records, VerifyBehavior.PRODUCT_PACKAGES)
        report = verifier.verify_all()
        if not report.success:
            sys.exit(1)

    The universe is built in the constructor, so duplicate package ids fail
    before any verification starts.
    """

    def __init__(
        self,
        packages: PackageUniverse | Iterable[PackageRecord],
        behavior: VerifyBehavior,
        policy: ExemptionPolicy | None = None,
    ) -> None:
        if isinstance(packages, PackageUniverse):
            self._universe = packages
        else:
            self._universe = PackageUniverse(packages)
        self._behavior = behavior
        self._policy = policy or ExemptionPolicy()

    @property
    def universe(self) -> PackageUniverse:
        return self._universe

    def verify_all(self) -> VerificationReport:
        """Run one full verification pass and emit its warnings and errors.

        Returns:
            The run's :class:`VerificationReport`; ``success`` is ``False``
            exactly when at least one mismatch was classified as an error.
        """
        run = VerificationRun(self._behavior)
        create_verification_machine(run)

        run.begin()
        if run.state == "disabled":
            logger.info("Coherence verification is disabled")
            return run.report()

        run.graph = DependencyGraphVisitor(self._universe, self._policy).visit()
        run.visited()

        run.findings = MismatchClassifier(self._behavior).classify_all(run.graph)
        run.classified()

        self._emit(run)
        run.reported()

        logger.info(
            "Coherence verification %s -- packages=%d, visited=%d, skipped=%d, "
            "warnings=%d, errors=%d",
            run.state,
            len(self._universe),
            len(run.graph.visits),
            len(run.graph.skipped),
            len(run.messages(Severity.WARNING)),
            len(run.messages(Severity.ERROR)),
        )
        return run.report()

    @staticmethod
    def _emit(run: VerificationRun) -> None:
        warnings = run.messages(Severity.WARNING)
        if warnings:
            logger.info(WARNINGS_HEADER)
            for warning in warnings:
                logger.warning(warning)

        for error in run.messages(Severity.ERROR):
            logger.error(error)
