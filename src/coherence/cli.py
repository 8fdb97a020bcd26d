"""Command-line entry point for coherence verification.

Commands
--------
``verify``       Verify a package manifest; exit 1 when any error is found.
``graph``        Print the product dependency edges of a manifest.
``init-config``  Write a default ``coherence.yaml``.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer

from src.coherence.config import DEFAULT_CONFIG_TEMPLATE, load_coherence_config
from src.coherence.display import print_error_panel, print_graph, print_verification_summary
from src.coherence.manifest import load_manifest
from src.coherence.models import PackageRecord, VerifyBehavior
from src.coherence.universe import PackageUniverse
from src.coherence.verifier import CoherenceVerifier
from src.coherence.visitor import DependencyGraphVisitor
from src.shared.config import CoherenceSettings
from src.shared.constants import DEFAULT_CONFIG_FILE, SERVICE_NAME
from src.shared.errors import CoherenceError
from src.shared.logging import new_run_id, setup_logging

app = typer.Typer(
    name="coherence",
    help="Verify that packages from one build reference each other's exact versions.",
    no_args_is_help=True,
)


def _configure_logging() -> CoherenceSettings:
    settings = CoherenceSettings()
    setup_logging(
        SERVICE_NAME,
        level=settings.log_level,
        log_format=settings.log_format,
        teamcity=settings.under_teamcity,
    )
    new_run_id()
    return settings


def _load_records(manifest: Path) -> list[PackageRecord]:
    try:
        return load_manifest(manifest)
    except CoherenceError as exc:
        print_error_panel(exc)
        raise typer.Exit(code=2) from exc


@app.command()
def verify(
    manifest: Path = typer.Argument(..., help="YAML or JSON package manifest."),
    behavior: Optional[str] = typer.Option(
        None,
        "--behavior",
        "-b",
        help="Comma-separated flags: product, partner, all or none. Overrides the config file.",
    ),
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Verification config (default: $COHERENCE_CONFIG)."
    ),
    skip: Optional[List[str]] = typer.Option(
        None, "--skip", "-s", help="Package id to exclude from verification (repeatable)."
    ),
) -> None:
    """Verify a package manifest for version coherence."""
    settings = _configure_logging()

    try:
        cfg = load_coherence_config(config or settings.config_path)
        if behavior is not None:
            cfg.verify_behavior = VerifyBehavior.parse(behavior)
    except CoherenceError as exc:
        print_error_panel(exc)
        raise typer.Exit(code=2) from exc

    records = _load_records(manifest)

    try:
        verifier = CoherenceVerifier(records, cfg.verify_behavior, cfg.exemption_policy(skip))
    except CoherenceError as exc:
        print_error_panel(exc)
        raise typer.Exit(code=1) from exc

    report = verifier.verify_all()
    print_verification_summary(report)
    if not report.success:
        raise typer.Exit(code=1)


@app.command()
def graph(
    manifest: Path = typer.Argument(..., help="YAML or JSON package manifest."),
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Verification config (default: $COHERENCE_CONFIG)."
    ),
) -> None:
    """Print the product dependency edges between packages of a manifest."""
    settings = _configure_logging()

    try:
        cfg = load_coherence_config(config or settings.config_path)
        universe = PackageUniverse(_load_records(manifest))
    except CoherenceError as exc:
        print_error_panel(exc)
        raise typer.Exit(code=1) from exc

    result = DependencyGraphVisitor(universe, cfg.exemption_policy()).visit()
    print_graph(result)


@app.command("init-config")
def init_config(
    path: Path = typer.Argument(Path(DEFAULT_CONFIG_FILE), help="Where to write the config."),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing file."),
) -> None:
    """Write a default verification config file."""
    if path.exists() and not force:
        print_error_panel(f"{path} already exists; use --force to overwrite it.")
        raise typer.Exit(code=1)
    path.write_text(DEFAULT_CONFIG_TEMPLATE, encoding="utf-8")
    typer.echo(f"Wrote {path}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
