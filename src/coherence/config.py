"""Verification configuration dataclass and YAML loader."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from src.coherence.exemptions import ExemptionPolicy
from src.coherence.models import VerifyBehavior
from src.shared.errors import ConfigurationError

DEFAULT_CONFIG_TEMPLATE = """\
# Coherence verification configuration

# Which mismatch categories fail the build:
#   product_packages, partner_packages, all, or none (disables verification)
verify_behavior:
  - product_packages
  - partner_packages

# Packages whose own dependencies are not verified (case-insensitive ids)
skip_verification: []
"""


@dataclass
class CoherenceConfig:
    """Verification settings loaded alongside the package manifest."""

    verify_behavior: VerifyBehavior = VerifyBehavior.ALL
    skip_verification: list[str] = field(default_factory=list)

    def exemption_policy(self, extra_skips: list[str] | None = None) -> ExemptionPolicy:
        return ExemptionPolicy([*self.skip_verification, *(extra_skips or [])])


def load_coherence_config(path: Path | str | None = None) -> CoherenceConfig:
    """Load verification configuration from a YAML file.

    Missing keys fall back to defaults and unknown keys are ignored.

    Args:
        path: Path to config YAML.  If ``None`` or the file does not
              exist, returns full defaults.

    Returns:
        Populated configuration dataclass.

    Raises:
        ConfigurationError: If the file is not a YAML mapping or names an
            unknown behavior.
    """
    if path is None:
        return CoherenceConfig()

    path = Path(path)
    if not path.exists():
        return CoherenceConfig()

    try:
        with open(path, "r", encoding="utf-8") as f:
            raw: Any = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigurationError(f"{path} must contain a YAML mapping")

    cfg = CoherenceConfig()
    if "verify_behavior" in raw:
        cfg.verify_behavior = VerifyBehavior.parse(raw["verify_behavior"])

    skips = raw.get("skip_verification") or []
    if not isinstance(skips, list) or not all(isinstance(item, str) for item in skips):
        raise ConfigurationError(f"skip_verification in {path} must be a list of package ids")
    cfg.skip_verification = list(skips)

    return cfg
