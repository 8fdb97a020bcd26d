"""Tests for src.coherence.config (verification config loading)."""
from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from src.coherence.config import (
    DEFAULT_CONFIG_TEMPLATE,
    CoherenceConfig,
    load_coherence_config,
)
from src.coherence.models import VerifyBehavior
from src.shared.errors import ConfigurationError


def _write(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "coherence.yaml"
    path.write_text(content, encoding="utf-8")
    return path


class TestDefaults:

    def test_dataclass_defaults(self):
        cfg = CoherenceConfig()
        assert cfg.verify_behavior is VerifyBehavior.ALL
        assert cfg.skip_verification == []

    def test_none_path(self):
        assert load_coherence_config(None) == CoherenceConfig()

    def test_missing_file(self, tmp_path):
        assert load_coherence_config(tmp_path / "absent.yaml") == CoherenceConfig()

    def test_empty_file(self, tmp_path):
        assert load_coherence_config(_write(tmp_path, "")) == CoherenceConfig()


class TestLoad:

    def test_sample_config(self, sample_config):
        cfg = load_coherence_config(sample_config)
        assert cfg.verify_behavior is VerifyBehavior.PRODUCT_PACKAGES
        assert len(cfg.skip_verification) == 16
        assert "RazorPageGenerator" in cfg.skip_verification

    def test_behavior_none(self, tmp_path):
        cfg = load_coherence_config(_write(tmp_path, "verify_behavior: none\n"))
        assert cfg.verify_behavior is VerifyBehavior.NONE

    def test_behavior_comma_separated(self, tmp_path):
        cfg = load_coherence_config(_write(tmp_path, "verify_behavior: product, partner\n"))
        assert cfg.verify_behavior is VerifyBehavior.ALL

    def test_unknown_keys_ignored(self, tmp_path):
        cfg = load_coherence_config(_write(tmp_path, "unrelated: 1\n"))
        assert cfg == CoherenceConfig()

    def test_template_round_trip(self, tmp_path):
        cfg = load_coherence_config(_write(tmp_path, DEFAULT_CONFIG_TEMPLATE))
        assert cfg == CoherenceConfig()
        assert yaml.safe_load(DEFAULT_CONFIG_TEMPLATE)["skip_verification"] == []


class TestErrors:

    def test_unknown_behavior(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_coherence_config(_write(tmp_path, "verify_behavior: sometimes\n"))

    def test_skip_list_must_be_list(self, tmp_path):
        with pytest.raises(ConfigurationError, match="skip_verification"):
            load_coherence_config(_write(tmp_path, "skip_verification: RazorPageGenerator\n"))

    def test_skip_list_entries_must_be_strings(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_coherence_config(_write(tmp_path, "skip_verification: [1, 2]\n"))

    def test_non_mapping(self, tmp_path):
        with pytest.raises(ConfigurationError, match="mapping"):
            load_coherence_config(_write(tmp_path, "- product\n"))

    def test_invalid_yaml(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            load_coherence_config(_write(tmp_path, "verify_behavior: [unclosed\n"))


class TestExemptionPolicy:

    def test_merges_extra_skips(self):
        cfg = CoherenceConfig(skip_verification=["A"])
        policy = cfg.exemption_policy(["b"])
        assert policy.ignored == frozenset({"a", "b"})

    def test_config_not_mutated(self):
        cfg = CoherenceConfig(skip_verification=["A"])
        cfg.exemption_policy(["B"])
        assert cfg.skip_verification == ["A"]
