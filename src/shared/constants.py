"""Shared constants used across the coherence tooling."""
from __future__ import annotations

# Application version
VERSION: str = "1.0.0"

# Service name used for log entries
SERVICE_NAME: str = "coherence-build"

# Default verification config file
DEFAULT_CONFIG_FILE: str = "coherence.yaml"

# Rendered in place of a target framework without a short moniker
UNSUPPORTED_FRAMEWORK_PLACEHOLDER: str = "unsupported"

# Framework identifier of portable class library profiles
PORTABLE_FRAMEWORK_IDENTIFIER: str = ".NETPortable"

# Log formats accepted by setup_logging
LOG_FORMATS: list[str] = ["text", "json"]

# Top-level logger that every module logger propagates to
LOGGER_NAMESPACE: str = "src"
