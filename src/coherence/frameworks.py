"""Target framework monikers.

Framework recognition is owned here rather than borrowed from a package
library's registry, so DNX and DNXCore monikers parse like any other.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from src.shared.constants import PORTABLE_FRAMEWORK_IDENTIFIER
from src.shared.errors import FrameworkParseError

# short moniker -> full framework identifier
KNOWN_FRAMEWORKS: dict[str, str] = {
    "net": ".NETFramework",
    "netstandard": ".NETStandard",
    "netcoreapp": ".NETCoreApp",
    "netcore": ".NETCore",
    "netmf": ".NETMicroFramework",
    "dotnet": ".NETPlatform",
    "portable": PORTABLE_FRAMEWORK_IDENTIFIER,
    "dnx": "DNX",
    "dnxcore": "DNXCore",
    "uap": "UAP",
    "win": "Windows",
    "wp": "WindowsPhone",
    "wpa": "WindowsPhoneApp",
    "sl": "Silverlight",
    "monoandroid": "MonoAndroid",
    "monotouch": "MonoTouch",
    "xamarinios": "Xamarin.iOS",
    "xamarinmac": "Xamarin.Mac",
}

_SHORT_BY_IDENTIFIER: dict[str, str] = {
    identifier.casefold(): short for short, identifier in KNOWN_FRAMEWORKS.items()
}

# Frameworks whose short names keep the dots in their version ("netstandard1.3")
_DOTTED_VERSIONS: frozenset[str] = frozenset(
    {".NETStandard", ".NETCoreApp", ".NETPlatform", "UAP"}
)

# Frameworks whose short names drop a zero minor version ("win8", "sl5")
_SINGLE_DIGIT_VERSIONS: frozenset[str] = frozenset(
    {"Windows", "WindowsPhone", "Silverlight"}
)

_SHORT_RE = re.compile(
    r"^(?P<name>[a-z]+?)(?P<version>\d+(?:\.\d+)*)?(?:-(?P<profile>.+))?$",
    re.IGNORECASE,
)


def _canonical_identifier(identifier: str) -> str:
    short = _SHORT_BY_IDENTIFIER.get(identifier.casefold())
    return KNOWN_FRAMEWORKS[short] if short else identifier


def _parse_version(text: str, dotted: bool) -> tuple[int, ...]:
    if not text:
        return ()
    if "." in text or dotted:
        parts = tuple(int(part) for part in text.split("."))
    else:
        parts = tuple(int(digit) for digit in text)
    # Normalize to at least two components without trailing zeros past that
    while len(parts) > 2 and parts[-1] == 0:
        parts = parts[:-1]
    if len(parts) == 1:
        parts = parts + (0,)
    return parts


@dataclass(frozen=True)
class TargetFramework:
    """A compilation/runtime target a dependency group applies to."""

    identifier: str
    version: tuple[int, ...] = ()
    profile: str = ""

    @classmethod
    def parse(cls, text: str | None) -> TargetFramework | None:
        """Parse a short (``net45``) or full (``.NETFramework,Version=v4.5``) moniker.

        Returns ``None`` for an absent or empty moniker, which marks a
        framework-agnostic dependency group.

        Raises:
            FrameworkParseError: If *text* cannot be parsed.
        """
        if text is None:
            return None
        if not isinstance(text, str):
            raise FrameworkParseError(f"Target framework must be a string, got {text!r}")
        stripped = text.strip()
        if not stripped:
            return None
        if "," in stripped:
            return cls._parse_full(stripped)
        return cls._parse_short(stripped)

    @classmethod
    def _parse_full(cls, text: str) -> TargetFramework:
        identifier, *pairs = (part.strip() for part in text.split(","))
        if not identifier:
            raise FrameworkParseError(f"'{text}' has no framework identifier")
        identifier = _canonical_identifier(identifier)

        version: tuple[int, ...] = ()
        profile = ""
        for pair in pairs:
            key, sep, value = pair.partition("=")
            if not sep:
                raise FrameworkParseError(f"'{text}' has a malformed component '{pair}'")
            key = key.strip().casefold()
            value = value.strip()
            if key == "version":
                digits = value[1:] if value[:1] in ("v", "V") else value
                try:
                    version = _parse_version(digits, dotted=True)
                except ValueError as exc:
                    raise FrameworkParseError(f"'{text}' has an invalid version") from exc
            elif key == "profile":
                profile = value
        return cls(identifier=identifier, version=version, profile=profile)

    @classmethod
    def _parse_short(cls, text: str) -> TargetFramework:
        match = _SHORT_RE.match(text)
        if match is None:
            # Unknown moniker: kept verbatim, it has no short name
            return cls(identifier=text)

        name = match.group("name").casefold()
        identifier = KNOWN_FRAMEWORKS.get(name)
        if identifier is None:
            return cls(identifier=text)

        version = _parse_version(
            match.group("version") or "", dotted=identifier in _DOTTED_VERSIONS
        )
        return cls(identifier=identifier, version=version, profile=match.group("profile") or "")

    @property
    def is_portable(self) -> bool:
        """True for portable class library profiles."""
        return self.identifier.casefold() == PORTABLE_FRAMEWORK_IDENTIFIER.casefold()

    @property
    def short_name(self) -> str | None:
        """The short folder moniker, or ``None`` when the framework is unknown."""
        short = _SHORT_BY_IDENTIFIER.get(self.identifier.casefold())
        if short is None:
            return None
        if self.is_portable:
            return f"{short}-{self.profile}" if self.profile else short

        version = self.version
        if self.identifier in _SINGLE_DIGIT_VERSIONS and len(version) == 2 and version[1] == 0:
            version = version[:1]
        if any(version):
            if self.identifier in _DOTTED_VERSIONS or any(part > 9 for part in version):
                short += ".".join(str(part) for part in version)
            else:
                short += "".join(str(part) for part in version)
        if self.profile:
            short += f"-{self.profile}"
        return short

    @property
    def full_name(self) -> str:
        text = self.identifier
        if self.version:
            text += ",Version=v" + ".".join(str(part) for part in self.version)
        if self.profile:
            text += f",Profile={self.profile}"
        return text

    def __str__(self) -> str:
        return self.short_name or self.full_name
