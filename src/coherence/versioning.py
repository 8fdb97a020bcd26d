"""Package versions and dependency version ranges.

Versions follow NuGet semantics: up to four numeric components, an optional
prerelease label and optional build metadata.  Two versions are equal when
their numeric components match after padding with zeros (``1.0`` equals
``1.0.0.0``) and their prerelease labels match case-insensitively.  Build
metadata never participates in comparison.
"""

from __future__ import annotations

import functools
import re
from dataclasses import dataclass

from src.shared.errors import VersionParseError

_VERSION_RE = re.compile(
    r"^(?P<release>\d+(?:\.\d+){0,3})"
    r"(?:-(?P<prerelease>[0-9A-Za-z\-]+(?:\.[0-9A-Za-z\-]+)*))?"
    r"(?:\+(?P<metadata>[0-9A-Za-z\-]+(?:\.[0-9A-Za-z\-]+)*))?$"
)

_RELEASE_WIDTH = 4


def _label_key(label: str) -> tuple[int, int | str]:
    if label.isdigit():
        return (0, int(label))
    return (1, label.casefold())


@functools.total_ordering
@dataclass(frozen=True, eq=False)
class NuGetVersion:
    """A parsed package version.

    ``str()`` returns the text the version was parsed from, so messages show
    exactly what a package declared.
    """

    release: tuple[int, ...]
    prerelease: str = ""
    metadata: str = ""
    original: str = ""

    @classmethod
    def parse(cls, text: str) -> NuGetVersion:
        """Parse *text* into a :class:`NuGetVersion`.

        Raises:
            VersionParseError: If *text* is not a valid version string.
        """
        if not isinstance(text, str):
            raise VersionParseError(f"Version must be a string, got {text!r}")
        stripped = text.strip()
        match = _VERSION_RE.match(stripped)
        if match is None:
            raise VersionParseError(f"'{text}' is not a valid version string")

        release = tuple(int(part) for part in match.group("release").split("."))
        return cls(
            release=release,
            prerelease=match.group("prerelease") or "",
            metadata=match.group("metadata") or "",
            original=stripped,
        )

    def _key(self) -> tuple:
        padded = self.release + (0,) * (_RELEASE_WIDTH - len(self.release))
        labels = tuple(_label_key(label) for label in self.prerelease.split(".") if label)
        # A release sorts after every prerelease of the same numbers
        return (padded, 0 if labels else 1, labels)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NuGetVersion):
            return NotImplemented
        return self._key() == other._key()

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, NuGetVersion):
            return NotImplemented
        return self._key() < other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __str__(self) -> str:
        if self.original:
            return self.original
        text = ".".join(str(part) for part in self.release)
        if self.prerelease:
            text += f"-{self.prerelease}"
        if self.metadata:
            text += f"+{self.metadata}"
        return text


@dataclass(frozen=True)
class VersionRange:
    """A dependency version range.

    Only :attr:`min_version` takes part in coherence verification; the
    remaining bounds are kept so the range renders the way it was declared.
    """

    min_version: NuGetVersion | None
    max_version: NuGetVersion | None = None
    include_min: bool = True
    include_max: bool = False

    @classmethod
    def parse(cls, text: str) -> VersionRange:
        """Parse a bare version or interval notation.

        ``1.0`` means "1.0 or higher".  Interval notation follows the NuGet
        forms ``[1.0]``, ``[1.0, 2.0)``, ``(1.0,]`` and ``(, 2.0]``.

        Raises:
            VersionParseError: If *text* is not a valid range.
        """
        if not isinstance(text, str):
            raise VersionParseError(f"Version range must be a string, got {text!r}")
        stripped = text.strip()
        if not stripped:
            raise VersionParseError("Version range is empty")

        if stripped[0] not in "[(":
            return cls(min_version=NuGetVersion.parse(stripped))

        if len(stripped) < 3 or stripped[-1] not in "])":
            raise VersionParseError(f"'{text}' is not a valid version range")

        include_min = stripped[0] == "["
        include_max = stripped[-1] == "]"
        inner = stripped[1:-1]

        if "," not in inner:
            # Exact version: only "[x]" is meaningful
            if not (include_min and include_max):
                raise VersionParseError(f"'{text}' is not a valid version range")
            exact = NuGetVersion.parse(inner)
            return cls(
                min_version=exact,
                max_version=exact,
                include_min=True,
                include_max=True,
            )

        low_text, _, high_text = inner.partition(",")
        if "," in high_text:
            raise VersionParseError(f"'{text}' is not a valid version range")
        low = NuGetVersion.parse(low_text) if low_text.strip() else None
        high = NuGetVersion.parse(high_text) if high_text.strip() else None
        if low is None and high is None:
            raise VersionParseError(f"'{text}' has neither a lower nor an upper bound")
        if low is not None and high is not None and high < low:
            raise VersionParseError(f"'{text}' has an upper bound below its lower bound")

        return cls(
            min_version=low,
            max_version=high,
            include_min=include_min and low is not None,
            include_max=include_max and high is not None,
        )

    @classmethod
    def unbounded(cls) -> VersionRange:
        """The range a dependency declared without any version accepts."""
        return cls(min_version=None, include_min=False)

    @property
    def is_exact(self) -> bool:
        return (
            self.min_version is not None
            and self.min_version == self.max_version
            and self.include_min
            and self.include_max
        )

    def __str__(self) -> str:
        if self.min_version is not None and self.include_min and self.max_version is None:
            return str(self.min_version)
        if self.is_exact:
            return f"[{self.min_version}]"
        low = str(self.min_version) if self.min_version is not None else ""
        high = str(self.max_version) if self.max_version is not None else ""
        opening = "[" if self.include_min else "("
        closing = "]" if self.include_max else ")"
        return f"{opening}{low}, {high}{closing}"
