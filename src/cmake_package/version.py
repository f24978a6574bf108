"""Version numbers of CMake and of discovered packages."""

import re
from dataclasses import dataclass

from .errors import InvalidVersionError

_COMPONENT = re.compile(r"^(\d+)")


@dataclass(frozen=True, order=True)
class Version:
    """A `major.minor.patch.tweak` version, ordered component by component."""

    major: int
    minor: int = 0
    patch: int = 0
    tweak: int = 0

    @classmethod
    def parse(cls, version: str) -> "Version":
        """
        Parse a version string.

        Each of the one to four dot-separated components contributes its
        leading digits, so "1.1.1w" parses as 1.1.1.

        Raises:
            InvalidVersionError: If the string is not a version
        """
        parts = version.strip().split(".")
        if not parts or len(parts) > 4:
            raise InvalidVersionError(f"Invalid version: {version!r}")

        numbers = []
        for part in parts:
            match = _COMPONENT.match(part)
            if not match:
                raise InvalidVersionError(f"Invalid version: {version!r}")
            numbers.append(int(match.group(1)))

        return cls(*numbers)

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.tweak:
            text += f".{self.tweak}"
        return text
