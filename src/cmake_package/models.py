"""Data models for package queries, results, and property values."""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Union

if TYPE_CHECKING:
    from .document import UnitDocument
    from .registry import TargetRepository


@dataclass(frozen=True)
class PackageQuery:
    """A request to find one package."""

    name: str
    version: str | None = None  # minimum version
    components: tuple[str, ...] = ()


@dataclass(frozen=True)
class PackageResult:
    """Outcome of looking up a package."""

    found: bool
    name: str
    version: str | None = None
    components: tuple[str, ...] | None = None

    def to_dict(self) -> dict[str, Any]:
        if not self.found:
            return {}
        data: dict[str, Any] = {"name": self.name}
        if self.version:
            data["version"] = self.version
        if self.components:
            data["components"] = list(self.components)
        return data


@dataclass
class Discovery:
    """What one run of the discovery mechanism reports."""

    found: bool
    version: str | None = None
    registry: "TargetRepository | None" = None


@dataclass(frozen=True)
class Scalar:
    """A plain property value."""

    value: str


@dataclass(frozen=True)
class UnitReference:
    """A property value naming another target, resolved into its document."""

    target: str
    document: "UnitDocument" = field(compare=False)


PropertyValue = Union[Scalar, UnitReference]
