"""Read-only view of the targets a package registered with CMake."""

from collections.abc import Mapping, Sequence
from typing import Any, Protocol


class TargetRepository(Protocol):
    """Interface the resolver queries targets through."""

    def lookup(self, name: str) -> str | None:
        """Return the handle of a registered target, or None."""
        ...

    def get_property(self, target: str, prop: str) -> list[str]:
        """Return the raw values of `prop` on `target`, in CMake's order."""
        ...


def split_cmake_list(value: str) -> list[str]:
    """
    Split a CMake list the way foreach() expands it.

    Splits on semicolons that are neither escaped nor inside square
    brackets. Empty elements are dropped.

    Args:
        value: Raw CMake list, e.g. "a;b\\;c;[x;y]"

    Returns:
        List elements, e.g. ["a", "b;c", "[x;y]"]
    """
    elements = []
    current = []
    depth = 0
    i = 0
    while i < len(value):
        char = value[i]
        if char == "\\" and i + 1 < len(value) and value[i + 1] == ";":
            current.append(";")
            i += 2
            continue
        if char == "[":
            depth += 1
        elif char == "]" and depth > 0:
            depth -= 1
        elif char == ";" and depth == 0:
            elements.append("".join(current))
            current = []
            i += 1
            continue
        current.append(char)
        i += 1
    elements.append("".join(current))

    return [elem for elem in elements if elem]


class TargetRegistry:
    """
    Targets and their raw property values, keyed by target name.

    Property values may be given either as raw CMake list strings (as the
    discovery script reports them) or as already split sequences.
    """

    def __init__(self, targets: Mapping[str, Mapping[str, str | Sequence[str]]] | None = None):
        self._targets: dict[str, dict[str, list[str]]] = {}
        for name, properties in (targets or {}).items():
            self._targets[name] = {
                prop: split_cmake_list(raw) if isinstance(raw, str) else list(raw)
                for prop, raw in properties.items()
            }

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "TargetRegistry":
        """Build a registry from the "targets" object of a discovery report."""
        targets = {}
        for name, properties in data.items():
            if not isinstance(properties, Mapping):
                raise ValueError(f"Malformed properties for target {name!r}")
            targets[name] = {prop: str(raw) for prop, raw in properties.items()}
        return cls(targets)

    def lookup(self, name: str) -> str | None:
        return name if name in self._targets else None

    def get_property(self, target: str, prop: str) -> list[str]:
        return list(self._targets.get(target, {}).get(prop, []))

    def names(self) -> list[str]:
        return list(self._targets)

    def __contains__(self, name: object) -> bool:
        return name in self._targets

    def __len__(self) -> int:
        return len(self._targets)
