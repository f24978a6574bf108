"""Ordered JSON documents describing one target each."""

from __future__ import annotations

import json
from collections.abc import Iterable, Iterator
from typing import Any, Union

from .models import PropertyValue, Scalar, UnitReference

Element = Union[str, "UnitDocument"]
Member = Union[str, list[Element]]


class UnitDocument:
    """
    JSON object built for exactly one target.

    Keys keep insertion order, and so do array elements. Array elements are
    either plain strings or nested documents; nested documents are kept as
    objects until serialization.
    """

    def __init__(self) -> None:
        self._members: dict[str, Member] = {}

    def set_scalar(self, key: str, value: str) -> None:
        """Set `key` to a plain string."""
        self._members[key] = value

    def set_array(self, key: str, values: Iterable[PropertyValue]) -> None:
        """Set `key` to an array built from classified property values."""
        self._members[key] = []
        for value in values:
            self.append(key, value)

    def append(self, key: str, value: PropertyValue | Element) -> None:
        """Append one element to the array at `key`, creating it if needed."""
        members = self._members.setdefault(key, [])
        if not isinstance(members, list):
            raise TypeError(f"{key} holds a scalar, not an array")

        if isinstance(value, UnitReference):
            members.append(value.document)
        elif isinstance(value, Scalar):
            members.append(value.value)
        else:
            members.append(value)

    def get(self, key: str, default: Any = None) -> Any:
        return self._members.get(key, default)

    def __getitem__(self, key: str) -> Member:
        return self._members[key]

    def __contains__(self, key: object) -> bool:
        return key in self._members

    def __iter__(self) -> Iterator[str]:
        return iter(self._members)

    def __len__(self) -> int:
        return len(self._members)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UnitDocument):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return f"UnitDocument({self.to_dict()!r})"

    def to_dict(self) -> dict[str, Any]:
        """Convert to plain JSON data, nested documents included."""
        data: dict[str, Any] = {}
        for key, member in self._members.items():
            if isinstance(member, list):
                data[key] = [
                    elem.to_dict() if isinstance(elem, UnitDocument) else elem
                    for elem in member
                ]
            else:
                data[key] = member
        return data

    def to_json(self, indent: int | None = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "UnitDocument":
        """Rebuild a document from JSON data produced by `to_dict()`."""
        document = cls()
        for key, member in data.items():
            if isinstance(member, list):
                document._members[key] = [
                    cls.from_dict(elem) if isinstance(elem, dict) else str(elem)
                    for elem in member
                ]
            else:
                document._members[key] = str(member)
        return document
