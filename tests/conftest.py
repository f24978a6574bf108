"""Shared fixtures: an in-memory package finder and sample target graphs."""

import pytest

from cmake_package.models import Discovery
from cmake_package.registry import TargetRegistry


class FakeFinder:
    """PackageFinder answering from fixed data and recording every call."""

    def __init__(self, found=True, version=None, targets=None, found_with_version=None):
        self.found = found
        self.version = version
        self.targets = targets or {}
        # Outcome of version-constrained lookups, defaults to `found`
        self.found_with_version = found if found_with_version is None else found_with_version
        self.calls = []
        self.build_type = "Debug"
        self.closed = False

    def find(self, query, require_version):
        self.calls.append((query, require_version))
        found = self.found_with_version if require_version else self.found
        if not found:
            return Discovery(found=False)
        return Discovery(found=True, version=self.version, registry=TargetRegistry(self.targets))

    def close(self):
        self.closed = True


@pytest.fixture
def make_finder():
    """Factory for FakeFinder instances."""
    return FakeFinder


@pytest.fixture
def foo_targets():
    """Foo::core links Foo::util, which has no dependencies of its own."""
    return {
        "Foo::core": {
            "NAME": "Foo::core",
            "LOCATION": "/usr/lib/libfoo_core.so.2",
            "INTERFACE_INCLUDE_DIRECTORIES": "/usr/include/foo",
            "INTERFACE_LINK_LIBRARIES": "Foo::util",
        },
        "Foo::util": {
            "NAME": "Foo::util",
            "LOCATION": "/usr/lib/libfoo_util.so.2",
        },
    }
