"""High-level entry point: find a package, then query its targets."""

import sys
from collections.abc import Iterable
from pathlib import Path

from .cmake import CMakePackageFinder, find_cmake
from .constants import DEFAULT_BUILD_TYPE
from .document import UnitDocument
from .errors import (
    CMakePackageError,
    PackageNotFoundError,
    TargetNotFoundError,
    VersionTooOldError,
)
from .models import PackageQuery
from .package import PackageResolver
from .target import CMakeTarget
from .version import Version


class CMakePackage:
    """
    A CMake package found on the system.

    Obtained from find_package(). Targets are resolved on demand by running
    CMake again in the same working directory.
    """

    def __init__(
        self,
        resolver: PackageResolver,
        name: str,
        version: Version | None = None,
        components: tuple[str, ...] | None = None,
        build_type: str = DEFAULT_BUILD_TYPE,
    ):
        self.resolver = resolver
        self.name = name
        self.version = version
        self.components = components
        self.build_type = build_type

    def __repr__(self) -> str:
        return f"CMakePackage(name={self.name!r}, version={self.version}, components={self.components!r})"

    def _query(self) -> PackageQuery:
        # Require the version found earlier so a different, older
        # installation cannot be picked up
        return PackageQuery(
            name=self.name,
            version=str(self.version) if self.version else None,
            components=self.components or (),
        )

    def target_document(self, target: str) -> UnitDocument:
        """Resolve `target` and all targets it depends on into one document."""
        return self.resolver.find_target(self._query(), target)

    def target(self, target: str) -> CMakeTarget | None:
        """
        Query information about one target of the package.

        Returns None if the package does not define `target`.
        """
        try:
            document = self.target_document(target)
        except TargetNotFoundError:
            return None
        return CMakeTarget.from_document(
            document,
            build_type=self.build_type,
            windows=sys.platform.startswith("win"),
        )

    def close(self) -> None:
        """Release the CMake working directory. Targets cannot be queried afterwards."""
        self.resolver.finder.close()


def find_package(
    name: str,
    version: str | None = None,
    components: Iterable[str] | None = None,
    cmake: str | Path | None = None,
    verbose: bool = False,
    detect_cycles: bool = False,
) -> CMakePackage:
    """
    Find a CMake package on the system.

    Args:
        name: Package name as passed to CMake's find_package()
        version: Minimum required version
        components: Components the package must provide
        cmake: CMake executable to use instead of the one on PATH
        verbose: Print CMake's output and resolution traces
        detect_cycles: Fail on indirect target cycles instead of recursing

    Raises:
        CMakeNotFoundError: If no suitable CMake is available
        PackageNotFoundError: If the package (or a component) is missing
        VersionTooOldError: If the package is older than `version`
        InvalidVersionError: If `version` or the found version is malformed
    """
    required = Version.parse(version) if version else None
    query = PackageQuery(
        name=name,
        version=str(required) if required else None,
        components=tuple(components or ()),
    )

    finder = CMakePackageFinder(find_cmake(cmake), verbose=verbose)
    resolver = PackageResolver(finder, detect_cycles=detect_cycles, verbose=verbose)
    try:
        result = resolver.find_package(query)
        if not result.found:
            raise PackageNotFoundError(f"Package {name} not found")

        found = Version.parse(result.version) if result.version else None
        # A package without a version satisfies any requirement
        if required and found and found < required:
            raise VersionTooOldError(found, required)
    except CMakePackageError:
        finder.close()
        raise

    return CMakePackage(
        resolver,
        name=result.name,
        version=found,
        components=result.components,
        build_type=finder.build_type,
    )
