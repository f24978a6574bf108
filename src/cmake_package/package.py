"""Package lookup in its two modes: package only, and package plus target."""

from typing import Any, Protocol

from .document import UnitDocument
from .errors import DiscoveryInconsistencyError, TargetNotFoundError
from .models import Discovery, PackageQuery, PackageResult
from .resolver import TargetResolver


class PackageFinder(Protocol):
    """Interface to the native discovery mechanism."""

    def find(self, query: PackageQuery, require_version: bool) -> Discovery:
        """Find the package, applying `query.version` only if `require_version`."""
        ...


class PackageResolver:
    """Resolve packages and their targets through a PackageFinder."""

    def __init__(
        self,
        finder: PackageFinder,
        detect_cycles: bool = False,
        verbose: bool = False,
    ):
        self.finder = finder
        self.detect_cycles = detect_cycles
        self.verbose = verbose

    def find_package(self, query: PackageQuery) -> PackageResult:
        """
        Look up a package without its version constraint.

        The version is left out so that a package that is installed but too
        old is still reported, with the version actually found.
        """
        discovery = self.finder.find(query, require_version=False)
        if not discovery.found:
            if self.verbose:
                print(f"[package] {query.name} not found")
            return PackageResult(found=False, name=query.name)

        if self.verbose:
            print(f"[package] Found {query.name} {discovery.version or '(no version)'}")

        return PackageResult(
            found=True,
            name=query.name,
            version=discovery.version or None,
            components=query.components or None,
        )

    def find_target(self, query: PackageQuery, target: str) -> UnitDocument:
        """
        Look up a package with its version constraint and resolve one target.

        The package is expected to have been found by `find_package()`
        already, so not finding it now is fatal.

        Raises:
            DiscoveryInconsistencyError: If the package is no longer found
            TargetNotFoundError: If the package does not register `target`
        """
        discovery = self.finder.find(query, require_version=True)
        if not discovery.found or discovery.registry is None:
            raise DiscoveryInconsistencyError(f"Package {query.name} not found")

        if discovery.registry.lookup(target) is None:
            raise TargetNotFoundError(f"Target {target} not found in package {query.name}")

        if self.verbose:
            print(f"[package] Resolving {target} from {query.name}")

        resolver = TargetResolver(
            discovery.registry,
            detect_cycles=self.detect_cycles,
            verbose=self.verbose,
        )
        return resolver.resolve(target)


def package_document(result: PackageResult) -> dict[str, Any]:
    """JSON document for a package lookup; `{}` if the package was not found."""
    return result.to_dict()
