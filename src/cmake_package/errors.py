"""Exceptions raised while locating CMake packages and resolving targets."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .version import Version


class CMakePackageError(Exception):
    """Base class for all errors raised by this package."""

    pass


class ConfigurationError(CMakePackageError):
    """A required input (package name, output file) is missing."""

    pass


class CMakeNotFoundError(CMakePackageError):
    """The `cmake` executable was not found."""

    pass


class UnsupportedCMakeVersionError(CMakePackageError):
    """The available CMake is older than CMAKE_MIN_VERSION or unparsable."""

    pass


class CMakeExecutionError(CMakePackageError):
    """Running the discovery script failed."""

    def __init__(self, message: str, output: str = ""):
        super().__init__(message)
        self.output = output


class PackageNotFoundError(CMakePackageError):
    """The requested package was not found by CMake."""

    pass


class DiscoveryInconsistencyError(CMakePackageError):
    """A package found earlier was not found when its targets were queried."""

    pass


class TargetNotFoundError(CMakePackageError):
    """The requested target is not registered by the package."""

    pass


class CyclicDependencyError(CMakePackageError):
    """Targets depend on each other through one or more intermediaries."""

    def __init__(self, chain: tuple[str, ...]):
        super().__init__("Cyclic target dependency: " + " -> ".join(chain))
        self.chain = chain


class VersionError(CMakePackageError):
    """Base class for version-related errors."""

    pass


class InvalidVersionError(VersionError):
    """A version string could not be parsed."""

    pass


class VersionTooOldError(VersionError):
    """The package was found, but its version is older than requested."""

    def __init__(self, found: "Version", required: "Version"):
        super().__init__(f"Found version {found}, but at least {required} is required")
        self.found = found
        self.required = required
