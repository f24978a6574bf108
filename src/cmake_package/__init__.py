"""Find CMake packages and describe their targets as JSON."""

from .api import CMakePackage, find_package
from .cmake import CMakePackageFinder, CMakeProgram, find_cmake
from .constants import CMAKE_MIN_VERSION
from .document import UnitDocument
from .errors import (
    CMakeExecutionError,
    CMakeNotFoundError,
    CMakePackageError,
    ConfigurationError,
    CyclicDependencyError,
    DiscoveryInconsistencyError,
    InvalidVersionError,
    PackageNotFoundError,
    TargetNotFoundError,
    UnsupportedCMakeVersionError,
    VersionError,
    VersionTooOldError,
)
from .models import PackageQuery, PackageResult
from .package import PackageResolver
from .registry import TargetRegistry
from .resolver import TargetResolver
from .target import CMakeTarget
from .version import Version

__all__ = [
    "CMAKE_MIN_VERSION",
    "CMakeExecutionError",
    "CMakeNotFoundError",
    "CMakePackage",
    "CMakePackageError",
    "CMakePackageFinder",
    "CMakeProgram",
    "CMakeTarget",
    "ConfigurationError",
    "CyclicDependencyError",
    "DiscoveryInconsistencyError",
    "InvalidVersionError",
    "PackageNotFoundError",
    "PackageQuery",
    "PackageResolver",
    "PackageResult",
    "TargetNotFoundError",
    "TargetRegistry",
    "TargetResolver",
    "UnitDocument",
    "UnsupportedCMakeVersionError",
    "Version",
    "VersionError",
    "VersionTooOldError",
    "find_cmake",
    "find_package",
]
