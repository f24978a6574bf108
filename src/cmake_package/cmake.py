"""Package discovery backed by the `cmake` executable."""

import importlib.resources
import json
import os
import re
import shutil
import subprocess
import tempfile
from dataclasses import dataclass
from pathlib import Path

from .constants import (
    CMAKE_MIN_VERSION,
    CONFIG_TYPES,
    DEFAULT_BUILD_TYPE,
    FIND_PACKAGE_SCRIPT,
    PROPERTY_SET,
)
from .errors import (
    CMakeExecutionError,
    CMakeNotFoundError,
    InvalidVersionError,
    UnsupportedCMakeVersionError,
)
from .models import Discovery, PackageQuery
from .registry import TargetRegistry
from .version import Version

_CMAKE_VERSION = re.compile(r"cmake3? version (\S+)")


@dataclass
class CMakeProgram:
    """A CMake executable found on the system."""

    path: Path
    version: Version


def find_cmake(cmake: str | Path | None = None) -> CMakeProgram:
    """
    Find the CMake program and check that it is recent enough.

    Args:
        cmake: Executable name or path; defaults to "cmake" on PATH

    Returns:
        CMakeProgram with the resolved path and detected version

    Raises:
        CMakeNotFoundError: If the executable cannot be found
        UnsupportedCMakeVersionError: If it is older than CMAKE_MIN_VERSION
    """
    path = shutil.which(str(cmake) if cmake else "cmake")
    if path is None:
        raise CMakeNotFoundError(f"{cmake or 'cmake'} not found in PATH")

    try:
        result = subprocess.run(
            [path, "--version"],
            capture_output=True,
            text=True,
        )
    except OSError as e:
        raise CMakeNotFoundError(f"Failed to run {path}: {e}")

    match = _CMAKE_VERSION.search(result.stdout)
    if not match:
        raise UnsupportedCMakeVersionError(f"Cannot determine version of {path}")

    try:
        version = Version.parse(match.group(1))
    except InvalidVersionError:
        raise UnsupportedCMakeVersionError(f"Cannot parse CMake version {match.group(1)!r}")

    if version < Version.parse(CMAKE_MIN_VERSION):
        raise UnsupportedCMakeVersionError(
            f"CMake {version} is too old, at least {CMAKE_MIN_VERSION} is required"
        )

    return CMakeProgram(path=Path(path), version=version)


def detect_build_type() -> str:
    """
    CMake build configuration to resolve per-configuration properties for.

    Taken from the CMAKE_BUILD_TYPE environment variable, matched
    case-insensitively; anything else maps to Debug.
    """
    requested = os.environ.get("CMAKE_BUILD_TYPE", "").strip().lower()
    for config in CONFIG_TYPES:
        if config.lower() == requested:
            return config
    return DEFAULT_BUILD_TYPE


def script_text() -> str:
    """Contents of the bundled discovery script."""
    return (
        importlib.resources.files("cmake_package")
        .joinpath(FIND_PACKAGE_SCRIPT)
        .read_text(encoding="utf-8")
    )


class CMakePackageFinder:
    """
    Find packages by configuring a throwaway CMake project.

    Every run happens in the same working directory, so later runs reuse the
    CMake cache (and thus the package location) of earlier ones.
    """

    def __init__(
        self,
        cmake: CMakeProgram,
        working_directory: Path | None = None,
        build_type: str | None = None,
        timeout: float | None = None,
        verbose: bool = False,
    ):
        self.cmake = cmake
        self.build_type = build_type or detect_build_type()
        self.timeout = timeout
        self.verbose = verbose
        self._tempdir = None
        if working_directory is None:
            self._tempdir = tempfile.TemporaryDirectory(prefix="cmake-package-")
            working_directory = Path(self._tempdir.name)
        self.working_directory = Path(working_directory)
        self._runs = 0

    def close(self) -> None:
        """Remove the temporary working directory, if this finder created one."""
        if self._tempdir is not None:
            self._tempdir.cleanup()
            self._tempdir = None

    def _setup_project(self) -> None:
        self.working_directory.mkdir(parents=True, exist_ok=True)
        (self.working_directory / "CMakeLists.txt").write_text(script_text(), encoding="utf-8")

    def _command(self, query: PackageQuery, require_version: bool, output_file: Path) -> list[str]:
        command = [
            str(self.cmake.path),
            "-S", str(self.working_directory),
            "-B", str(self.working_directory / "build"),
            f"-DCMAKE_BUILD_TYPE={self.build_type}",
            f"-DCMAKE_MIN_VERSION={CMAKE_MIN_VERSION}",
            f"-DPACKAGE={query.name}",
            f"-DOUTPUT_FILE={output_file}",
            f"-DPROPERTIES={';'.join(PROPERTY_SET)}",
        ]
        # Always passed so a value cached by a previous run is overwritten
        version = query.version if require_version and query.version else ""
        command.append(f"-DVERSION={version}")
        command.append(f"-DCOMPONENTS={';'.join(query.components)}")
        return command

    def find(self, query: PackageQuery, require_version: bool) -> Discovery:
        """
        Run CMake's find_package() for `query`.

        Raises:
            CMakeExecutionError: If CMake fails or writes no usable report
        """
        self._setup_project()
        self._runs += 1
        output_file = self.working_directory / f"discovery_{self._runs}.json"
        command = self._command(query, require_version, output_file)

        if self.verbose:
            print(f"[cmake] Running: {' '.join(command)}")

        try:
            result = subprocess.run(
                command,
                capture_output=not self.verbose,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            raise CMakeExecutionError(f"CMake timed out after {self.timeout} seconds")
        except OSError as e:
            raise CMakeExecutionError(f"Failed to run CMake: {e}")

        output = (result.stdout or "") + (result.stderr or "")
        if result.returncode != 0:
            raise CMakeExecutionError(
                f"CMake failed with exit code {result.returncode}", output
            )

        try:
            report = json.loads(output_file.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise CMakeExecutionError(f"Cannot read discovery report: {e}", output)

        found = bool(report.get("found"))
        registry = TargetRegistry.from_json(report.get("targets", {})) if found else None
        if self.verbose and registry is not None:
            print(f"[cmake] {query.name} registered {len(registry)} targets")

        return Discovery(
            found=found,
            version=report.get("version") or None,
            registry=registry,
        )
