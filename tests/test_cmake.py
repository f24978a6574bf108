"""Tests for the CMake-backed package finder."""

import json
import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from cmake_package.cmake import (
    CMakePackageFinder,
    CMakeProgram,
    detect_build_type,
    find_cmake,
    script_text,
)
from cmake_package.errors import (
    CMakeExecutionError,
    CMakeNotFoundError,
    UnsupportedCMakeVersionError,
)
from cmake_package.models import PackageQuery
from cmake_package.version import Version


def _fake_cmake(report, returncode=0, stderr=""):
    """subprocess.run replacement that writes `report` to -DOUTPUT_FILE."""

    def run(command, **kwargs):
        output = next(arg.split("=", 1)[1] for arg in command if arg.startswith("-DOUTPUT_FILE="))
        if report is not None:
            Path(output).write_text(json.dumps(report))
        return MagicMock(returncode=returncode, stdout="", stderr=stderr)

    return run


def _define(command, name):
    prefix = f"-D{name}="
    return next(arg[len(prefix):] for arg in command if arg.startswith(prefix))


class TestFindCMake:
    """Tests for find_cmake."""

    @patch("cmake_package.cmake.subprocess.run")
    @patch("cmake_package.cmake.shutil.which")
    def test_found(self, mock_which, mock_run):
        mock_which.return_value = "/usr/bin/cmake"
        mock_run.return_value = MagicMock(
            returncode=0,
            stdout="cmake version 3.28.1\n\nCMake suite maintained and supported by Kitware (kitware.com/cmake).\n",
            stderr="",
        )

        cmake = find_cmake()

        assert cmake.path == Path("/usr/bin/cmake")
        assert cmake.version == Version(3, 28, 1)
        assert mock_run.call_args[0][0] == ["/usr/bin/cmake", "--version"]

    @patch("cmake_package.cmake.shutil.which")
    def test_not_in_path(self, mock_which):
        mock_which.return_value = None
        with pytest.raises(CMakeNotFoundError):
            find_cmake()

    @patch("cmake_package.cmake.subprocess.run")
    @patch("cmake_package.cmake.shutil.which")
    def test_explicit_path(self, mock_which, mock_run):
        mock_which.return_value = "/opt/cmake/bin/cmake"
        mock_run.return_value = MagicMock(returncode=0, stdout="cmake version 3.30.0\n", stderr="")

        find_cmake("/opt/cmake/bin/cmake")

        mock_which.assert_called_once_with("/opt/cmake/bin/cmake")

    @patch("cmake_package.cmake.subprocess.run")
    @patch("cmake_package.cmake.shutil.which")
    def test_too_old(self, mock_which, mock_run):
        mock_which.return_value = "/usr/bin/cmake"
        mock_run.return_value = MagicMock(returncode=0, stdout="cmake version 3.16.3\n", stderr="")

        with pytest.raises(UnsupportedCMakeVersionError, match="too old"):
            find_cmake()

    @patch("cmake_package.cmake.subprocess.run")
    @patch("cmake_package.cmake.shutil.which")
    def test_unrecognized_output(self, mock_which, mock_run):
        mock_which.return_value = "/usr/bin/cmake"
        mock_run.return_value = MagicMock(returncode=0, stdout="not cmake at all\n", stderr="")

        with pytest.raises(UnsupportedCMakeVersionError):
            find_cmake()


class TestDetectBuildType:
    """Tests for detect_build_type."""

    def test_default(self, monkeypatch):
        monkeypatch.delenv("CMAKE_BUILD_TYPE", raising=False)
        assert detect_build_type() == "Debug"

    def test_case_insensitive(self, monkeypatch):
        monkeypatch.setenv("CMAKE_BUILD_TYPE", "relwithdebinfo")
        assert detect_build_type() == "RelWithDebInfo"

    def test_unknown(self, monkeypatch):
        monkeypatch.setenv("CMAKE_BUILD_TYPE", "Coverage")
        assert detect_build_type() == "Debug"


class TestScript:
    """Tests for the bundled discovery script."""

    def test_script_is_bundled(self):
        text = script_text()
        assert "find_package(${find_args})" in text
        assert "IMPORTED_TARGETS" in text
        assert 'message(FATAL_ERROR "OUTPUT_FILE is not set")' in text


class TestCMakePackageFinder:
    """Tests for CMakePackageFinder."""

    @pytest.fixture
    def cmake(self):
        return CMakeProgram(path=Path("/usr/bin/cmake"), version=Version(3, 28, 1))

    @pytest.fixture
    def finder(self, cmake, tmp_path):
        return CMakePackageFinder(cmake, working_directory=tmp_path, build_type="Release")

    @patch("cmake_package.cmake.subprocess.run")
    def test_command_without_version(self, mock_run, finder, tmp_path):
        mock_run.side_effect = _fake_cmake({"found": False})

        finder.find(PackageQuery("Foo", version="2.1", components=("a", "b")), require_version=False)

        command = mock_run.call_args[0][0]
        assert command[0] == "/usr/bin/cmake"
        assert _define(command, "PACKAGE") == "Foo"
        assert _define(command, "VERSION") == ""
        assert _define(command, "COMPONENTS") == "a;b"
        assert _define(command, "CMAKE_BUILD_TYPE") == "Release"
        assert "INTERFACE_LINK_LIBRARIES" in _define(command, "PROPERTIES").split(";")
        assert (tmp_path / "CMakeLists.txt").read_text() == script_text()

    @patch("cmake_package.cmake.subprocess.run")
    def test_command_with_version(self, mock_run, finder):
        mock_run.side_effect = _fake_cmake({"found": False})

        finder.find(PackageQuery("Foo", version="2.1"), require_version=True)

        assert _define(mock_run.call_args[0][0], "VERSION") == "2.1"

    @patch("cmake_package.cmake.subprocess.run")
    def test_not_found(self, mock_run, finder):
        mock_run.side_effect = _fake_cmake({"found": False})

        discovery = finder.find(PackageQuery("Foo"), require_version=False)

        assert discovery.found is False
        assert discovery.registry is None

    @patch("cmake_package.cmake.subprocess.run")
    def test_found(self, mock_run, finder):
        mock_run.side_effect = _fake_cmake({
            "found": True,
            "name": "Foo",
            "version": "2.1",
            "targets": {
                "Foo::core": {"NAME": "Foo::core", "INTERFACE_LINK_LIBRARIES": "Foo::util;m"},
                "Foo::util": {"NAME": "Foo::util"},
            },
        })

        discovery = finder.find(PackageQuery("Foo"), require_version=False)

        assert discovery.found is True
        assert discovery.version == "2.1"
        assert discovery.registry.lookup("Foo::util") == "Foo::util"
        assert discovery.registry.get_property("Foo::core", "INTERFACE_LINK_LIBRARIES") == ["Foo::util", "m"]

    @patch("cmake_package.cmake.subprocess.run")
    def test_runs_use_separate_reports(self, mock_run, finder):
        mock_run.side_effect = _fake_cmake({"found": False})

        finder.find(PackageQuery("Foo"), require_version=False)
        first = _define(mock_run.call_args[0][0], "OUTPUT_FILE")
        finder.find(PackageQuery("Foo"), require_version=True)
        second = _define(mock_run.call_args[0][0], "OUTPUT_FILE")

        assert first != second

    @patch("cmake_package.cmake.subprocess.run")
    def test_cmake_failure(self, mock_run, finder):
        mock_run.side_effect = _fake_cmake(None, returncode=1, stderr="CMake Error: boom")

        with pytest.raises(CMakeExecutionError, match="exit code 1") as exc_info:
            finder.find(PackageQuery("Foo"), require_version=False)
        assert "boom" in exc_info.value.output

    @patch("cmake_package.cmake.subprocess.run")
    def test_missing_report(self, mock_run, finder):
        mock_run.side_effect = _fake_cmake(None)

        with pytest.raises(CMakeExecutionError, match="Cannot read discovery report"):
            finder.find(PackageQuery("Foo"), require_version=False)

    @patch("cmake_package.cmake.subprocess.run")
    def test_timeout(self, mock_run, cmake, tmp_path):
        mock_run.side_effect = subprocess.TimeoutExpired(cmd="cmake", timeout=5)
        finder = CMakePackageFinder(cmake, working_directory=tmp_path, timeout=5)

        with pytest.raises(CMakeExecutionError, match="timed out"):
            finder.find(PackageQuery("Foo"), require_version=False)

    def test_temporary_working_directory(self, cmake):
        finder = CMakePackageFinder(cmake)
        assert finder.working_directory.exists()
        assert finder.working_directory.name.startswith("cmake-package-")

    def test_close_removes_temporary_directory(self, cmake):
        finder = CMakePackageFinder(cmake)
        working_directory = finder.working_directory

        finder.close()
        finder.close()

        assert not working_directory.exists()

    def test_close_keeps_given_directory(self, finder, tmp_path):
        finder.close()
        assert tmp_path.exists()
