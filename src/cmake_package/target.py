"""Flattened view of a resolved target, as a consumer links against it."""

import re
import sys
from collections.abc import Callable
from dataclasses import dataclass, field

from .constants import DEFAULT_BUILD_TYPE
from .document import UnitDocument

_SHARED_LIBRARY = re.compile(r"lib([^/]+)\.so.*")


def link_name(lib: str, platform: str | None = None) -> str | None:
    """
    Name to pass to `-l` for a library path, if it has one.

    Turns /usr/lib/libfoo.so.5 into foo on Linux. Returns None when the
    library should be passed verbatim, which is always the case elsewhere.
    """
    platform = platform or sys.platform
    if platform.startswith("linux"):
        match = _SHARED_LIBRARY.search(lib)
        return match.group(1) if match else None
    return None


def _strings(document: UnitDocument, prop: str) -> list[str]:
    return [elem for elem in document.get(prop, []) if isinstance(elem, str)]


def _dependencies(document: UnitDocument) -> list[UnitDocument]:
    return [
        elem
        for elem in document.get("INTERFACE_LINK_LIBRARIES", [])
        if isinstance(elem, UnitDocument)
    ]


def collect_from_targets(document: UnitDocument, prop: str) -> list[str]:
    """
    Values of `prop` on a target followed by those of its dependencies.

    Mirrors how CMake propagates INTERFACE_* properties to consumers: the
    target's own values come first, then each linked target's values,
    depth-first.
    """
    values = _strings(document, prop)
    for dependency in _dependencies(document):
        values.extend(collect_from_targets(dependency, prop))
    return values


def collect_from_targets_unique(document: UnitDocument, prop: str) -> list[str]:
    """Like collect_from_targets(), but sorted and deduplicated."""
    return sorted(set(collect_from_targets(document, prop)))


def location_for_build_type(
    document: UnitDocument, build_type: str, windows: bool = False
) -> str | None:
    """Library file for `build_type`, falling back to the generic one."""
    prop = "IMPORTED_IMPLIB" if windows else "LOCATION"
    return document.get(f"{prop}_{build_type}") or document.get(prop)


def _link_libraries(document: UnitDocument, location: Callable[[UnitDocument], str | None]) -> list[str]:
    libraries = []
    own = location(document)
    if own:
        libraries.append(own)
    for elem in document.get("INTERFACE_LINK_LIBRARIES", []):
        if isinstance(elem, UnitDocument):
            libraries.extend(_link_libraries(elem, location))
        else:
            libraries.append(elem)
    return libraries


@dataclass
class CMakeTarget:
    """A target of a CMake package with its transitive usage requirements."""

    name: str
    location: str | None = None
    compile_definitions: list[str] = field(default_factory=list)
    compile_options: list[str] = field(default_factory=list)
    include_directories: list[str] = field(default_factory=list)
    link_directories: list[str] = field(default_factory=list)
    link_libraries: list[str] = field(default_factory=list)
    link_options: list[str] = field(default_factory=list)

    @classmethod
    def from_document(
        cls,
        document: UnitDocument,
        build_type: str = DEFAULT_BUILD_TYPE,
        windows: bool = False,
    ) -> "CMakeTarget":
        """
        Flatten a resolved target document.

        Compile definitions and directories are sorted and deduplicated;
        compile and link options keep their order, since it can matter.
        Dependencies contribute their generic location to link_libraries.
        """
        location = location_for_build_type(document, build_type, windows)
        prop = "IMPORTED_IMPLIB" if windows else "LOCATION"

        libraries = [location] if location else []
        for elem in document.get("INTERFACE_LINK_LIBRARIES", []):
            if isinstance(elem, UnitDocument):
                libraries.extend(_link_libraries(elem, lambda d: d.get(prop)))
            else:
                libraries.append(elem)

        return cls(
            name=document.get("NAME", ""),
            location=location,
            compile_definitions=collect_from_targets_unique(document, "INTERFACE_COMPILE_DEFINITIONS"),
            compile_options=collect_from_targets(document, "INTERFACE_COMPILE_OPTIONS"),
            include_directories=collect_from_targets_unique(document, "INTERFACE_INCLUDE_DIRECTORIES"),
            link_directories=collect_from_targets_unique(document, "INTERFACE_LINK_DIRECTORIES"),
            # TODO: sorting can break static link order; keep CMake's order once static libraries are supported
            link_libraries=sorted(set(libraries)),
            link_options=collect_from_targets(document, "INTERFACE_LINK_OPTIONS"),
        )

    def link_flags(self, platform: str | None = None) -> list[str]:
        """
        Linker arguments for linking against this target.

        Link directories become -L flags, link options are passed as they
        are, and libraries become -l flags where a short name can be derived.
        """
        flags = [f"-L{directory}" for directory in self.link_directories]
        flags.extend(self.link_options)
        for lib in self.link_libraries:
            name = link_name(lib, platform)
            flags.append(f"-l{name}" if name is not None else lib)
        return flags
