"""Shared constants for package discovery and target resolution."""

import re

# IMPORTED_TARGETS directory property needs 3.21, string(JSON) needs 3.19
CMAKE_MIN_VERSION = "3.21"

# Build configurations with per-configuration property variants
CONFIG_TYPES = ("Release", "RelWithDebInfo", "MinSizeRel", "Debug")
DEFAULT_BUILD_TYPE = "Debug"

# Properties holding exactly one value
SCALAR_PROPERTIES = (
    "NAME",
    "LOCATION",
    "IMPORTED_IMPLIB",
)

# Properties whose values may reference other targets
LIST_PROPERTIES = (
    "INTERFACE_COMPILE_DEFINITIONS",
    "INTERFACE_COMPILE_OPTIONS",
    "INTERFACE_INCLUDE_DIRECTORIES",
    "INTERFACE_LINK_DIRECTORIES",
    "INTERFACE_LINK_LIBRARIES",
    "INTERFACE_LINK_OPTIONS",
)

# Properties that also exist as <PROP>_<CONFIG>
PER_CONFIG_PROPERTIES = (
    "LOCATION",
    "IMPORTED_IMPLIB",
)

CONFIG_PROPERTIES = tuple(
    f"{prop}_{config}"
    for prop in PER_CONFIG_PROPERTIES
    for config in CONFIG_TYPES
)

# Query order, which is also the key order of every target document
PROPERTY_SET = SCALAR_PROPERTIES + LIST_PROPERTIES + CONFIG_PROPERTIES

SINGLE_VALUED_PROPERTIES = frozenset(SCALAR_PROPERTIES + CONFIG_PROPERTIES)

# Generator expressions are evaluated at generate time, not at configure time
GENERATOR_EXPRESSION = re.compile(r"^\$<")

NOTFOUND_SUFFIX = "-NOTFOUND"

# Name of the bundled discovery script inside the package
FIND_PACKAGE_SCRIPT = "data/find_package.cmake"
