"""Command-line interface for CMake package discovery."""

import sys

import click
from rich.console import Console
from rich.table import Table

from .api import find_package
from .cmake import CMakePackageFinder, find_cmake
from .errors import CMakeExecutionError, CMakePackageError
from .package import PackageResolver
from .query import QueryConfig, run_query
from .registry import split_cmake_list

console = Console()


def _components(values: tuple[str, ...]) -> tuple[str, ...]:
    """Flatten repeated and ;-separated --component values."""
    components = []
    for value in values:
        components.extend(split_cmake_list(value))
    return tuple(components)


def _fail(error: CMakePackageError, verbose: bool = False) -> None:
    console.print(f"[red]Error: {error}[/red]")
    if verbose and isinstance(error, CMakeExecutionError) and error.output:
        console.print(error.output, markup=False, highlight=False)
    sys.exit(1)


@click.group()
@click.version_option()
def main():
    """Find CMake packages and describe their targets as JSON."""
    pass


@main.command()
@click.option("--package", default=None, help="Package to find (required)")
@click.option("--output-file", type=click.Path(dir_okay=False), default=None,
              help="Where to write the JSON document (required, overwritten)")
@click.option("--version", "version", default=None, help="Minimum version, applied when resolving a target")
@click.option("--component", "components", multiple=True,
              help="Component to request. Can be given multiple times or as a ;-separated list.")
@click.option("--target", default=None, help="Target to resolve; without it only the package is looked up")
@click.option("--cmake", "cmake_path", default=None, help="CMake executable to use")
@click.option("--detect-cycles", is_flag=True, help="Fail on cyclic target dependencies instead of recursing")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
def query(package, output_file, version, components, target, cmake_path, detect_cycles, verbose):
    """Look up a package, or one of its targets, and write a JSON document.

    Without --target, writes {} if the package is missing, otherwise its
    name, version and requested components. The version constraint is not
    applied in this mode, so an outdated package still reports its version.

    With --target, the package is looked up again with the version constraint
    and the target is written with all targets it depends on nested inside.

    Example:
        cmake-package query --package OpenSSL --output-file openssl.json
        cmake-package query --package Qt6 --component Core --target Qt6::Core --output-file core.json
    """
    config = QueryConfig(
        package=package,
        output_file=output_file,
        version=version,
        components=_components(components),
        target=target,
    )

    try:
        config.validate()
        finder = CMakePackageFinder(find_cmake(cmake_path), verbose=verbose)
        try:
            resolver = PackageResolver(finder, detect_cycles=detect_cycles, verbose=verbose)
            document = run_query(config, resolver)
        finally:
            finder.close()
    except CMakePackageError as e:
        _fail(e, verbose)

    if verbose:
        if document:
            console.print(f"[green]Wrote {config.output_file}[/green]")
        else:
            console.print(f"[yellow]{package} not found, wrote {config.output_file}[/yellow]")


@main.command("find-cmake")
@click.option("--cmake", "cmake_path", default=None, help="CMake executable to check")
def find_cmake_command(cmake_path):
    """Show which CMake would be used and its version."""
    try:
        cmake = find_cmake(cmake_path)
    except CMakePackageError as e:
        _fail(e)

    console.print(f"{cmake.path} [bold]{cmake.version}[/bold]")


@main.command()
@click.argument("package")
@click.argument("target")
@click.option("--version", "version", default=None, help="Minimum version")
@click.option("--component", "components", multiple=True, help="Component to request")
@click.option("--cmake", "cmake_path", default=None, help="CMake executable to use")
@click.option("--format", "fmt", type=click.Choice(["flags", "table"]), default="flags")
@click.option("--detect-cycles", is_flag=True, help="Fail on cyclic target dependencies instead of recursing")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
def link(package, target, version, components, cmake_path, fmt, detect_cycles, verbose):
    """Print what linking against TARGET of PACKAGE requires.

    Example:
        cmake-package link OpenSSL OpenSSL::SSL
        cmake-package link Qt6 Qt6::Gui --component Gui --format table
    """
    try:
        found = find_package(
            package,
            version=version,
            components=_components(components),
            cmake=cmake_path,
            verbose=verbose,
            detect_cycles=detect_cycles,
        )
        try:
            cmake_target = found.target(target)
        finally:
            found.close()
    except CMakePackageError as e:
        _fail(e, verbose)

    if cmake_target is None:
        console.print(f"[red]Error: Target {target} not found in package {package}[/red]")
        sys.exit(1)

    if fmt == "flags":
        click.echo(" ".join(cmake_target.link_flags()))
        return

    table = Table(title=f"{cmake_target.name} ({found.name} {found.version or 'unknown version'})")
    table.add_column("Property", style="cyan")
    table.add_column("Values")
    table.add_row("Location", cmake_target.location or "")
    table.add_row("Compile definitions", "\n".join(cmake_target.compile_definitions))
    table.add_row("Compile options", "\n".join(cmake_target.compile_options))
    table.add_row("Include directories", "\n".join(cmake_target.include_directories))
    table.add_row("Link directories", "\n".join(cmake_target.link_directories))
    table.add_row("Link libraries", "\n".join(cmake_target.link_libraries))
    table.add_row("Link options", "\n".join(cmake_target.link_options))
    console.print(table)


if __name__ == "__main__":
    main()
