"""Process entry point: validate inputs, pick a mode, write the document."""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .errors import ConfigurationError
from .models import PackageQuery
from .package import PackageResolver, package_document


@dataclass
class QueryConfig:
    """Inputs of one run. A target selects package-plus-target mode."""

    package: str | None = None
    output_file: str | Path | None = None
    version: str | None = None
    components: tuple[str, ...] = ()
    target: str | None = None

    def validate(self) -> None:
        """Raise ConfigurationError if a required input is missing."""
        if not self.package:
            raise ConfigurationError("PACKAGE is not set")
        # An empty path names the current directory once it becomes a Path
        if not self.output_file or str(self.output_file).strip() in ("", "."):
            raise ConfigurationError("OUTPUT_FILE is not set")

    def to_query(self) -> PackageQuery:
        return PackageQuery(
            name=self.package or "",
            version=self.version or None,
            components=tuple(self.components),
        )


def write_document(output_file: str | Path, document: dict[str, Any]) -> None:
    """Overwrite `output_file` with `document` as JSON."""
    output_file = Path(output_file)
    try:
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_text(json.dumps(document, indent=2) + "\n", encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Cannot write OUTPUT_FILE {output_file}: {e}")


def run_query(config: QueryConfig, resolver: PackageResolver) -> dict[str, Any]:
    """
    Resolve the package (and target, if given) and write the result.

    Nothing is written unless resolution succeeds.

    Returns:
        The document written to config.output_file

    Raises:
        ConfigurationError: If a required input is missing or OUTPUT_FILE cannot be written
        DiscoveryInconsistencyError: If the package disappeared in target mode
        TargetNotFoundError: If the package does not define the target
    """
    config.validate()
    query = config.to_query()

    if config.target is None:
        document = package_document(resolver.find_package(query))
    else:
        document = resolver.find_target(query, config.target).to_dict()

    write_document(config.output_file, document)
    return document
