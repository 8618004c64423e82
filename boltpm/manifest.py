from collections.abc import Mapping
from pathlib import Path
from typing import Any, Dict, Optional, Union
import logging

import tomlkit
from tomlkit.exceptions import TOMLKitError
from tomlkit.toml_document import TOMLDocument

from boltpm.config import BoltConfig
from boltpm.outcomes import (
    InitOutcome,
    IOFailure,
    ParseFailure,
    Success,
)
from boltpm.storage import create_text_exclusive, write_text_atomic

# Set up logging
logger = logging.getLogger(__name__)

ENTRYPOINT_TEMPLATE = (
    "// Main entrypoint: {entrypoint}\n"
    "\n"
    "int main() {{\n"
    "    \n"
    "    return 0;\n"
    "}}\n"
)


def _plain(value: Any) -> Any:
    """Strip tomlkit item wrappers from a value."""
    return value.unwrap() if hasattr(value, "unwrap") else value


class Manifest:
    """In-memory bolt.toml.

    Wraps the parsed tomlkit document, so keys this tool does not know about,
    comments and formatting are written back unchanged.
    """

    def __init__(self, document: Optional[TOMLDocument] = None):
        self.document = document if document is not None else tomlkit.document()

    @classmethod
    def parse(cls, text: str) -> "Manifest":
        """Parse manifest text.

        Raises:
            tomlkit.exceptions.TOMLKitError: If the text is not valid TOML
        """
        return cls(tomlkit.parse(text))

    @classmethod
    def new(cls, name: str, version: str, entrypoint: str) -> "Manifest":
        """Build the manifest written for a fresh project."""
        package = tomlkit.table()
        package.add("name", name)
        package.add("version", version)
        package.add("entrypoint", entrypoint)

        document = tomlkit.document()
        document.add("package", package)
        document.add("dependencies", tomlkit.table())
        return cls(document)

    def dumps(self) -> str:
        return tomlkit.dumps(self.document)

    def to_dict(self) -> Dict[str, Any]:
        return self.document.unwrap()

    def _package_field(self, key: str, default: str) -> str:
        package = self.document.get("package")
        if isinstance(package, Mapping):
            value = package.get(key)
            if isinstance(value, str):
                return str(value)
        return default

    def package_name(self, default: str) -> str:
        return self._package_field("name", default)

    def version(self, default: str = "") -> str:
        return self._package_field("version", default)

    def entrypoint(self, default: str) -> str:
        return self._package_field("entrypoint", default)

    @property
    def dependencies(self) -> Dict[str, Any]:
        """Dependency names mapped to versions, in file order.

        A missing or non-table ``dependencies`` key reads as no dependencies.
        """
        deps = self.document.get("dependencies")
        if not isinstance(deps, Mapping):
            return {}
        return {str(name): _plain(version) for name, version in deps.items()}

    def add_dependency(self, name: str, version: str) -> "Manifest":
        """Insert or overwrite one dependency in place.

        Args:
            name: Dependency name
            version: Version string; replaces any existing version

        Returns:
            This manifest
        """
        deps = self.document.get("dependencies")
        if not isinstance(deps, Mapping):
            if "dependencies" in self.document:
                logger.warning(
                    f"'dependencies' is a {type(_plain(deps)).__name__}, not a table; replacing it"
                )
                del self.document["dependencies"]
            self.document.add("dependencies", tomlkit.table())
            deps = self.document["dependencies"]

        if name in deps:
            logger.debug(f"Overwriting {name} = {deps[name]!r} with {version!r}")
        deps[name] = version
        return self

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Manifest):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return f"Manifest({self.to_dict()!r})"


class ManifestStore:
    def __init__(self, config: BoltConfig, root: Union[str, Path, None] = None):
        """Initialize the manifest store.

        Args:
            config: Settings naming the manifest file and the defaults
            root: Project directory. If None, uses the working directory.
        """
        self.config = config
        self.root = Path(root) if root is not None else Path(".")

    @property
    def path(self) -> Path:
        return self.root / self.config.manifest_file

    @property
    def entrypoint_path(self) -> Path:
        return self.root / self.config.default_entrypoint

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> Union[Manifest, ParseFailure, IOFailure]:
        """Read and parse the manifest file.

        Returns:
            The manifest, a ParseFailure carrying the parser's location and
            message, or an IOFailure if the file cannot be read. Nothing on
            disk is touched either way.
        """
        logger.debug(f"Loading manifest from {self.path}")
        try:
            with open(self.path, "r", encoding="utf-8", newline="") as f:
                text = f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to read {self.path}: {e}")
            return IOFailure(self.path, str(e), operation="read")

        try:
            manifest = Manifest.parse(text)
        except TOMLKitError as e:
            logger.debug(f"Manifest {self.path} is not valid TOML: {e}")
            return ParseFailure(
                manifest_path=self.path,
                message=str(e),
                line=getattr(e, "line", None),
                column=getattr(e, "col", None),
            )

        logger.debug(f"Loaded manifest: {manifest.to_dict()}")
        return manifest

    def save(self, manifest: Manifest) -> Union[Success, IOFailure]:
        """Write the whole manifest back to disk, replacing the file atomically."""
        logger.info(f"Saving manifest to {self.path}")
        try:
            write_text_atomic(self.path, manifest.dumps())
        except OSError as e:
            return IOFailure(self.path, e.strerror or str(e))
        return Success()

    def add_dependency(
        self, manifest: Manifest, name: str, version: Optional[str] = None
    ) -> Manifest:
        """Add or replace a dependency, using the configured default version."""
        version = version or self.config.default_dependency_version
        logger.info(f"Adding dependency {name} = {version!r}")
        return manifest.add_dependency(name, version)

    def initialize(self) -> Union[InitOutcome, IOFailure]:
        """Create the manifest and the entrypoint file for a new project.

        An existing manifest is left untouched. The entrypoint file is only
        created when it does not exist yet.
        """
        if self.exists():
            logger.info(f"{self.path} already exists")
            return InitOutcome(manifest_path=self.path, already_exists=True)

        manifest = Manifest.new(
            name=self.config.init_name,
            version=self.config.initial_version,
            entrypoint=self.config.default_entrypoint,
        )
        result = self.save(manifest)
        if isinstance(result, IOFailure):
            return result

        entrypoint_path = self.entrypoint_path
        stub = ENTRYPOINT_TEMPLATE.format(entrypoint=self.config.default_entrypoint)
        try:
            created = create_text_exclusive(entrypoint_path, stub)
        except OSError as e:
            return IOFailure(entrypoint_path, e.strerror or str(e))

        return InitOutcome(
            manifest_path=self.path,
            entrypoint_path=entrypoint_path,
            created_entrypoint=created,
        )
