"""Translate a manifest into a compiler invocation."""

import logging
import shlex
from typing import List, NamedTuple

from boltpm.config import BoltConfig
from boltpm.manifest import Manifest

logger = logging.getLogger(__name__)


class Invocation(NamedTuple):
    executable: str
    arguments: List[str]

    @property
    def argv(self) -> List[str]:
        return [self.executable, *self.arguments]

    def display(self) -> str:
        """Render the command for humans; never used to run it."""
        return shlex.join(self.argv)


def dependency_flags(manifest: Manifest) -> List[str]:
    """One ``-l<name>`` flag per dependency, in the order the manifest lists them."""
    return [f"-l{name}" for name in manifest.dependencies]


def build_invocation(manifest: Manifest, config: BoltConfig) -> Invocation:
    """Build the compiler command line for a manifest.

    Missing or non-string ``package.entrypoint`` and ``package.name`` fall back
    to the configured defaults. The manifest itself is not modified.

    Args:
        manifest: Loaded manifest
        config: Settings naming the compiler and the defaults

    Returns:
        Executable name and its ordered arguments:
        ``[entrypoint, "-o", output_name, *dependency_flags]``
    """
    entrypoint = manifest.entrypoint(config.default_entrypoint)
    output_name = manifest.package_name(config.default_output_name)
    arguments = [entrypoint, "-o", output_name, *dependency_flags(manifest)]
    logger.debug(f"Compiler arguments: {arguments}")
    return Invocation(config.compiler, arguments)
