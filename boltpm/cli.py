import logging
import sys
from pathlib import Path
from typing import Callable, Dict, Sequence, Union

from boltpm.builder import build_invocation
from boltpm.config import BoltConfig
from boltpm.manifest import Manifest, ManifestStore
from boltpm.outcomes import (
    ExitOutcome,
    Failure,
    InitOutcome,
    IOFailure,
    Outcome,
    ParseFailure,
    PreconditionError,
    Success,
    UsageError,
)
from boltpm.runner import run

logger = logging.getLogger(__name__)

PROG = "bolt-pm"


class BoltCLI:
    def __init__(
        self, config: BoltConfig | None = None, root: Union[str, Path, None] = None
    ) -> None:
        self.config = config or BoltConfig()
        self.store = ManifestStore(self.config, root)

    def usage(self) -> str:
        return (
            f"Bolt Package Manager ({PROG})\n"
            "\n"
            f"Usage: {PROG} <command>\n"
            "\n"
            "Commands:\n"
            f"  new            Initializes a new project by creating {self.config.manifest_file}\n"
            "  install <pkg>  Adds a package to dependencies\n"
            "  build          Compiles the project\n"
            "  help           Show this help message\n"
        )

    def _load_existing(self, hint: str) -> Union[Manifest, PreconditionError, ParseFailure, IOFailure]:
        if not self.store.exists():
            return PreconditionError(self.store.path, hint)
        return self.store.load()

    def new(self) -> Union[InitOutcome, IOFailure]:
        """Initialize a new project in the current directory."""
        result = self.store.initialize()
        if isinstance(result, InitOutcome):
            manifest_file = self.config.manifest_file
            if result.already_exists:
                print(f"ℹ️ {manifest_file} already exists.")
            else:
                print(f"✨ Initialized new Bolt project in {manifest_file}")
                if result.created_entrypoint:
                    print(f"✏️ Created entrypoint file: {self.config.default_entrypoint}")
        return result

    def install(self, package: str) -> Outcome:
        """Add a package to the manifest's dependencies.

        Args:
            package: Dependency name; re-installing replaces its version
        """
        manifest = self._load_existing(f"Run '{PROG} new' first.")
        if not isinstance(manifest, Manifest):
            return manifest

        self.store.add_dependency(manifest, package)
        result = self.store.save(manifest)
        if isinstance(result, Success):
            version = manifest.dependencies[package]
            print(f"✅ Added '{package} = \"{version}\"' to {self.config.manifest_file}.")
            print(f"Run '{PROG} build' to compile.")
        return result

    def build(self) -> Union[ExitOutcome, PreconditionError, ParseFailure, IOFailure]:
        """Compile the project described by the manifest."""
        manifest = self._load_existing("Cannot build.")
        if not isinstance(manifest, Manifest):
            return manifest

        invocation = build_invocation(manifest, self.config)
        output_name = manifest.package_name(self.config.default_output_name)
        entrypoint = manifest.entrypoint(self.config.default_entrypoint)
        print(f"Building project '{output_name}' from {entrypoint}...")
        print(f"Compiler command: {invocation.display()}")
        # Flush before the compiler writes to the same streams
        sys.stdout.flush()

        result = run(invocation.executable, invocation.arguments)
        if isinstance(result, Success):
            print(f"✅ Build successful! (Output: {output_name})")
        return result

    def help(self) -> Success:
        print(self.usage())
        return Success()

    def dispatch(self, argv: Sequence[str]) -> int:
        """Run one command and return the process exit status.

        Args:
            argv: Command name followed by its operands, without the program name

        Returns:
            0 on success or an informational no-op, 1 on any failure
        """
        if not argv:
            print(self.usage())
            return 1

        verb, operands = str(argv[0]), [str(op) for op in argv[1:]]
        commands: Dict[str, Callable[[], Outcome]] = {
            "new": self.new,
            "build": self.build,
            "help": self.help,
        }
        logger.debug(f"Dispatching {verb!r} with operands {operands}")

        result: Outcome
        if verb == "install":
            if not operands or not operands[0]:
                result = UsageError("Error: 'install' requires a package name.")
            elif len(operands) > 1:
                result = UsageError(f"Error: 'install' takes one package name, got {len(operands)}.")
            else:
                result = self.install(operands[0])
        elif verb in commands:
            if operands:
                result = UsageError(f"Error: '{verb}' takes no arguments.")
            else:
                result = commands[verb]()
        else:
            result = UsageError(f"Unknown command: {verb}")

        if isinstance(result, Failure):
            print(f"❌ {result.describe()}", file=sys.stderr)
            if isinstance(result, UsageError) and verb not in commands and verb != "install":
                print(self.usage())
        return result.exit_code
