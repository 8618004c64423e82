"""Result types returned by bolt-pm operations.

Operations hand back one of these values instead of raising, so each caller
decides how a failure is reported. Every failure carries ``exit_code`` and a
``describe()`` message for the user.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union


@dataclass(frozen=True)
class Success:
    """The operation completed."""

    exit_code = 0


@dataclass(frozen=True)
class InitOutcome:
    """Result of project initialization."""

    manifest_path: Path
    entrypoint_path: Optional[Path] = None
    already_exists: bool = False
    created_entrypoint: bool = False

    exit_code = 0

    @property
    def created_manifest(self) -> bool:
        return not self.already_exists


class Failure(ABC):
    exit_code = 1

    @abstractmethod
    def describe(self) -> str:
        """Message shown to the user."""


@dataclass(frozen=True)
class UsageError(Failure):
    message: str

    def describe(self) -> str:
        return self.message


@dataclass(frozen=True)
class PreconditionError(Failure):
    """An operation needs a manifest that does not exist."""

    manifest_path: Path
    hint: str = ""

    def describe(self) -> str:
        message = f"No {self.manifest_path.name} found."
        return f"{message} {self.hint}" if self.hint else message


@dataclass(frozen=True)
class ParseFailure(Failure):
    """The manifest text is not well-formed TOML."""

    manifest_path: Path
    message: str
    line: Optional[int] = None
    column: Optional[int] = None

    @property
    def location(self) -> str:
        if self.line is None:
            return str(self.manifest_path)
        return f"{self.manifest_path}:{self.line}:{self.column or 0}"

    def describe(self) -> str:
        return f"Error parsing {self.manifest_path.name}:\n{self.location}: {self.message}"


@dataclass(frozen=True)
class IOFailure(Failure):
    path: Path
    reason: str
    operation: str = "write"

    def describe(self) -> str:
        return f"Could not {self.operation} {self.path}: {self.reason}"


@dataclass(frozen=True)
class LaunchFailure(Failure):
    """The compiler could not be started at all."""

    executable: str
    reason: str

    def describe(self) -> str:
        return (
            f"Could not start '{self.executable}': {self.reason}\n"
            f"Make sure '{self.executable}' is installed and in your PATH."
        )


@dataclass(frozen=True)
class CompilerFailure(Failure):
    """The compiler ran and exited with a nonzero status."""

    executable: str
    code: int

    def describe(self) -> str:
        return f"Build Failed. '{self.executable}' exited with status {self.code}."


ExitOutcome = Union[Success, LaunchFailure, CompilerFailure]
Outcome = Union[
    Success,
    InitOutcome,
    UsageError,
    PreconditionError,
    ParseFailure,
    IOFailure,
    LaunchFailure,
    CompilerFailure,
]
