"""Data models for Site Fabricator."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List


class FabricatorError(Exception):
    """Base class for errors raised by the pipeline."""


class ConfigError(FabricatorError):
    """Raised when a configuration file cannot be used."""


class RenderError(FabricatorError):
    """A source file could not be rendered.

    Carries the failing source path so callers can report it.
    """

    def __init__(self, path: Path, cause: Any):
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"Failed to render {self.path}: {cause}")


class WriteError(FabricatorError):
    """A rendered page or copied file could not be written."""

    def __init__(self, path: Path, cause: Any):
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"Failed to write {self.path}: {cause}")


class ExtensionLoadError(FabricatorError):
    """An extension script could not be imported or set up."""

    def __init__(self, path: Path, cause: Any):
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"Failed to load extension {self.path}: {cause}")


class RenderKind(Enum):
    """Closed set of source formats the pipeline knows how to render."""
    MARKUP = "markup"
    MARKDOWN = "markdown"


@dataclass(frozen=True)
class FileEntry:
    """A file discovered in a source tree.

    Only the location is stored; content is read on demand.
    """
    name: str
    path: Path
    is_dir: bool = False

    @property
    def full_path(self) -> Path:
        """Path of the entry itself."""
        return self.path / self.name

    @property
    def extension(self) -> str:
        """Lower-cased extension without the leading dot."""
        return Path(self.name).suffix.lower().lstrip('.')

    def read_raw(self) -> str:
        """Read file contents on demand."""
        return self.full_path.read_text(encoding='utf-8')

    def relative_dir(self, root: Path) -> Path:
        """Containing directory relative to ``root``."""
        return Path(self.path).relative_to(root)


@dataclass
class ParsedMarkdown:
    """Result of parsing one markdown document.

    Returned fresh from every parse call, so no front matter is shared
    between documents.
    """
    body: str
    html: str
    meta: Dict[str, Any]


@dataclass
class RenderResult:
    """Rendered text together with the view-model used to produce it."""
    text: str
    view_model: Dict[str, Any]


@dataclass
class BuildFailure:
    """A file that failed during a run that was allowed to continue."""
    path: Path
    error: str


@dataclass
class BuildResult:
    """Result of a pipeline run."""
    transformed: List[Path] = field(default_factory=list)
    copied: List[Path] = field(default_factory=list)
    partials: List[str] = field(default_factory=list)
    failures: List[BuildFailure] = field(default_factory=list)

    def merge(self, other: "BuildResult") -> "BuildResult":
        """Append another run's results to this one."""
        self.transformed.extend(other.transformed)
        self.copied.extend(other.copied)
        self.partials.extend(other.partials)
        self.failures.extend(other.failures)
        return self

    @property
    def ok(self) -> bool:
        return not self.failures
