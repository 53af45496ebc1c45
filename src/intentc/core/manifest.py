import tomllib
from dataclasses import dataclass, field
from pathlib import Path

MANIFEST_NAME = "intent.toml"
DEFAULT_ENTRY = "app.intent"


@dataclass
class ValidationConfig:
    """Validation settings."""

    warnings_as_errors: bool = False


@dataclass
class ProjectManifest:
    """
    Project manifest loaded from intent.toml.

    Only the command line reads it: it picks the default source file and
    whether warnings fail ``intentc check``.
    """

    name: str
    entry: str = DEFAULT_ENTRY
    validation: ValidationConfig = field(default_factory=ValidationConfig)
    root: Path = field(default_factory=Path)

    @property
    def entry_path(self) -> Path:
        """Entry file resolved against the manifest's directory."""
        return self.root / self.entry


def load_manifest(path: Path) -> ProjectManifest:
    data = tomllib.loads(path.read_text(encoding="utf-8"))

    project = data.get("project", {})
    validation_data = data.get("validation", {})

    validation = ValidationConfig(
        warnings_as_errors=bool(validation_data.get("warnings_as_errors", False)),
    )

    return ProjectManifest(
        name=project.get("name", path.parent.name),
        entry=project.get("entry", DEFAULT_ENTRY),
        validation=validation,
        root=path.parent,
    )


def find_manifest(start: Path) -> Path | None:
    """Walk up from ``start`` to the first directory holding intent.toml."""
    current = start.resolve()
    if current.is_file():
        current = current.parent

    for directory in (current, *current.parents):
        candidate = directory / MANIFEST_NAME
        if candidate.is_file():
            return candidate
    return None
