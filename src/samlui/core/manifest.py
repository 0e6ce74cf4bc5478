import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from .errors import ManifestError
from .items import DEFAULT_OPTION_SEPARATOR, PATH_SEPARATOR

MANIFEST_NAME = "samlui.toml"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class UIConfig:
    """Which documents make up the application UI."""

    items: str | None = None  # Path of the Items document, relative to the project root
    screens: dict[str, str] = field(default_factory=dict)  # screen name -> document path
    enum_separator: str = DEFAULT_OPTION_SEPARATOR


@dataclass
class LoggingConfig:
    level: str = "WARNING"

    @property
    def level_number(self) -> int:
        return logging.getLevelName(self.level)


@dataclass
class ProjectManifest:
    name: str
    version: str
    project_root: Path
    ui: UIConfig = field(default_factory=UIConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @property
    def items_path(self) -> Path | None:
        if self.ui.items is None:
            return None
        return self.project_root / self.ui.items

    def screen_paths(self) -> dict[str, Path]:
        return {name: self.project_root / rel for name, rel in self.ui.screens.items()}


def load_manifest(path: Path) -> ProjectManifest:
    data = tomllib.loads(path.read_text(encoding="utf-8"))

    project = data.get("project", {})
    ui_data = data.get("ui", {})
    logging_data = data.get("logging", {})

    name = project.get("name")
    if not name:
        raise ManifestError(f"{path}: [project].name is required")

    screens = ui_data.get("screens", {})
    if not isinstance(screens, dict):
        raise ManifestError(f"{path}: [ui].screens must be a table of name = path")

    level = str(logging_data.get("level", "WARNING")).upper()
    if level not in _LOG_LEVELS:
        raise ManifestError(f"{path}: [logging].level must be one of {', '.join(_LOG_LEVELS)}")

    enum_separator = ui_data.get("enum_separator", DEFAULT_OPTION_SEPARATOR)
    if (
        not isinstance(enum_separator, str)
        or not enum_separator
        or PATH_SEPARATOR in enum_separator
        or any(c.isspace() for c in enum_separator)
    ):
        raise ManifestError(
            f"{path}: [ui].enum_separator must be a non-empty string "
            f'without whitespace or "{PATH_SEPARATOR}"'
        )

    ui_config = UIConfig(
        items=ui_data.get("items"),
        screens={str(k): str(v) for k, v in screens.items()},
        enum_separator=enum_separator,
    )

    return ProjectManifest(
        name=name,
        version=project.get("version", "0.1.0"),
        project_root=path.parent,
        ui=ui_config,
        logging=LoggingConfig(level=level),
    )
