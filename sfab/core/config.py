"""Configuration for Site Fabricator."""

import dataclasses
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from sfab.core.models import ConfigError

DEFAULT_CONFIG_FILE = "sfab.yaml"


@dataclass
class FabricatorConfig:
    """Resolved build settings.

    Values come from defaults, then an optional YAML file, then CLI flags.
    """
    folder: Path = Path("./www")
    destination: Path = Path("./dist")
    scripts: Optional[Path] = None
    port: int = 3001
    mount: str = "/"
    verbose: bool = False
    fail_fast: bool = True
    # Extra fields merged into every view-model
    data: Dict[str, Any] = field(default_factory=dict)

    def merge(self, **overrides: Any) -> "FabricatorConfig":
        """Return a copy with every non-None override applied."""
        values = {k: v for k, v in overrides.items() if v is not None}
        try:
            return _coerce(dataclasses.replace(self, **values))
        except (TypeError, ValueError) as e:
            raise ConfigError(str(e)) from e

    def as_options(self) -> Dict[str, Any]:
        """Render options passed to every page.

        ``data`` keys are exposed at the top level; the resolved settings
        are available as ``settings``.
        """
        settings = {
            'folder': str(self.folder),
            'destination': str(self.destination),
            'scripts': str(self.scripts) if self.scripts else None,
            'port': self.port,
            'mount': self.mount,
            'verbose': self.verbose,
        }
        options = dict(self.data)
        options['settings'] = settings
        return options


def _coerce(config: FabricatorConfig) -> FabricatorConfig:
    config.folder = Path(config.folder)
    config.destination = Path(config.destination)
    if config.scripts is not None:
        config.scripts = Path(config.scripts)
    config.port = int(config.port)
    if not isinstance(config.data, dict):
        raise ConfigError(f"'data' must be a mapping, got {type(config.data).__name__}")
    return config


def load_config(path: Optional[Path] = None) -> FabricatorConfig:
    """Load configuration from a YAML file.

    Args:
        path: Config file. If None, ``sfab.yaml`` in the working directory
              is used when present.

    Returns:
        FabricatorConfig (defaults when no file is found)

    Raises:
        ConfigError: If the file is missing (when given explicitly), is
                     not valid YAML or contains unknown keys
    """
    if path is None:
        path = Path(DEFAULT_CONFIG_FILE)
        if not path.exists():
            return FabricatorConfig()
    path = Path(path)

    try:
        with open(path, 'r', encoding='utf-8') as f:
            raw = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")

    known = {f.name for f in dataclasses.fields(FabricatorConfig)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ConfigError(f"Unknown keys in {path}: {', '.join(unknown)}")

    return FabricatorConfig().merge(**raw)
