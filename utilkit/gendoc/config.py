"""Configuration loading for the doc generator (.gendoc.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .errors import ConfigError

CONFIG_FILENAME = ".gendoc.yml"

DEFAULT_LANG = "en"
STDOUT_SENTINEL = "stdout"

DEFAULT_HIDDEN = ("netutil", "numutil", "internal")

DEFAULT_NAME_MAP = {
    "arr": "array/Slice",
    "str": "string",
    "sys": "system",
    "math": "math/Number",
    "fs": "fileSystem",
    "fmt": "formatting",
    "test": "testing",
    "dump": "dump",
    "structs": "struct",
    "json": "JSON",
    "cli": "CLI",
    "env": "ENV",
    "std": "standard",
}


@dataclass
class GendocConfig:
    """Settings for one generator run, after config file and CLI are merged."""

    root: Path
    lang: str = DEFAULT_LANG
    default_lang: str = DEFAULT_LANG
    allowed_langs: List[str] = field(default_factory=lambda: [DEFAULT_LANG, "zh-CN"])
    output: str = "./metadata.log"
    template_dir: str = "./internal/template"
    base_pkg: Optional[str] = None
    source_glob: str = "*/*.go"
    fence_lang: str = "go"
    strip_suffix: str = "util"
    hidden: List[str] = field(default_factory=lambda: list(DEFAULT_HIDDEN))
    name_map: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_NAME_MAP))
    test_suffixes: List[str] = field(default_factory=lambda: ["_test.go"])
    platform_suffixes: List[str] = field(default_factory=lambda: ["_windows.go"])

    @property
    def to_stdout(self) -> bool:
        return self.output == STDOUT_SENTINEL

    def package_base(self) -> str:
        """Return the import path prefix used in package annotations."""
        if self.base_pkg:
            return self.base_pkg.rstrip("/")
        return self.root.name

    def template_path(self) -> Optional[Path]:
        """Resolve the template directory against the scan root, or None if unset."""
        if not self.template_dir:
            return None
        path = Path(self.template_dir).expanduser()
        if not path.is_absolute():
            path = self.root / path
        return path

    def with_overrides(self, **overrides: Any) -> "GendocConfig":
        """Return a copy with the non-None overrides applied."""
        values = {key: value for key, value in overrides.items() if value is not None}
        unknown = [key for key in values if not hasattr(self, key)]
        if unknown:
            raise ConfigError(f"Unknown config option(s): {', '.join(sorted(unknown))}")
        data = dict(self.__dict__)
        data.update(values)
        return GendocConfig(**data)


def load_config(root: Path, config_path: Path | None = None) -> GendocConfig:
    """Load configuration for a scan rooted at ``root``.

    ``config_path`` defaults to ``<root>/.gendoc.yml``. A missing default file yields
    defaults; a missing explicit path raises ConfigError.
    """
    root = root.expanduser().resolve()
    if config_path is not None:
        config_file = config_path.expanduser()
        if not config_file.exists():
            raise ConfigError(f"Config file not found: {config_file}")
    else:
        config_file = root / CONFIG_FILENAME
        if not config_file.exists():
            return GendocConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file.name} must contain a mapping at the root")

    config = GendocConfig(root=root)

    for key in ("lang", "default_lang", "output", "source_glob", "fence_lang", "base_pkg"):
        value = _as_str(data.get(key))
        if value is not None:
            setattr(config, key, value)

    # Empty strings are meaningful for these two: no template, no suffix stripping.
    if "template_dir" in data:
        config.template_dir = _as_str(data.get("template_dir")) or ""
    if "strip_suffix" in data:
        config.strip_suffix = _as_str(data.get("strip_suffix")) or ""

    for key in ("hidden", "allowed_langs", "test_suffixes", "platform_suffixes"):
        if key in data:
            setattr(config, key, _as_str_list(data.get(key)))

    if "name_map" in data:
        name_map = data.get("name_map")
        if not isinstance(name_map, dict):
            raise ConfigError("name_map must be a mapping of package name to title")
        config.name_map = {str(k): str(v) for k, v in name_map.items()}

    return config


def _read_config(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Cannot read {path}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []
