"""
Pipeline configuration.

Defaults reproduce the fixed layout of the build (input under data/raw/en,
output under data/build/en). A YAML file can override any field, e.g.:

    input_path: corpus/1_1_all_fullalpha.csv
    output_path: out/wordFreqList.json
    max_workers: 16
    lookup_timeout: 600
    strict_numbers: false

Relative paths in the file resolve against the file's own directory.
CLI flags, passed as overrides, win over the file.
"""

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from freqlex.errors import ConfigError
from freqlex.export_json import SUPPORTED_INDENTS
from freqlex.pos_tags import default_schema_path


def get_project_root() -> Path:
    """Project root (from src/freqlex/ go up two levels)."""
    return Path(__file__).parent.parent.parent


def get_data_dir() -> Path:
    return get_project_root() / "data"


@dataclass(frozen=True)
class PipelineConfig:
    input_path: Path = get_data_dir() / "raw" / "en" / "1_1_all_fullalpha.csv"
    output_path: Path = get_data_dir() / "build" / "en" / "wordFreqList.json"
    pos_tables_path: Path = default_schema_path()
    encoding: str = "utf-8"
    max_workers: int = 8
    lookup_timeout: float = 300.0
    strict_numbers: bool = False
    indent: int = 2
    show_progress: bool = True
    download_wordnet: bool = True


_PATH_FIELDS = {"input_path", "output_path", "pos_tables_path"}
_FIELD_TYPES = {
    "encoding": str,
    "max_workers": int,
    "lookup_timeout": (int, float),
    "strict_numbers": bool,
    "indent": int,
    "show_progress": bool,
    "download_wordnet": bool,
}


def _coerce(key: str, value: Any, base_dir: Optional[Path]) -> Any:
    if key in _PATH_FIELDS:
        if not isinstance(value, (str, Path)):
            raise ConfigError(f"{key} must be a path, got {value!r}")
        path = Path(value).expanduser()
        if base_dir is not None and not path.is_absolute():
            path = base_dir / path
        return path

    expected = _FIELD_TYPES[key]
    # bool is an int subclass; reject it where a number is expected
    if isinstance(value, bool) and expected is not bool:
        raise ConfigError(f"{key} must be a number, got {value!r}")
    if not isinstance(value, expected):
        raise ConfigError(f"{key} has the wrong type: {value!r}")
    if key == "lookup_timeout":
        return float(value)
    return value


def validate_config(config: PipelineConfig) -> PipelineConfig:
    if config.max_workers < 1:
        raise ConfigError(f"max_workers must be at least 1, got {config.max_workers}")
    if config.lookup_timeout <= 0:
        raise ConfigError(f"lookup_timeout must be positive, got {config.lookup_timeout}")
    if config.indent not in SUPPORTED_INDENTS:
        raise ConfigError(f"indent must be one of {SUPPORTED_INDENTS}, got {config.indent}")
    return config


def load_config_file(config_path: Path) -> Dict[str, Any]:
    """Read a YAML config mapping (empty file = no overrides)."""
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Could not read config {config_path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config {config_path} must be a mapping")
    return data


def load_config(config_path: Optional[Path] = None, **overrides: Any) -> PipelineConfig:
    """
    Build the pipeline configuration.

    Args:
        config_path: Optional YAML file with field overrides
        **overrides: Field values that win over the file; None means "not set"

    Raises:
        ConfigError: On unknown keys, wrong types, or out-of-range values
    """
    known = {f.name for f in fields(PipelineConfig)}
    values: Dict[str, Any] = {}

    if config_path is not None:
        config_path = Path(config_path)
        for key, value in load_config_file(config_path).items():
            if key not in known:
                raise ConfigError(f"Unknown config key {key!r} in {config_path}")
            values[key] = _coerce(key, value, config_path.parent)

    for key, value in overrides.items():
        if key not in known:
            raise ConfigError(f"Unknown config override {key!r}")
        if value is not None:
            values[key] = _coerce(key, value, None)

    return validate_config(replace(PipelineConfig(), **values))
