"""
Configuration — YAML settings for the minipatch command line.

Loading priority:
  1. Project dir .minipatch.yml
  2. Git root .minipatch.yml
  3. Global ~/.minipatch/config.yml

The patch engine itself takes no configuration; these settings only shape
how the CLI reads, writes and logs.
"""

import codecs
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import yaml

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".minipatch"
CONFIG_FILE = CONFIG_DIR / "config.yml"
PROJECT_CONFIG_NAME = ".minipatch.yml"

MIN_INPUT_BYTES = 1024
MAX_INPUT_BYTES = 1024 ** 3


# ── Configuration metadata and validation ──


@dataclass
class ConfigFieldSpec:
    """Configuration field specification with validation rules."""
    key: str
    field_name: str
    description: str
    value_type: str  # "str", "int", "bool"
    default: Any
    validator: Optional[Callable[[Any], tuple[bool, Any, str]]] = None  # (valid, coerced_value, error_msg)


def _validate_int_range(value: Any, min_val: int, max_val: int) -> tuple[bool, int, str]:
    """Validate integer within range."""
    if isinstance(value, bool):
        return False, 0, "Must be an integer"
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return False, 0, "Must be an integer"
    if parsed < min_val or parsed > max_val:
        return False, max(min_val, min(max_val, parsed)), f"Must be between {min_val} and {max_val}"
    return True, parsed, ""


def _validate_enum(value: Any, valid_values: set) -> tuple[bool, str, str]:
    """Validate value is in allowed set."""
    val_str = str(value).strip().lower()
    if val_str not in valid_values:
        return False, "", f"Must be one of: {', '.join(sorted(valid_values))}"
    return True, val_str, ""


def _validate_bool(value: Any) -> tuple[bool, bool, str]:
    """Validate boolean value."""
    if isinstance(value, bool):
        return True, value, ""
    if isinstance(value, str):
        val_lower = value.strip().lower()
        if val_lower in ("1", "true", "yes", "on"):
            return True, True, ""
        if val_lower in ("0", "false", "no", "off"):
            return True, False, ""
    return False, False, "Must be true/false, yes/no, on/off, or 1/0"


def _validate_encoding(value: Any) -> tuple[bool, str, str]:
    """Validate a text codec name known to Python."""
    name = str(value or "").strip()
    try:
        codecs.lookup(name)
    except LookupError:
        return False, "", f"Unknown text encoding: {name or '(empty)'}"
    return True, name, ""


def _validate_suffix(value: Any) -> tuple[bool, str, str]:
    """Backup suffixes are appended to file names, so no path separators."""
    suffix = "" if value is None else str(value).strip()
    if "/" in suffix or "\\" in suffix:
        return False, "", "Must not contain path separators"
    return True, suffix, ""


COLOR_MODES = {"auto", "always", "never"}


CONFIG_FIELDS: Dict[str, ConfigFieldSpec] = {
    "encoding": ConfigFieldSpec(
        key="encoding",
        field_name="encoding",
        description="Text encoding for patch, original and output files",
        value_type="str",
        default="utf-8",
        validator=_validate_encoding,
    ),
    "verbose": ConfigFieldSpec(
        key="verbose",
        field_name="verbose",
        description="Enable debug logging",
        value_type="bool",
        default=False,
        validator=_validate_bool,
    ),
    "log-file": ConfigFieldSpec(
        key="log-file",
        field_name="log_file",
        description="Log file path (empty disables file logging)",
        value_type="str",
        default="",
        validator=None,
    ),
    "backup-suffix": ConfigFieldSpec(
        key="backup-suffix",
        field_name="backup_suffix",
        description="Suffix for backups made by --in-place (empty disables backups)",
        value_type="str",
        default=".orig",
        validator=_validate_suffix,
    ),
    "color": ConfigFieldSpec(
        key="color",
        field_name="color",
        description="Colored console output: auto, always or never",
        value_type="str",
        default="auto",
        validator=lambda v: _validate_enum(v, COLOR_MODES),
    ),
    "max-input-bytes": ConfigFieldSpec(
        key="max-input-bytes",
        field_name="max_input_bytes",
        description="Refuse patch or original files larger than this",
        value_type="int",
        default=64 * 1024 * 1024,
        validator=lambda v: _validate_int_range(v, MIN_INPUT_BYTES, MAX_INPUT_BYTES),
    ),
}


def validate_config_value(key: str, value: Any) -> tuple[bool, Any, str]:
    """
    Validate a configuration value.

    Returns:
        (is_valid, coerced_value, error_message)
    """
    if key not in CONFIG_FIELDS:
        return False, value, f"Unknown configuration key: {key}"

    spec = CONFIG_FIELDS[key]
    if spec.validator:
        return spec.validator(value)

    if spec.value_type == "str":
        return True, "" if value is None else str(value), ""
    return True, value, ""


@dataclass
class Config:
    encoding: str = "utf-8"
    verbose: bool = False
    log_file: str = ""
    backup_suffix: str = ".orig"
    color: str = "auto"
    max_input_bytes: int = 64 * 1024 * 1024
    project_root: Optional[str] = None
    _config_source: str = ""

    @classmethod
    def load(cls, project_dir: str = ".") -> "Config":
        config = cls()
        project_path = Path(project_dir).resolve()

        git_root = cls._find_git_root(project_path)
        for candidate in [
            project_path / PROJECT_CONFIG_NAME,
            (git_root / PROJECT_CONFIG_NAME) if git_root and git_root != project_path else None,
            CONFIG_FILE,
        ]:
            if candidate and candidate.exists():
                config._load_yaml(candidate)
                config._config_source = str(candidate)
                break

        config.project_root = str(project_path)
        return config

    def _load_yaml(self, filepath: Path):
        try:
            with open(filepath, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning("Ignoring unreadable config %s: %s", filepath, e)
            return
        if not isinstance(data, dict):
            logger.warning("Ignoring config %s: top level must be a mapping", filepath)
            return

        for key, spec in CONFIG_FIELDS.items():
            if key not in data:
                continue
            is_valid, coerced_value, error_msg = validate_config_value(key, data[key])
            if not is_valid:
                logger.warning("Config %s: invalid %s (%s), using default", filepath, key, error_msg)
                continue
            setattr(self, spec.field_name, coerced_value)

        unknown = sorted(str(key) for key in data if key not in CONFIG_FIELDS)
        if unknown:
            logger.warning("Config %s: unknown key(s) %s", filepath, ", ".join(unknown))

    def save(self, filepath: Optional[str] = None):
        if filepath:
            path = Path(filepath)
        elif self._config_source:
            path = Path(self._config_source)
        elif self.project_root:
            path = Path(self.project_root) / PROJECT_CONFIG_NAME
        else:
            path = CONFIG_FILE
        path.parent.mkdir(parents=True, exist_ok=True)
        data = {key: getattr(self, spec.field_name) for key, spec in CONFIG_FIELDS.items()}
        with open(path, "w", encoding="utf-8") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False, allow_unicode=True)
        self._config_source = str(path)

    @property
    def config_source(self) -> str:
        return self._config_source

    @staticmethod
    def _find_git_root(path: Path) -> Optional[Path]:
        current = path
        while current != current.parent:
            if (current / ".git").exists():
                return current
            current = current.parent
        return None

    def get_config_value(self, key: str) -> Any:
        """Get configuration value by key."""
        if key not in CONFIG_FIELDS:
            return None
        spec = CONFIG_FIELDS[key]
        return getattr(self, spec.field_name, spec.default)

    def set_config_value(self, key: str, value: Any) -> tuple[bool, str]:
        """
        Set configuration value with validation and persist it.

        Returns:
            (success, error_message)
        """
        is_valid, coerced_value, error_msg = validate_config_value(key, value)
        if not is_valid:
            return False, error_msg

        spec = CONFIG_FIELDS[key]
        setattr(self, spec.field_name, coerced_value)
        self.save()
        return True, ""

    def summary(self) -> List[Dict[str, Any]]:
        """Current value, default and description of every field."""
        return [
            {
                "key": key,
                "current": getattr(self, spec.field_name, spec.default),
                "default": spec.default,
                "description": spec.description,
            }
            for key, spec in CONFIG_FIELDS.items()
        ]
