"""Configuration loading utilities for the changelog converter."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

DEFAULT_AUTHOR = "thant htoo aung"


@dataclass
class ChangelogSettings:
    """Values baked into every generated changeset."""

    author: str = DEFAULT_AUTHOR
    table_name: str = "m_code_value"
    code_table: str = "m_code"
    code_name_column: str = "code_name"
    changeset_prefix: str = "001_insert_"
    changeset_suffix: str = "_data"

    def changeset_id(self, code_name: str) -> str:
        return f"{self.changeset_prefix}{code_name.lower()}{self.changeset_suffix}"


@dataclass
class OutputConfig:
    """Paths describing where the changelog and audit log are written."""

    directory: Path = Path("output")
    changelog_file: str = "liquibase-changeset.xml"
    audit_log: str = "conversion_audit.json"

    def resolved(self, base_path: Path) -> "OutputConfig":
        return OutputConfig(
            directory=_resolve_path(self.directory, base_path),
            changelog_file=self.changelog_file,
            audit_log=self.audit_log,
        )


@dataclass
class AppConfig:
    """Container for all configuration required by the CLI and UI."""

    changelog: ChangelogSettings = field(default_factory=ChangelogSettings)
    output: OutputConfig = field(default_factory=OutputConfig)
    sheets: List[str] = field(default_factory=list)

    def resolved(self, base_path: Path) -> "AppConfig":
        return AppConfig(
            changelog=self.changelog,
            output=self.output.resolved(base_path),
            sheets=list(self.sheets),
        )


def load_config(path: Path) -> AppConfig:
    """Load :class:`AppConfig` from a YAML file.

    Every section is optional; missing values fall back to the dataclass
    defaults. Relative output paths are resolved against the directory that
    contains the configuration file.
    """

    config_path = Path(path).expanduser()
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file '{config_path}' does not exist")

    with config_path.open("r", encoding="utf-8") as stream:
        raw_config: Mapping[str, Any] = yaml.safe_load(stream) or {}

    if not isinstance(raw_config, Mapping):
        raise ValueError("Configuration root must be a mapping")

    unknown = set(raw_config) - {"changelog", "output", "sheets"}
    if unknown:
        raise ValueError(f"Unknown configuration sections: {', '.join(sorted(unknown))}")

    changelog = ChangelogSettings(**_parse_changelog_section(raw_config.get("changelog") or {}))
    output = OutputConfig(**_parse_output_section(raw_config.get("output") or {}))
    sheets = _parse_sheets(raw_config.get("sheets"))

    config = AppConfig(changelog=changelog, output=output, sheets=sheets)
    return config.resolved(config_path.parent)


def _parse_changelog_section(section: Mapping[str, Any]) -> Dict[str, str]:
    if not isinstance(section, Mapping):
        raise ValueError("The 'changelog' section must be a mapping")

    allowed = {field_info.name for field_info in fields(ChangelogSettings)}
    parsed: Dict[str, str] = {}
    for key, value in section.items():
        if key not in allowed:
            raise ValueError(f"Unknown changelog setting '{key}'")
        text = _normalise_text(value)
        if text is not None:
            parsed[key] = text
    return parsed


def _parse_output_section(section: Mapping[str, Any]) -> Dict[str, Any]:
    if not isinstance(section, Mapping):
        raise ValueError("The 'output' section must be a mapping")

    parsed: Dict[str, Any] = {}
    if "directory" in section:
        parsed["directory"] = Path(section["directory"])
    for key in ("changelog_file", "audit_log"):
        if key in section:
            parsed[key] = str(section[key])
    return parsed


def _parse_sheets(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str) or not isinstance(value, list):
        raise ValueError("'sheets' must be a list of sheet names")
    return [str(item) for item in value]


def _normalise_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    stripped = str(value).strip()
    return stripped or None


def _resolve_path(path: Path, base_path: Path) -> Path:
    expanded = Path(path).expanduser()
    if expanded.is_absolute():
        return expanded
    return (base_path / expanded).resolve()


__all__ = [
    "DEFAULT_AUTHOR",
    "AppConfig",
    "ChangelogSettings",
    "OutputConfig",
    "load_config",
]
