"""Configuration management module."""

import yaml
from pathlib import Path
from typing import Any, Dict, List, Optional
from dataclasses import dataclass, field


DEFAULT_EQUATION_ENVIRONMENTS = [
    "equation", "equation*",
    "align", "align*",
    "multline", "multline*",
    "gather", "gather*",
    "eqnarray", "eqnarray*",
    "flalign", "flalign*",
    "alignat", "alignat*",
    "math", "displaymath",
]


@dataclass
class LabelConfig:
    """Label indexing configuration."""
    context_lines_before: int = 1
    context_lines_after: int = 2


@dataclass
class ReferenceConfig:
    """Reference type inference configuration."""
    default_type: str = "ref"
    equation_environments: List[str] = field(
        default_factory=lambda: list(DEFAULT_EQUATION_ENVIRONMENTS)
    )


@dataclass
class CheckConfig:
    """Document check configuration."""
    file_patterns: List[str] = field(default_factory=lambda: ["*.org"])
    recursive: bool = True
    report_path: Optional[str] = None


class Config:
    """Main configuration class."""

    def __init__(self, config_path: Optional[str] = "configs/config.yaml"):
        self.config_path = Path(config_path) if config_path else None
        self._raw_config: Dict[str, Any] = {}
        self._load_config()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Build a configuration from an in-memory mapping."""
        config = cls(config_path=None)
        config._raw_config = dict(data)
        return config

    def _load_config(self) -> None:
        """Load configuration from YAML file."""
        if self.config_path is None:
            self._raw_config = {}
        elif self.config_path.exists():
            with open(self.config_path, 'r', encoding='utf-8') as f:
                self._raw_config = yaml.safe_load(f) or {}
        else:
            print(f"Warning: Config file {self.config_path} not found, using defaults")
            self._raw_config = {}

    def reload(self) -> None:
        """Reload configuration from file."""
        self._load_config()

    @property
    def labels(self) -> LabelConfig:
        """Get label indexing configuration."""
        cfg = self._raw_config.get("labels", {})
        return LabelConfig(
            context_lines_before=cfg.get("context_lines_before", 1),
            context_lines_after=cfg.get("context_lines_after", 2)
        )

    @property
    def references(self) -> ReferenceConfig:
        """Get reference inference configuration."""
        cfg = self._raw_config.get("references", {})
        return ReferenceConfig(
            default_type=cfg.get("default_type", "ref"),
            equation_environments=cfg.get(
                "equation_environments", list(DEFAULT_EQUATION_ENVIRONMENTS)
            )
        )

    @property
    def check(self) -> CheckConfig:
        """Get document check configuration."""
        cfg = self._raw_config.get("check", {})
        return CheckConfig(
            file_patterns=cfg.get("file_patterns", ["*.org"]),
            recursive=cfg.get("recursive", True),
            report_path=cfg.get("report_path")
        )

    @property
    def paths(self) -> Dict[str, Optional[str]]:
        """Get path configuration."""
        defaults = {
            "log_dir": None
        }
        return {**defaults, **self._raw_config.get("paths", {})}

    @property
    def logging(self) -> Dict[str, Any]:
        """Get logging configuration."""
        defaults = {
            "level": "INFO"
        }
        return {**defaults, **self._raw_config.get("logging", {})}

    def get(self, key: str, default: Any = None) -> Any:
        """Get raw configuration value."""
        return self._raw_config.get(key, default)

    def __getitem__(self, key: str) -> Any:
        """Dictionary-style access to configuration."""
        return self._raw_config[key]
