"""Application configuration and its YAML serialization.

Requires pyyaml. Raises ImportError with clear install instructions
if pyyaml is not available.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from colorcare.outline.models import OutlineConfig
from colorcare.report.backends import GEMINI_OPENAI_BASE_URL
from colorcare.report.generator import DEFAULT_FALLBACK_MODEL, DEFAULT_PRIMARY_MODEL
from colorcare.session.metrics import MetricsConfig
from colorcare.session.nudge import DEFAULT_IDLE_SECONDS


@dataclass(frozen=True)
class NudgeConfig:
    """Idle-detection settings."""

    interval_seconds: float = DEFAULT_IDLE_SECONDS

    def __post_init__(self) -> None:
        if self.interval_seconds <= 0:
            raise ValueError(
                f"interval_seconds must be > 0, got {self.interval_seconds}"
            )


@dataclass(frozen=True)
class ReportConfig:
    """Text-generation settings.

    Attributes:
        primary_model: Model tried first.
        fallback_model: Model tried when the primary is unavailable, or None.
        base_url: OpenAI-compatible endpoint root.
        api_key_env: Environment variable holding the API key.
    """

    primary_model: str = DEFAULT_PRIMARY_MODEL
    fallback_model: str | None = DEFAULT_FALLBACK_MODEL
    base_url: str = GEMINI_OPENAI_BASE_URL
    api_key_env: str = "GEMINI_API_KEY"

    def __post_init__(self) -> None:
        if not self.primary_model:
            raise ValueError("primary_model must not be empty")
        if not self.api_key_env:
            raise ValueError("api_key_env must not be empty")


@dataclass(frozen=True)
class AppConfig:
    """Top-level configuration, one section per subsystem."""

    outline: OutlineConfig = field(default_factory=OutlineConfig)
    metrics: MetricsConfig = field(default_factory=MetricsConfig)
    nudge: NudgeConfig = field(default_factory=NudgeConfig)
    report: ReportConfig = field(default_factory=ReportConfig)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AppConfig:
        """Build a config from nested mappings; missing keys take defaults.

        Raises:
            ValueError: On unknown sections or keys, or invalid values.
        """
        if not isinstance(data, dict):
            raise ValueError(
                f"Invalid config: expected a mapping, got {type(data).__name__}"
            )
        sections = {
            "outline": OutlineConfig,
            "metrics": MetricsConfig,
            "nudge": NudgeConfig,
            "report": ReportConfig,
        }
        unknown = set(data) - set(sections)
        if unknown:
            raise ValueError(f"Unknown config section(s): {', '.join(sorted(unknown))}")

        kwargs: dict[str, Any] = {}
        for name, section_cls in sections.items():
            values = data.get(name) or {}
            if not isinstance(values, dict):
                raise ValueError(f"Config section '{name}' must be a mapping")
            allowed = set(section_cls.__dataclass_fields__)
            bad = set(values) - allowed
            if bad:
                raise ValueError(
                    f"Unknown key(s) in '{name}': {', '.join(sorted(bad))}"
                )
            kwargs[name] = section_cls(**values)
        return cls(**kwargs)


def _require_yaml() -> Any:
    """Import and return the yaml module, or raise a helpful error."""
    try:
        import yaml

        return yaml
    except ImportError:
        raise ImportError(
            "pyyaml is required for config files. "
            "Install it with: pip install pyyaml"
        ) from None


def load_config(path: Path) -> AppConfig:
    """Read an AppConfig from a YAML file.

    An empty file yields the defaults.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the YAML is invalid or has unknown keys.
    """
    yaml = _require_yaml()

    with open(Path(path)) as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid config YAML: {e}") from e
    return AppConfig.from_dict(data or {})


def save_config(config: AppConfig, path: Path) -> None:
    """Write ``config`` to a YAML file."""
    yaml = _require_yaml()

    with open(Path(path), "w") as f:
        yaml.dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)
