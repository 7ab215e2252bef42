"""
Configuration management for langtask.
"""

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .exceptions import ConfigurationError


@dataclass
class SandboxDockerConfig:
    """Docker-specific sandbox configuration."""

    image: str = "langtask/toolchains:latest"
    memory_limit_mb: int = 512
    cpus: float | None = 1.0
    network_enabled: bool = False
    extra_args: list[str] = field(default_factory=list)


@dataclass
class SandboxConfig:
    """Execution sandbox runtime configuration."""

    runtime: str = "local"  # local | docker
    default_timeout_seconds: float = 5  # default run-phase cputime
    compile_timeout_seconds: int = 30
    memory_limit_mb: int = 512
    env_allowlist: list[str] = field(default_factory=list)
    docker: SandboxDockerConfig = field(default_factory=SandboxDockerConfig)


@dataclass
class ProjectConfig:
    """Main service configuration."""

    name: str
    version: str = "0.1.0"
    log_level: str = "WARNING"
    sandbox: SandboxConfig = field(default_factory=SandboxConfig)
    # Per-language parameter overrides, e.g. {"c": {"compileargs": ["-O2"]}}
    language_params: dict[str, dict[str, Any]] = field(default_factory=dict)

    @classmethod
    def load_from_file(cls, config_path: Path) -> "ProjectConfig":
        """Load configuration from file."""
        if not config_path.exists():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            with open(config_path) as f:
                if config_path.suffix.lower() == ".json":
                    data = json.load(f)
                else:
                    data = yaml.safe_load(f)
            data = data or {}
            if not isinstance(data, dict):
                raise ValueError("top-level value must be a mapping")

            if "sandbox" in data:
                sandbox_data = data["sandbox"] or {}
                if isinstance(sandbox_data, dict):
                    sandbox_data = sandbox_data.copy()
                    docker_data = sandbox_data.get("docker", {}) or {}
                    if not isinstance(docker_data, dict):
                        docker_data = {}
                    sandbox_data["docker"] = SandboxDockerConfig(**docker_data)
                    data["sandbox"] = SandboxConfig(**sandbox_data)
                else:
                    data["sandbox"] = SandboxConfig()

            raw_params = data.get("language_params") or {}
            if not isinstance(raw_params, dict):
                raw_params = {}
            data["language_params"] = {
                str(language).strip().lower(): dict(values or {})
                for language, values in raw_params.items()
                if isinstance(values, dict) or values is None
            }

            # Filter out any keys that aren't valid ProjectConfig fields
            valid_fields = {"name", "version", "log_level", "sandbox", "language_params"}
            filtered_data = {k: v for k, v in data.items() if k in valid_fields}

            if "name" not in filtered_data:
                filtered_data["name"] = "langtask"

            return cls(**filtered_data)
        except ConfigurationError:
            raise
        except Exception as e:
            raise ConfigurationError(f"Failed to load configuration: {e}") from e

    def save_to_file(self, config_path: Path) -> None:
        """Save configuration to file."""
        try:
            config_path.parent.mkdir(parents=True, exist_ok=True)
            data = asdict(self)

            with open(config_path, "w") as f:
                if config_path.suffix.lower() == ".json":
                    json.dump(data, f, indent=2)
                else:
                    yaml.dump(data, f, default_flow_style=False, indent=2)
        except Exception as e:
            raise ConfigurationError(f"Failed to save configuration: {e}") from e

    def get_language_params(self, language_id: str) -> dict[str, Any]:
        """Return configured parameter overrides for a language."""
        key = (language_id or "").strip().lower()
        return dict(self.language_params.get(key) or {})

    @classmethod
    def create_default(cls, project_name: str = "langtask") -> "ProjectConfig":
        """Create default configuration."""
        return cls(name=project_name)


class ConfigManager:
    """Manages service configuration."""

    CONFIG_FILENAME = "langtask.yaml"

    def __init__(self, project_root: Path | None = None, config_path: Path | None = None):
        self.project_root = project_root or Path.cwd()
        self.config_path = config_path or self.project_root / self.CONFIG_FILENAME
        self._config: ProjectConfig | None = None

    @property
    def config(self) -> ProjectConfig:
        """Get current configuration, loading if necessary."""
        if self._config is None:
            self.load_config()
        return self._config

    def load_config(self) -> ProjectConfig:
        """Load configuration from file, falling back to defaults."""
        if self.config_path.exists():
            self._config = ProjectConfig.load_from_file(self.config_path)
        else:
            self._config = ProjectConfig.create_default()
        return self._config

    def save_config(self) -> None:
        """Save current configuration to file."""
        if self._config is None:
            raise ConfigurationError("No configuration to save")

        self._config.save_to_file(self.config_path)

    def get_language_params(self, language_id: str) -> dict[str, Any]:
        """Return configured parameter overrides for a language."""
        return self.config.get_language_params(language_id)
