#!/usr/bin/env python3
import os
from pathlib import Path
from typing import Dict, Optional

REGISTRY_PACKAGE_NAME = "types-registry"
DEFAULT_REGISTRY_URL = "https://registry.npmjs.org"


class RegistrySettings:
    """Configuration for a single types-registry publishing run."""

    def __init__(self,
                 output_path: Path,
                 data_dir: Path,
                 logs_dir: Path,
                 registry_url: str = DEFAULT_REGISTRY_URL,
                 package_name: str = REGISTRY_PACKAGE_NAME,
                 npm_command: str = "npm",
                 npm_token: Optional[str] = None):
        """
        Initialize the settings.

        Args:
            output_path: Root directory for generated packages
            data_dir: Directory holding typesData.json and additions.json
            logs_dir: Directory the run transcript is written to
            registry_url: Base URL of the npm registry
            package_name: Name of the generated registry package
            npm_command: Executable used to publish
            npm_token: Auth token handed to the publish command
        """
        self.output_path = Path(output_path)
        self.data_dir = Path(data_dir)
        self.logs_dir = Path(logs_dir)
        self.registry_url = registry_url.rstrip("/")
        self.package_name = package_name
        self.npm_command = npm_command
        self.npm_token = npm_token

    @property
    def package_output_path(self) -> Path:
        """Directory the registry package is staged in."""
        return self.output_path / self.package_name

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None, **overrides) -> "RegistrySettings":
        """
        Build settings from environment variables.

        Keyword overrides that are not None take precedence over the environment.

        Args:
            environ: Mapping to read instead of os.environ

        Returns:
            RegistrySettings: The resolved settings
        """
        if environ is None:
            environ = os.environ

        values = {
            "output_path": Path(environ.get("TYPES_REGISTRY_OUTPUT_PATH", "./output")),
            "data_dir": Path(environ.get("TYPES_REGISTRY_DATA_DIR", "./data")),
            "logs_dir": Path(environ.get("TYPES_REGISTRY_LOGS_DIR", "./logs")),
            "registry_url": environ.get("NPM_REGISTRY_URL", DEFAULT_REGISTRY_URL),
            "npm_token": environ.get("NPM_TOKEN"),
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)

    def __repr__(self) -> str:
        return (f"RegistrySettings(output_path={self.output_path!r}, data_dir={self.data_dir!r}, "
                f"logs_dir={self.logs_dir!r}, registry_url={self.registry_url!r})")
