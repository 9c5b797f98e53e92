#!/usr/bin/env python3
import os
import json
import logging
import subprocess
from pathlib import Path
from typing import Any, Dict, List, Optional

from .registry_errors import RegistryPublishError
from .registry_settings import RegistrySettings


class PublishError(RegistryPublishError):
    """Exception raised when a package cannot be published."""

    def __init__(self, message: str, stdout: str = "", stderr: str = ""):
        super().__init__(message)
        self.stdout = stdout
        self.stderr = stderr


class NpmClient:
    """
    Publishes staged package directories with the npm command line.

    The token is handed to npm through the NPM_TOKEN environment variable,
    which the publishing .npmrc is expected to reference.
    """

    def __init__(self, registry_url: str, token: Optional[str] = None, npm_command: str = "npm"):
        self.logger = logging.getLogger("types.registry.npm")
        self.registry_url = registry_url
        self.token = token
        self.npm_command = npm_command

    @classmethod
    def create(cls, settings: RegistrySettings) -> "NpmClient":
        """
        Create a client configured from the run settings.

        Args:
            settings: Run settings

        Returns:
            NpmClient: The client
        """
        return cls(settings.registry_url, token=settings.npm_token, npm_command=settings.npm_command)

    def validate(self, directory: Path, manifest: Dict[str, Any]) -> None:
        """
        Check that a staged directory holds the manifest about to be published.

        Args:
            directory: Staged package directory
            manifest: Manifest the directory was generated from

        Raises:
            PublishError: If the staged package.json is missing or does not match
        """
        package_json = Path(directory) / "package.json"
        try:
            with open(package_json, 'r', encoding='utf-8') as f:
                staged = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            msg = f"Cannot read staged manifest {package_json}: {e}"
            self.logger.error(msg)
            raise PublishError(msg) from e

        for field in ("name", "version"):
            if not manifest.get(field):
                raise PublishError(f"Manifest is missing required field '{field}'")
            if staged.get(field) != manifest[field]:
                msg = (f"Staged package.json {field} {staged.get(field)!r} "
                       f"does not match manifest {manifest[field]!r}")
                self.logger.error(msg)
                raise PublishError(msg)

    def _publish_command(self, directory: Path) -> List[str]:
        return [self.npm_command, "publish", str(directory), "--registry", self.registry_url]

    def publish(self, directory: Path, manifest: Dict[str, Any], dry: bool = False) -> None:
        """
        Publish a staged package directory.

        Args:
            directory: Staged package directory
            manifest: The package manifest
            dry: Validate only, without uploading anything
        """
        self.validate(directory, manifest)
        package_id = f"{manifest['name']}@{manifest['version']}"

        if dry:
            self.logger.info(f"(dry) Skip publish of {package_id} from {directory}")
            return

        if not self.token:
            raise PublishError(f"Cannot publish {package_id}: NPM_TOKEN is not set")

        cmd = self._publish_command(directory)
        self.logger.info(f"Publishing {package_id}")
        env = dict(os.environ, NPM_TOKEN=self.token)
        try:
            proc = subprocess.run(cmd, stdout=subprocess.PIPE, stderr=subprocess.PIPE, text=True, env=env)
        except OSError as e:
            msg = f"Failed to run {self.npm_command}: {e}"
            self.logger.error(msg)
            raise PublishError(msg) from e

        if proc.returncode != 0:
            msg = f"npm publish of {package_id} failed with exit code {proc.returncode}"
            self.logger.error(msg)
            if proc.stderr:
                self.logger.error(proc.stderr.rstrip())
            raise PublishError(msg, stdout=proc.stdout or "", stderr=proc.stderr or "")

        self.logger.info(f"Published {package_id}")
