#!/usr/bin/env python3
import json
import logging
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from .npm_client import NpmClient
from .registry_builder import RegistryBuilder, RegistryDocument
from .registry_data import AdditionsReader, PackageReader
from .registry_io import RegistryIOError, clear_output_path, write_json, write_text
from .registry_logging import RunLog, write_log
from .registry_settings import RegistrySettings
from .registry_versions import VersionLookup

LOG_FILENAME = "publish-registry.md"

README = """This package contains a listing of all packages published to the @types scope on NPM.
Generated by [types-publisher](https://github.com/Microsoft/types-publisher).
"""


class PublishOutcome(Enum):
    """Final state of a publishing run."""
    PUBLISHED = "published"
    SKIPPED_NO_CHANGES = "skipped-no-changes"


class RegistryPublisher:
    """
    Publishes a new types-registry package whenever typings packages were added,
    orchestrating the data readers, the registry builder and the npm client.
    """

    def __init__(self,
                 settings: RegistrySettings,
                 package_reader: Optional[PackageReader] = None,
                 additions_reader: Optional[AdditionsReader] = None,
                 version_lookup: Optional[VersionLookup] = None,
                 client_factory: Optional[Callable[[RegistrySettings], NpmClient]] = None,
                 run_log: Optional[RunLog] = None):
        """
        Initialize the registry publisher.

        Collaborators that are not given are built from the settings.

        Args:
            settings: Run settings
            package_reader: Source of all typings packages
            additions_reader: Source of the names added since the last publish
            version_lookup: Source of the last published registry version
            client_factory: Creates the client used to publish
            run_log: Transcript of the run
        """
        self.logger = logging.getLogger("types.registry.publisher")
        self.settings = settings
        self.package_reader = package_reader or PackageReader(settings.data_dir)
        self.additions_reader = additions_reader or AdditionsReader(settings.data_dir)
        self.version_lookup = version_lookup or VersionLookup(settings.registry_url)
        self.client_factory = client_factory or NpmClient.create
        self.log = run_log or RunLog()
        self.builder = RegistryBuilder(settings.package_name, self.version_lookup)

    @property
    def output_path(self) -> Path:
        return self.settings.package_output_path

    def run(self, dry: bool = False) -> PublishOutcome:
        """
        Publish a new registry if packages were added since the last publish.

        The transcript is written to the logs directory whether or not the run
        succeeds; failures propagate after it is written.

        Args:
            dry: Generate everything but skip the upload

        Returns:
            PublishOutcome: PUBLISHED or SKIPPED_NO_CHANGES
        """
        self.log(f"=== Publishing {self.settings.package_name} ===")
        try:
            if self.has_new_additions():
                self.generate_and_publish_registry(dry)
                outcome = PublishOutcome.PUBLISHED
            else:
                outcome = PublishOutcome.SKIPPED_NO_CHANGES
        except Exception as e:
            self.log(f"Publishing failed: {e}")
            try:
                write_log(self.settings.logs_dir, LOG_FILENAME, self.log.result())
            except RegistryIOError as log_error:
                # the run's own failure is the one surfaced
                self.logger.error(f"Could not persist run log: {log_error}")
            raise

        write_log(self.settings.logs_dir, LOG_FILENAME, self.log.result())
        return outcome

    def has_new_additions(self) -> bool:
        """
        Returns:
            bool: True if any package was added since the last registry publish
        """
        added = self.additions_reader.read_additions()
        if added:
            self.log(f"New packages have been added: {json.dumps(added)}, so publishing a new registry")
            return True
        self.log("No new packages published, so no need to publish new registry.")
        return False

    def generate_and_publish_registry(self, dry: bool) -> None:
        typings = self.package_reader.read_typings()
        manifest, document = self.builder.build(typings)
        self.generate(self.output_path, manifest, document)
        self.publish(self.output_path, manifest, dry)

    def generate(self, output_dir: Path, manifest: Dict[str, Any], document: RegistryDocument) -> None:
        """
        Stage the registry package in a freshly cleared directory.

        Args:
            output_dir: Directory to stage into
            manifest: package.json content
            document: The registry document, written as index.json
        """
        clear_output_path(output_dir)
        write_json(output_dir / "package.json", manifest)
        write_json(output_dir / "index.json", document.to_json())
        write_text(output_dir / "README.md", README)
        self.log(f"Generated {manifest['name']}@{manifest['version']} in {output_dir}")

    def publish(self, output_dir: Path, manifest: Dict[str, Any], dry: bool) -> None:
        client = self.client_factory(self.settings)
        client.publish(output_dir, manifest, dry)
        prefix = "(dry) " if dry else ""
        self.log(f"{prefix}Published {manifest['name']}@{manifest['version']}")
