#!/usr/bin/env python3
import logging
from typing import Any, Dict, Iterable, Set, Tuple

from .registry_data import TypingsPackage
from .registry_versions import VersionLookup

REGISTRY_DESCRIPTION = "A registry of TypeScript declaration file packages published within the @types scope."
REGISTRY_REPOSITORY = {
    "type": "git",
    "url": "https://github.com/Microsoft/types-publisher.git"
}
REGISTRY_KEYWORDS = ["TypeScript", "declaration", "files", "types", "packages"]
REGISTRY_AUTHOR = "Microsoft Corp."
REGISTRY_LICENSE = "Apache-2.0"
REGISTRY_MINOR_LINE = "0.1"


class RegistryDocument:
    """The set of typings package names that make up the registry."""

    def __init__(self, names: Iterable[str] = ()):
        self.names: Set[str] = set(names)

    @classmethod
    def from_typings(cls, typings: Iterable[TypingsPackage]) -> "RegistryDocument":
        return cls(package.name for package in typings)

    def to_json(self) -> Dict[str, Dict[str, int]]:
        """
        Encode the set the way index.json stores it: each name maps to 1.
        """
        return {"entries": {name: 1 for name in sorted(self.names)}}

    def __len__(self) -> int:
        return len(self.names)

    def __contains__(self, name: str) -> bool:
        return name in self.names


def generate_package_json(package_name: str, patch: int) -> Dict[str, Any]:
    """
    Build the registry package manifest.

    Args:
        package_name: Registry package name
        patch: Patch number of the version to publish

    Returns:
        dict: The package.json content
    """
    return {
        "name": package_name,
        "version": f"{REGISTRY_MINOR_LINE}.{patch}",
        "description": REGISTRY_DESCRIPTION,
        "repository": dict(REGISTRY_REPOSITORY),
        "keywords": list(REGISTRY_KEYWORDS),
        "author": REGISTRY_AUTHOR,
        "license": REGISTRY_LICENSE,
    }


class RegistryBuilder:
    """Computes the next registry manifest and the registry document."""

    def __init__(self, package_name: str, version_lookup: VersionLookup):
        """
        Initialize the registry builder.

        Args:
            package_name: Name of the registry package
            version_lookup: Source of the last published version
        """
        self.logger = logging.getLogger("types.registry.builder")
        self.package_name = package_name
        self.version_lookup = version_lookup

    def fetch_last_patch_number(self) -> int:
        """
        Returns:
            int: Patch number of the last published, non pre-release registry version

        Raises:
            MissingVersionError: If the registry package was never published
        """
        info = self.version_lookup.fetch_version_info(self.package_name, False).unwrap()
        self.logger.debug(f"Last published {self.package_name} version: {info.version}")
        return info.version.patch

    def build(self, typings: Iterable[TypingsPackage]) -> Tuple[Dict[str, Any], RegistryDocument]:
        """
        Build the manifest and registry document for the next publish.

        Args:
            typings: All currently published typings packages

        Returns:
            Tuple[dict, RegistryDocument]: (package.json content, registry document)
        """
        patch = self.fetch_last_patch_number() + 1
        manifest = generate_package_json(self.package_name, patch)
        document = RegistryDocument.from_typings(typings)
        self.logger.info(f"Built {self.package_name}@{manifest['version']} with {len(document)} packages")
        return manifest, document
