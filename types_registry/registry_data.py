#!/usr/bin/env python3
import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from .registry_errors import RegistryPublishError

TYPES_DATA_FILENAME = "typesData.json"
ADDITIONS_FILENAME = "additions.json"


class RegistryDataError(RegistryPublishError):
    """Exception raised when package data cannot be read."""
    pass


class TypingsPackage:
    """One published typings package version."""

    def __init__(self, name: str, major_version: int = 0, minor_version: int = 0):
        self.name = name
        self.major_version = major_version
        self.minor_version = minor_version

    @classmethod
    def from_data(cls, key: str, data: Dict[str, Any]) -> "TypingsPackage":
        """
        Build a package from one version entry of typesData.json.

        Args:
            key: Top-level key the entry was found under
            data: The version entry

        Returns:
            TypingsPackage: The parsed package
        """
        return cls(
            name=data.get("typingsPackageName") or key,
            major_version=int(data.get("libraryMajorVersion", 0)),
            minor_version=int(data.get("libraryMinorVersion", 0)),
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, TypingsPackage):
            return NotImplemented
        return (self.name, self.major_version, self.minor_version) == \
            (other.name, other.major_version, other.minor_version)

    def __repr__(self) -> str:
        return f"TypingsPackage({self.name!r}, {self.major_version}.{self.minor_version})"


def _read_json(path: Path, logger: logging.Logger) -> Any:
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except FileNotFoundError as e:
        msg = f"Data file not found: {path}"
        logger.error(msg)
        raise RegistryDataError(msg) from e
    except (OSError, json.JSONDecodeError) as e:
        msg = f"Failed to read data file {path}: {e}"
        logger.error(msg)
        raise RegistryDataError(msg) from e


class PackageReader:
    """Reads the typings packages currently published under the @types scope."""

    def __init__(self, data_dir: Path):
        """
        Initialize the package reader.

        Args:
            data_dir: Directory containing typesData.json
        """
        self.logger = logging.getLogger("types.registry.data")
        self.data_dir = Path(data_dir)

    def read_typings(self) -> List[TypingsPackage]:
        """
        Read every typings package version from typesData.json.

        The file maps a package name to its version entries, so a package with
        several major versions appears once per version. Not-needed packages
        live in a separate file and are never returned.

        Returns:
            List[TypingsPackage]: All typings packages, in file order
        """
        path = self.data_dir / TYPES_DATA_FILENAME
        data = _read_json(path, self.logger)
        if not isinstance(data, dict):
            msg = f"Expected an object in {path}, got {type(data).__name__}"
            self.logger.error(msg)
            raise RegistryDataError(msg)

        typings = []
        for key, versions in data.items():
            if not isinstance(versions, dict):
                msg = f"Invalid entry for {key} in {path}"
                self.logger.error(msg)
                raise RegistryDataError(msg)
            for version, version_data in versions.items():
                if not isinstance(version_data, dict):
                    msg = f"Invalid version entry {key}@{version} in {path}"
                    self.logger.error(msg)
                    raise RegistryDataError(msg)
                try:
                    typings.append(TypingsPackage.from_data(key, version_data))
                except (TypeError, ValueError) as e:
                    msg = f"Failed to parse version entry {key}@{version} in {path}: {e}"
                    self.logger.error(msg)
                    raise RegistryDataError(msg) from e

        self.logger.debug(f"Read {len(typings)} typings packages from {path}")
        return typings


class AdditionsReader:
    """Reads the package names added since the registry was last published."""

    def __init__(self, data_dir: Path):
        self.logger = logging.getLogger("types.registry.data")
        self.data_dir = Path(data_dir)

    def read_additions(self) -> List[str]:
        """
        Returns:
            List[str]: Names added since the last publish; empty if none were recorded
        """
        path = self.data_dir / ADDITIONS_FILENAME
        if not path.exists():
            self.logger.debug(f"No additions file at {path}")
            return []

        additions = _read_json(path, self.logger)
        if not isinstance(additions, list) or not all(isinstance(name, str) for name in additions):
            msg = f"Expected a list of package names in {path}"
            self.logger.error(msg)
            raise RegistryDataError(msg)
        return additions
