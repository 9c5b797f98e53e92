#!/usr/bin/env python3
import re
import logging
from typing import Any, Dict, Optional, Tuple

import requests

from .registry_errors import RegistryPublishError

SEMVER_RE = re.compile(r"^(\d+)\.(\d+)\.(\d+)(?:-([0-9A-Za-z.-]+))?(?:\+[0-9A-Za-z.-]+)?$")


class RegistryLookupError(RegistryPublishError):
    """Exception raised when the npm registry cannot be queried."""
    pass


class MissingVersionError(RegistryLookupError):
    """Exception raised when a package has no published version to build on."""
    pass


class Semver:
    """A parsed semantic version. Only numeric ordering and the pre-release tag are kept."""

    def __init__(self, major: int, minor: int, patch: int, prerelease: Optional[str] = None):
        self.major = major
        self.minor = minor
        self.patch = patch
        self.prerelease = prerelease

    @classmethod
    def parse(cls, text: str) -> Optional["Semver"]:
        match = SEMVER_RE.match(text.strip())
        if not match:
            return None
        return cls(int(match.group(1)), int(match.group(2)), int(match.group(3)), match.group(4))

    @property
    def is_prerelease(self) -> bool:
        return self.prerelease is not None

    def _prerelease_key(self) -> Tuple[Tuple[int, int, str], ...]:
        # numeric identifiers compare numerically and sort below alphanumeric ones
        return tuple((0, int(part), "") if part.isdigit() else (1, 0, part)
                     for part in self.prerelease.split("."))

    def sort_key(self) -> Tuple:
        """
        Key ordering versions by semver precedence.

        A release sorts above its own pre-releases, and pre-releases of the
        same version compare identifier by identifier.
        """
        if self.is_prerelease:
            return (self.major, self.minor, self.patch, 0, self._prerelease_key())
        return (self.major, self.minor, self.patch, 1, ())

    def __eq__(self, other) -> bool:
        if not isinstance(other, Semver):
            return NotImplemented
        return str(self) == str(other)

    def __str__(self) -> str:
        base = f"{self.major}.{self.minor}.{self.patch}"
        return f"{base}-{self.prerelease}" if self.prerelease else base

    def __repr__(self) -> str:
        return f"Semver({str(self)!r})"


class VersionInfo:
    """Snapshot of the latest published version of a package."""

    def __init__(self, version: Semver):
        self.version = version

    def __repr__(self) -> str:
        return f"VersionInfo(version={self.version!r})"


class LookupResult:
    """
    Outcome of a version lookup: either a VersionInfo or the reason none was found.
    """

    def __init__(self, package_name: str, info: Optional[VersionInfo] = None, reason: Optional[str] = None):
        self.package_name = package_name
        self.info = info
        self.reason = reason

    @classmethod
    def found(cls, package_name: str, info: VersionInfo) -> "LookupResult":
        return cls(package_name, info=info)

    @classmethod
    def missing(cls, package_name: str, reason: str) -> "LookupResult":
        return cls(package_name, reason=reason)

    @property
    def is_found(self) -> bool:
        return self.info is not None

    def unwrap(self) -> VersionInfo:
        """
        Returns:
            VersionInfo: The found version info

        Raises:
            MissingVersionError: If no version was found
        """
        if self.info is None:
            raise MissingVersionError(
                f"No published version found for registry package {self.package_name}: {self.reason}")
        return self.info


def escape_package_name(name: str) -> str:
    """Escape a (possibly scoped) package name for use in a registry URL."""
    return name.replace("/", "%2f")


class VersionLookup:
    """Fetches published version metadata from an npm registry."""

    def __init__(self, registry_url: str, session: Optional[requests.Session] = None, timeout: float = 30.0):
        """
        Initialize the version lookup.

        Args:
            registry_url: Base URL of the npm registry
            session: Optional requests session to reuse
            timeout: Request timeout in seconds
        """
        self.logger = logging.getLogger("types.registry.versions")
        self.registry_url = registry_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def fetch_npm_info(self, package_name: str) -> Optional[Dict[str, Any]]:
        """
        Fetch the registry document for a package.

        Args:
            package_name: Package name, scoped or not

        Returns:
            dict: The registry document, or None if the package does not exist
        """
        url = f"{self.registry_url}/{escape_package_name(package_name)}"
        self.logger.debug(f"Fetching {url}")
        try:
            rsp = self.session.get(url, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            msg = f"Failed to fetch {url}: {e}"
            self.logger.error(msg)
            raise RegistryLookupError(msg) from e

        if rsp.status_code == 404:
            self.logger.info(f"Package {package_name} not found in registry")
            return None
        try:
            rsp.raise_for_status()
            return rsp.json()
        except (requests.exceptions.HTTPError, ValueError) as e:
            msg = f"Bad response from {url}: {e}"
            self.logger.error(msg)
            raise RegistryLookupError(msg) from e

    def fetch_version_info(self, package_name: str, is_prerelease: bool) -> LookupResult:
        """
        Look up the highest published version of a package.

        Args:
            package_name: Package name, scoped or not
            is_prerelease: Whether pre-release versions may be considered

        Returns:
            LookupResult: Found with the highest matching version, or missing
        """
        info = self.fetch_npm_info(package_name)
        if info is None:
            return LookupResult.missing(package_name, "package does not exist in the registry")

        parsed = [Semver.parse(v) for v in info.get("versions", {})]
        parsed = [v for v in parsed if v is not None]
        if not parsed:
            return LookupResult.missing(package_name, "package has no published versions")

        candidates = parsed if is_prerelease else [v for v in parsed if not v.is_prerelease]
        if not candidates:
            return LookupResult.missing(package_name, "package has only pre-release versions")

        version = max(candidates, key=Semver.sort_key)
        self.logger.debug(f"Latest version of {package_name}: {version}")
        return LookupResult.found(package_name, VersionInfo(version))
