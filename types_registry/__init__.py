"""
types-registry publisher

This package publishes the types-registry package, a listing of every typings
package published within the @types scope, whenever new packages were added.
"""

__version__ = "0.1.0"

# Import main components
from .registry_errors import RegistryPublishError
from .registry_settings import RegistrySettings
from .registry_data import TypingsPackage, PackageReader, AdditionsReader, RegistryDataError
from .registry_versions import VersionLookup, VersionInfo, LookupResult, Semver, RegistryLookupError, MissingVersionError
from .registry_builder import RegistryBuilder, RegistryDocument
from .registry_io import RegistryIOError
from .npm_client import NpmClient, PublishError
from .registry_publisher import RegistryPublisher, PublishOutcome
from .registry_cli import main

__all__ = [
    'RegistryPublishError',
    'RegistrySettings',
    'TypingsPackage', 'PackageReader', 'AdditionsReader', 'RegistryDataError',
    'VersionLookup', 'VersionInfo', 'LookupResult', 'Semver', 'RegistryLookupError', 'MissingVersionError',
    'RegistryBuilder', 'RegistryDocument',
    'RegistryIOError',
    'NpmClient', 'PublishError',
    'RegistryPublisher', 'PublishOutcome',
    'main',
]
