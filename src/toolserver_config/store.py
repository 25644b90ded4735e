"""Loading and persisting server configuration documents."""

import json
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .exceptions import ConfigDecodeError
from .exceptions import ConfigError
from .exceptions import ConfigFileError
from .filesystem import FileSystem
from .filesystem import LocalFileSystem
from .models import ServerRegistry

logger = logging.getLogger(__name__)

YAML_SUFFIXES = {".yaml", ".yml"}


class LoadStatus(Enum):
    """Outcome of a contained load."""

    LOADED = "loaded"
    DEFAULT = "default"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class LoadResult:
    """Registry loaded from one location, or the reason it is unavailable.

    Attributes:
        status: How the registry was obtained
        registry: Loaded or default registry (None when unavailable)
        error: Error that made the location unavailable
    """

    status: LoadStatus
    registry: ServerRegistry | None = None
    error: ConfigError | None = None

    @property
    def available(self) -> bool:
        return self.registry is not None


class ConfigStore:
    """Reads and writes server registries through a FileSystem.

    Documents ending in ``.yaml``/``.yml`` are YAML; everything else is JSON.

    Args:
        fs: File system collaborator (default: local disk)
    """

    def __init__(self, fs: FileSystem | None = None):
        self.fs = fs or LocalFileSystem()

    def exists(self, path: Path) -> bool:
        return self.fs.exists(path)

    def read(self, path: Path) -> ServerRegistry:
        """Read a registry, propagating any failure.

        Args:
            path: Document location

        Returns:
            Decoded registry, or an empty one if path doesn't exist

        Raises:
            ConfigFileError: If the document cannot be read
            ConfigDecodeError: If the document is malformed
        """
        if not self.fs.exists(path):
            return ServerRegistry()
        return self._read_existing(path)

    def load(self, path: Path) -> LoadResult:
        """Load a registry, containing decode failures.

        A malformed document makes the location unavailable instead of
        raising, so one bad scope does not block the others.
        """
        if not self.fs.exists(path):
            return LoadResult(LoadStatus.DEFAULT, ServerRegistry())

        try:
            registry = self._read_existing(path)
        except ConfigError as e:
            logger.warning(f"Invalid server configuration in {path} - ignored: {e}")
            return LoadResult(LoadStatus.UNAVAILABLE, error=e)
        return LoadResult(LoadStatus.LOADED, registry)

    def ensure(self, path: Path) -> ServerRegistry:
        """Read a registry, first creating an empty document if none exists.

        Raises:
            ConfigFileError: If the document cannot be read or created
            ConfigDecodeError: If the existing document is malformed
        """
        if not self.fs.exists(path):
            registry = ServerRegistry()
            self.save(path, registry)
            logger.info(f"Created server configuration in {path}")
            return registry
        return self._read_existing(path)

    def save(self, path: Path, registry: ServerRegistry) -> None:
        """Write a registry, replacing any previous document atomically.

        Raises:
            ConfigFileError: If write fails
        """
        text = self._encode(path, registry.to_document())
        try:
            self.fs.create_dir_all(path.parent)
            self.fs.write_text(path, text)
        except OSError as e:
            raise ConfigFileError(f"Failed to write configuration to {path}: {e}") from e

    # ===== Private Helpers =====

    def _read_existing(self, path: Path) -> ServerRegistry:
        try:
            text = self.fs.read_text(path)
        except OSError as e:
            raise ConfigFileError(f"Failed to read configuration from {path}: {e}") from e
        return self._decode(path, text)

    def _decode(self, path: Path, text: str) -> ServerRegistry:
        try:
            if path.suffix in YAML_SUFFIXES:
                data = yaml.safe_load(text)
            else:
                data = json.loads(text) if text.strip() else None
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise ConfigDecodeError(path, str(e)) from e

        if data is None:
            return ServerRegistry()
        if not isinstance(data, dict):
            raise ConfigDecodeError(path, f"expected a mapping at top level, got {type(data).__name__}")

        try:
            return ServerRegistry.model_validate(data)
        except ValidationError as e:
            raise ConfigDecodeError(path, str(e)) from e

    def _encode(self, path: Path, data: dict[str, Any]) -> str:
        if path.suffix in YAML_SUFFIXES:
            return yaml.safe_dump(data, default_flow_style=False, sort_keys=False)
        return json.dumps(data, indent=2) + "\n"
