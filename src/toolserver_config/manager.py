"""Server configuration manager for the three-scope settings system."""

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .exceptions import ConfigError
from .exceptions import ConfigFileError
from .exceptions import DuplicateServerError
from .exceptions import ProfileNotFoundError
from .models import ConfigPaths
from .models import Scope
from .models import ScopeRef
from .models import ServerDefinition
from .models import ServerRegistry
from .store import ConfigStore
from .store import LoadResult
from .utils import expand_path

logger = logging.getLogger(__name__)


class RemoveOutcome(Enum):
    """Result of removing a server from one scope."""

    REMOVED = "removed"
    NOT_FOUND = "not_found"
    NO_CONFIG = "no_config"


@dataclass(frozen=True)
class ScopeEntry:
    """One scope of an aggregated view, with where it came from.

    Attributes:
        ref: Scope (and profile) the entry belongs to
        path: Document location for the scope
        result: Outcome of loading the document
    """

    ref: ScopeRef
    path: Path
    result: LoadResult

    @property
    def scope(self) -> Scope:
        return self.ref.scope

    @property
    def registry(self) -> ServerRegistry | None:
        return self.result.registry

    @property
    def available(self) -> bool:
        return self.result.available

    @property
    def error(self) -> ConfigError | None:
        return self.result.error


def unavailable_scopes(entries: list[ScopeEntry]) -> list[ScopeEntry]:
    """Return the entries whose document could not be decoded."""
    return [entry for entry in entries if not entry.available]


class ServerConfigManager:
    """Manages tool server definitions across profile/workspace/global scopes.

    Precedence order (most specific first):
    1. Profile (only when a profile name is given)
    2. Workspace
    3. Global

    A profile whose document sets ``useProfileServersOnly`` is exclusive:
    aggregation stops at it and broader scopes are never read. Registries
    are never merged; every aggregated entry keeps its own scope and path.

    Args:
        paths: Configuration locations for every scope
        store: Store used to read and write documents (default: local disk)
    """

    def __init__(self, paths: ConfigPaths, store: ConfigStore | None = None):
        self.paths = paths
        self.store = store or ConfigStore()

    # ===== Path Resolution =====

    def scope_to_path(self, scope: ScopeRef | Scope | None = None, profile: str | None = None) -> Path:
        """Get the document path for a scope.

        Args:
            scope: Scope reference, or a bare Scope (default: workspace)
            profile: Profile name when scope is Scope.PROFILE

        Returns:
            Path for the given scope

        Raises:
            MissingProfileNameError: If profile scope is requested without a name
            InvalidProfileNameError: If the profile name would leave profiles_dir
        """
        ref = self._to_ref(scope, profile)
        if ref.scope is Scope.PROFILE:
            return self.paths.profile_path(ref.profile)  # type: ignore[arg-type]
        if ref.scope is Scope.GLOBAL:
            return self.paths.global_config
        return self.paths.workspace

    # ===== Aggregation =====

    def aggregate(self, scope: Scope | None = None, profile: str | None = None) -> list[ScopeEntry]:
        """Load server registries in precedence order.

        With an explicit scope only that scope is loaded. Otherwise the
        profile (if given), workspace and global scopes are loaded in that
        order, stopping early at an exclusive profile. Malformed documents
        are contained: their entry is kept with no registry.

        Args:
            scope: Load only this scope
            profile: Profile name

        Returns:
            Scope entries, most specific first

        Raises:
            MissingProfileNameError: If scope is Scope.PROFILE without a profile
        """
        if scope is not None:
            return [self._load_entry(ScopeRef(scope, profile))]

        entries = []
        for ref in self._precedence(profile):
            entry = self._load_entry(ref)
            entries.append(entry)
            if ref.scope is Scope.PROFILE and entry.registry is not None and entry.registry.exclusive:
                logger.debug(f"Profile '{ref.profile}' is exclusive, skipping broader scopes")
                break
        return entries

    def find_server(self, name: str, profile: str | None = None) -> list[ScopeEntry]:
        """Find every visible scope that defines a server.

        Args:
            name: Server name
            profile: Profile name

        Returns:
            Entries defining the server, most specific first
        """
        return [
            entry
            for entry in self.aggregate(profile=profile)
            if entry.registry is not None and name in entry.registry
        ]

    def is_profile_exclusive(self, profile: str) -> bool:
        """Check whether a profile hides workspace and global servers."""
        registry = self.store.load(self.scope_to_path(ScopeRef.for_profile(profile))).registry
        return registry is not None and registry.exclusive

    # ===== Mutations =====

    def add_server(
        self,
        name: str,
        definition: ServerDefinition,
        scope: Scope | None = None,
        profile: str | None = None,
        force: bool = False,
    ) -> bool:
        """Add a server to a scope.

        Args:
            name: Server name
            definition: Server definition
            scope: Target scope (default: WORKSPACE)
            profile: Profile name when scope is Scope.PROFILE
            force: Overwrite an existing server with the same name

        Returns:
            True if an existing server was replaced

        Raises:
            DuplicateServerError: If the server exists and force is False
        """
        ref = self._to_ref(scope, profile)
        path = self.scope_to_path(ref)
        registry = self.store.ensure(path)

        replaced = name in registry
        if replaced and not force:
            raise DuplicateServerError(name, path, ref.scope.label)

        registry.servers[name] = definition
        self.store.save(path, registry)
        logger.info(f"Added server '{name}' to {ref} scope")
        return replaced

    def remove_server(self, name: str, scope: Scope | None = None, profile: str | None = None) -> RemoveOutcome:
        """Remove a server from a scope.

        Nothing is written unless a server was actually removed.

        Args:
            name: Server name
            scope: Target scope (default: WORKSPACE)
            profile: Profile name when scope is Scope.PROFILE

        Returns:
            REMOVED, NOT_FOUND, or NO_CONFIG if the scope has no document
        """
        ref = self._to_ref(scope, profile)
        path = self.scope_to_path(ref)

        if not self.store.exists(path):
            return RemoveOutcome.NO_CONFIG

        registry = self.store.read(path)
        if registry.servers.pop(name, None) is None:
            return RemoveOutcome.NOT_FOUND

        self.store.save(path, registry)
        logger.info(f"Removed server '{name}' from {ref} scope")
        return RemoveOutcome.REMOVED

    def import_servers(
        self,
        source: str | Path,
        scope: Scope | None = None,
        profile: str | None = None,
        force: bool = False,
        cwd: Path | None = None,
    ) -> int:
        """Import every server of another document into a scope.

        The import is all-or-nothing: any name conflict aborts it before the
        destination is written.

        Args:
            source: Document to import (``~`` and relative paths are expanded)
            scope: Target scope (default: WORKSPACE)
            profile: Profile name when scope is Scope.PROFILE
            force: Overwrite existing servers with the same names
            cwd: Directory relative sources are resolved against

        Returns:
            Number of servers imported

        Raises:
            ConfigFileError: If the source does not exist or cannot be read
            ConfigDecodeError: If the source is malformed
            DuplicateServerError: If a server exists and force is False
        """
        ref = self._to_ref(scope, profile)
        path = self.scope_to_path(ref)

        source_path = expand_path(source, cwd)
        if not self.store.exists(source_path):
            raise ConfigFileError(f"Import source {source_path} does not exist")
        source_registry = self.store.read(source_path)

        registry = self.store.ensure(path)
        if not force:
            for name in source_registry.servers:
                if name in registry:
                    raise DuplicateServerError(name, path, ref.scope.label)

        registry.servers.update(source_registry.servers)
        self.store.save(path, registry)
        count = len(source_registry.servers)
        logger.info(f"Imported {count} server(s) from {source_path} into {ref} scope")
        return count

    def set_profile_exclusive(self, profile: str, value: bool = True) -> Path:
        """Set whether a profile uses only its own servers.

        Args:
            profile: Profile name
            value: True to hide workspace and global servers

        Returns:
            Path of the updated profile document

        Raises:
            ProfileNotFoundError: If the profile directory does not exist
        """
        path = self.scope_to_path(ScopeRef.for_profile(profile))
        if not self.store.exists(path.parent):
            raise ProfileNotFoundError(profile)

        registry = self.store.read(path)
        registry.exclusive = value
        self.store.save(path, registry)
        logger.info(f"Set profile '{profile}' exclusive servers to {value}")
        return path

    # ===== Private Helpers =====

    def _to_ref(self, scope: ScopeRef | Scope | None, profile: str | None) -> ScopeRef:
        if isinstance(scope, ScopeRef):
            return scope
        return ScopeRef.from_args(scope, profile)

    def _precedence(self, profile: str | None) -> Iterator[ScopeRef]:
        if profile is not None:
            yield ScopeRef.for_profile(profile)
        yield ScopeRef.workspace()
        yield ScopeRef.global_scope()

    def _load_entry(self, ref: ScopeRef) -> ScopeEntry:
        path = self.scope_to_path(ref)
        return ScopeEntry(ref, path, self.store.load(path))
