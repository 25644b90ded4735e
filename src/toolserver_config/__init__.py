"""toolserver-config: Three-scope tool server configuration management.

This library manages named tool server (MCP) definitions across three scopes:
- Profile (typically ~/.toolserver/profiles/<name>/mcp.json)
- Workspace (typically .toolserver/mcp.json)
- Global (typically ~/.toolserver/mcp.json)

Applications inject paths to define their configuration policy. The library
provides the mechanism for resolving scopes, aggregating them in precedence
order, and adding, removing and importing server definitions.

Public API:
    ServerConfigManager: Main class for configuration operations
    ConfigPaths: Dataclass defining where each scope's document lives
    ConfigStore: Loads and atomically saves configuration documents
    Scope, ScopeRef: Scope enum and scope/profile reference
    ServerDefinition, ServerRegistry: Document model
    ScopeEntry, LoadResult, RemoveOutcome: Operation results
    ConfigError and subclasses: Exception types

Example:
    ```python
    from toolserver_config import ConfigPaths, Scope, ServerConfigManager, ServerDefinition

    # Application injects paths (policy)
    config = ServerConfigManager(ConfigPaths.default())

    # Write to a specific scope
    config.add_server("git", ServerDefinition(command="uvx", args=["mcp-server-git"]), scope=Scope.GLOBAL)

    # Read every scope, most specific first
    for entry in config.aggregate(profile="dev"):
        print(entry.scope.label, entry.path, entry.registry)
    ```
"""

from .exceptions import ConfigDecodeError
from .exceptions import ConfigError
from .exceptions import ConfigFileError
from .exceptions import ConfigValidationError
from .exceptions import DuplicateServerError
from .exceptions import InvalidProfileNameError
from .exceptions import MissingProfileNameError
from .exceptions import PathResolutionError
from .exceptions import ProfileNotFoundError
from .filesystem import FileSystem
from .filesystem import LocalFileSystem
from .manager import RemoveOutcome
from .manager import ScopeEntry
from .manager import ServerConfigManager
from .manager import unavailable_scopes
from .models import DEFAULT_TIMEOUT_MS
from .models import ConfigPaths
from .models import Scope
from .models import ScopeRef
from .models import ServerDefinition
from .models import ServerRegistry
from .store import ConfigStore
from .store import LoadResult
from .store import LoadStatus
from .utils import expand_path
from .utils import parse_env_vars

__version__ = "0.1.0"

__all__ = [
    "ServerConfigManager",
    "ConfigPaths",
    "ConfigStore",
    "FileSystem",
    "LocalFileSystem",
    "Scope",
    "ScopeRef",
    "ScopeEntry",
    "ServerDefinition",
    "ServerRegistry",
    "LoadResult",
    "LoadStatus",
    "RemoveOutcome",
    "DEFAULT_TIMEOUT_MS",
    "unavailable_scopes",
    "expand_path",
    "parse_env_vars",
    "ConfigError",
    "ConfigFileError",
    "ConfigValidationError",
    "ConfigDecodeError",
    "PathResolutionError",
    "MissingProfileNameError",
    "InvalidProfileNameError",
    "ProfileNotFoundError",
    "DuplicateServerError",
]
