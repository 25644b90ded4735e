"""Data models for toolserver-config."""

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import StrictBool
from pydantic import StrictInt
from pydantic import StrictStr
from pydantic import field_validator

from .exceptions import InvalidProfileNameError
from .exceptions import MissingProfileNameError

DEFAULT_TIMEOUT_MS = 120_000
"""Server launch timeout used when a definition does not set one."""

_PATH_SEPARATORS = {sep for sep in ("/", os.sep, os.altsep) if sep}


def validate_profile_name(name: str | None) -> str:
    """Check that a profile name names exactly one directory under the profiles root.

    Raises:
        MissingProfileNameError: If name is missing or blank
        InvalidProfileNameError: If name is ``.``, ``..`` or contains a path separator
    """
    if not name or not name.strip():
        raise MissingProfileNameError()
    if name in (".", "..") or any(sep in name for sep in _PATH_SEPARATORS):
        raise InvalidProfileNameError(name)
    return name


class Scope(Enum):
    """Configuration scope enumeration.

    Determines which configuration file governs a read or write.
    """

    WORKSPACE = "workspace"
    GLOBAL = "global"
    PROFILE = "profile"

    @property
    def label(self) -> str:
        return self.value


@dataclass(frozen=True)
class ScopeRef:
    """A scope together with the profile name it needs.

    Only ``Scope.PROFILE`` carries a profile name; constructing a profile
    reference without one raises MissingProfileNameError, and a name that
    would escape the profiles directory raises InvalidProfileNameError.
    Profile names given alongside other scopes are dropped.

    Attributes:
        scope: Scope being referenced
        profile: Profile name (PROFILE scope only)
    """

    scope: Scope
    profile: str | None = None

    def __post_init__(self):
        if self.scope is Scope.PROFILE:
            validate_profile_name(self.profile)
        elif self.profile is not None:
            object.__setattr__(self, "profile", None)

    @classmethod
    def workspace(cls) -> "ScopeRef":
        return cls(Scope.WORKSPACE)

    @classmethod
    def global_scope(cls) -> "ScopeRef":
        return cls(Scope.GLOBAL)

    @classmethod
    def for_profile(cls, name: str) -> "ScopeRef":
        return cls(Scope.PROFILE, name)

    @classmethod
    def from_args(cls, scope: Scope | None, profile: str | None = None) -> "ScopeRef":
        """Build a reference from command-line style arguments.

        An unspecified scope means the workspace.
        """
        return cls(scope or Scope.WORKSPACE, profile)

    def __str__(self) -> str:
        if self.scope is Scope.PROFILE:
            return f"{self.scope.label} '{self.profile}'"
        return self.scope.label


@dataclass(frozen=True)
class ConfigPaths:
    """Locations of the configuration documents for every scope.

    Immutable configuration for where server documents live. Applications
    inject these paths to define their configuration policy; profile
    documents are derived from ``profiles_dir``.

    Attributes:
        workspace: Path to the workspace document (under the working directory)
        global_config: Path to the user-global document
        profiles_dir: Directory holding one subdirectory per profile
        filename: Document file name inside a profile directory
    """

    workspace: Path
    global_config: Path
    profiles_dir: Path
    filename: str = "mcp.json"

    @classmethod
    def default(cls, cwd: Path | None = None, home: Path | None = None) -> "ConfigPaths":
        """Create paths for the standard ``.toolserver`` layout."""
        cwd = cwd or Path.cwd()
        home = home or Path.home()
        return cls(
            workspace=cwd / ".toolserver" / "mcp.json",
            global_config=home / ".toolserver" / "mcp.json",
            profiles_dir=home / ".toolserver" / "profiles",
        )

    def profile_path(self, name: str) -> Path:
        return self.profiles_dir / validate_profile_name(name) / self.filename


class ServerDefinition(BaseModel):
    """One named tool server entry.

    Attributes:
        command: Command used to launch the server
        args: Arguments passed to the command, in order
        env: Environment variables for the server (None when unspecified)
        timeout: Launch timeout in milliseconds
        disabled: Whether the server should not be loaded
    """

    command: StrictStr
    args: list[StrictStr] = Field(default_factory=list)
    env: dict[StrictStr, StrictStr] | None = None
    timeout: StrictInt = Field(DEFAULT_TIMEOUT_MS, ge=0)
    disabled: StrictBool = False

    @field_validator("timeout", mode="before")
    @classmethod
    def _default_null_timeout(cls, value: Any) -> Any:
        return DEFAULT_TIMEOUT_MS if value is None else value


class ServerRegistry(BaseModel):
    """Server definitions of one scope plus its exclusivity flag.

    ``exclusive`` only has meaning for profile documents: when set, the
    profile's servers hide those of the workspace and global scopes.
    """

    model_config = ConfigDict(populate_by_name=True)

    servers: dict[StrictStr, ServerDefinition] = Field(default_factory=dict, alias="mcpServers")
    exclusive: StrictBool = Field(False, alias="useProfileServersOnly")

    @field_validator("servers", mode="before")
    @classmethod
    def _default_null_servers(cls, value: Any) -> Any:
        return {} if value is None else value

    def __contains__(self, name: object) -> bool:
        return name in self.servers

    def get(self, name: str) -> ServerDefinition | None:
        return self.servers.get(name)

    def names(self) -> list[str]:
        return list(self.servers)

    def to_document(self) -> dict[str, Any]:
        """Return the persisted form, leaving out unset ``env`` mappings."""
        return self.model_dump(by_alias=True, exclude_none=True)
