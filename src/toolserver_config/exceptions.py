"""Exceptions for toolserver-config."""

from pathlib import Path


class ConfigError(Exception):
    """Base exception for configuration errors."""

    pass


class ConfigFileError(ConfigError):
    """Error reading or writing configuration file."""

    pass


class ConfigValidationError(ConfigError):
    """Error validating configuration data."""

    pass


class ConfigDecodeError(ConfigValidationError):
    """Configuration document could not be decoded."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid server configuration in {path}: {reason}")


class PathResolutionError(ConfigError):
    """Error mapping a scope to a configuration location."""

    pass


class MissingProfileNameError(PathResolutionError):
    """Profile scope requested without a profile name."""

    def __init__(self):
        super().__init__("Profile name is required when using profile scope")


class InvalidProfileNameError(PathResolutionError):
    """Profile name cannot be used as a directory name."""

    def __init__(self, profile: str):
        self.profile = profile
        super().__init__(f"Invalid profile name '{profile}'")


class ProfileNotFoundError(PathResolutionError):
    """Profile directory does not exist."""

    def __init__(self, profile: str):
        self.profile = profile
        super().__init__(f"Profile '{profile}' does not exist")


class DuplicateServerError(ConfigError):
    """Server name already present in the target configuration."""

    def __init__(self, name: str, path: Path, scope: str):
        self.name = name
        self.path = path
        self.scope = scope
        super().__init__(f"Server '{name}' already exists in {path} (scope {scope}). Use force to overwrite.")
