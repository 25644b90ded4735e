"""Utility functions for toolserver-config."""

from pathlib import Path

from .exceptions import ConfigValidationError


def expand_path(raw: str | Path, cwd: Path | None = None) -> Path:
    """Expand a user-supplied path.

    A leading ``~`` is expanded to the home directory and relative paths are
    anchored at ``cwd`` (default: the current working directory).

    Examples:
        >>> expand_path("servers.json", Path("/work"))
        PosixPath('/work/servers.json')

        >>> expand_path("/etc/servers.json", Path("/work"))
        PosixPath('/etc/servers.json')
    """
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = (cwd or Path.cwd()) / path
    return path


def parse_env_vars(raw: str) -> dict[str, str]:
    """Parse ``NAME=value`` pairs separated by commas.

    Names and values are stripped of surrounding whitespace; the value may
    itself contain ``=``.

    Raises:
        ConfigValidationError: If a pair has no ``=``

    Examples:
        >>> parse_env_vars("A=1, B=two")
        {'A': '1', 'B': 'two'}
    """
    env = {}
    for pair in raw.split(","):
        key, sep, value = pair.partition("=")
        if not sep:
            raise ConfigValidationError(f"Invalid environment variable '{pair}'. Expected 'name=value'")
        env[key.strip()] = value.strip()
    return env
