"""
Configuration loading and settings resolution for mysqldump-extended.
"""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from .enumerator import DEFAULT_EXCLUSIONS
from .errors import PreconditionError
from .models import ConnectionProfile, ErrorPolicy, QueryBackend
from .staging import DEFAULT_PREFIX


class ConfigLoader:
    """Loads configuration from YAML file."""

    ENV_VAR_PATTERN = re.compile(r'\$\{([^}]+)\}')

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = config_path
        self.config = self._load_config() if config_path else {}

    def _load_config(self) -> dict[str, Any]:
        """Load configuration from YAML file."""
        with open(self.config_path, 'r') as f:
            config = yaml.safe_load(f) or {}

        return self._resolve_env_vars(config)

    def _resolve_env_vars(self, obj: Any) -> Any:
        """Recursively resolve environment variables in config."""
        if isinstance(obj, str):
            matches = self.ENV_VAR_PATTERN.findall(obj)
            for match in matches:
                env_value = os.environ.get(match, '')
                obj = obj.replace(f'${{{match}}}', env_value)
            return obj
        elif isinstance(obj, dict):
            return {k: self._resolve_env_vars(v) for k, v in obj.items()}
        elif isinstance(obj, list):
            return [self._resolve_env_vars(item) for item in obj]
        return obj

    def get_connection_settings(self) -> dict[str, Any]:
        """Get server connection settings."""
        return self.config.get('connection', {})

    def get_output_settings(self) -> dict[str, Any]:
        """Get output settings."""
        return self.config.get('output', {})

    def get_executables(self) -> dict[str, str]:
        """Get executable names or paths for mysql, mysqldump and tar."""
        return self.config.get('executables', {})

    def get_exclusions(self) -> Optional[list[str]]:
        """Get database exclusion patterns, or None to use the defaults."""
        return self.config.get('exclude_databases')

    def get_error_policy(self) -> Optional[str]:
        return self.config.get('on_error')

    def get_query_backend(self) -> Optional[str]:
        return self.config.get('query_backend')

    def get_logging_settings(self) -> dict[str, Any]:
        """Get logging settings."""
        return self.config.get('logging', {})


def _pick(*values: Any) -> Any:
    """First value that is not None."""
    for value in values:
        if value is not None:
            return value
    return None


@dataclass
class BackupSettings:
    """Everything a run needs, merged with priority: CLI > config file > defaults."""
    connection: ConnectionProfile = field(default_factory=ConnectionProfile)
    output_dir: Path = Path('.')
    output_file: str = 'mysqldumps.tar.gz'
    staging_prefix: str = DEFAULT_PREFIX
    previous_pattern: str = 'mysqldump*.tar.gz'
    delete_previous: bool = True
    archive: bool = True
    error_policy: ErrorPolicy = ErrorPolicy.CONTINUE
    query_backend: QueryBackend = QueryBackend.CLIENT
    exclusions: list[str] = field(default_factory=lambda: list(DEFAULT_EXCLUSIONS))
    executables: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_sources(cls, config: ConfigLoader, args: Any) -> "BackupSettings":
        """
        Build settings from a loaded config and parsed command-line arguments.

        Raises:
            PreconditionError: if the port is not a number or an enumerated
                setting has an unknown value.
        """
        conn = config.get_connection_settings()
        output = config.get_output_settings()
        defaults = cls()
        default_conn = defaults.connection

        try:
            port = int(_pick(args.port, conn.get('port'), default_conn.port))
        except (TypeError, ValueError) as e:
            raise PreconditionError(f"Invalid configuration: port must be a number: {e}") from e

        connection = ConnectionProfile(
            host=_pick(args.host, conn.get('host'), default_conn.host),
            user=_pick(args.user, conn.get('user'), default_conn.user),
            password=_pick(args.password, conn.get('password'), default_conn.password),
            charset=_pick(args.charset, conn.get('charset'), default_conn.charset),
            port=port,
        )

        try:
            error_policy = ErrorPolicy(
                'abort' if args.abort_on_error
                else _pick(config.get_error_policy(), defaults.error_policy.value)
            )
            query_backend = QueryBackend(
                _pick(args.query_backend, config.get_query_backend(), defaults.query_backend.value)
            )
        except ValueError as e:
            raise PreconditionError(f"Invalid configuration: {e}") from e

        exclusions = config.get_exclusions()

        return cls(
            connection=connection,
            output_dir=Path(_pick(args.output_directory, output.get('directory'), '.')),
            output_file=_pick(args.output_file, output.get('file'), defaults.output_file),
            staging_prefix=output.get('staging_prefix', defaults.staging_prefix),
            previous_pattern=output.get('previous_pattern', defaults.previous_pattern),
            delete_previous=not args.skip_delete_previous and output.get('delete_previous', True),
            archive=not args.skip_tarballing and output.get('archive', True),
            error_policy=error_policy,
            query_backend=query_backend,
            exclusions=list(DEFAULT_EXCLUSIONS if exclusions is None else exclusions),
            executables=config.get_executables(),
        )
