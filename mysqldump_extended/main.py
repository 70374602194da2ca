#!/usr/bin/env python3
"""
mysqldump-extended - CLI Entry Point
====================================
Backs up every MySQL database into separate files rather than one big dump:
- Structure, data, triggers, events and routines per database
- All user privileges as a replayable script
- Everything packed into a single tar.gz archive
"""

import argparse
import sys

import yaml

from .config import BackupSettings, ConfigLoader
from .errors import BackupError, PreconditionError
from .models import QueryBackend
from .orchestrator import BackupRunner
from .runner import CommandRunner, resolve_executables
from .utils import log_summary, setup_logging

EXIT_PRECONDITION = 1
EXIT_RUNTIME = 2


class ArgumentParser(argparse.ArgumentParser):
    """Reports usage errors with exit status 1."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(EXIT_PRECONDITION, f"Error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    # -h is the server host, so help is only available as --help
    parser = ArgumentParser(
        description='Back up each MySQL database into separate files',
        add_help=False
    )
    parser.add_argument(
        '--help',
        action='help',
        help='Show this help message and exit'
    )
    parser.add_argument(
        '-c', '--default-charset',
        dest='charset',
        help='Default character set (default: utf8)'
    )
    parser.add_argument(
        '-d', '--output-directory',
        dest='output_directory',
        help='Output directory (default: current directory)'
    )
    parser.add_argument(
        '-h', '--host',
        help='MySQL server hostname (default: localhost)'
    )
    parser.add_argument(
        '--port',
        type=int,
        help='MySQL server port (default: 3306)'
    )
    parser.add_argument(
        '-f', '--output-file',
        dest='output_file',
        help='Output archive file name (default: mysqldumps.tar.gz)'
    )
    parser.add_argument(
        '-p', '--pass',
        dest='password',
        help='MySQL password (required)'
    )
    parser.add_argument(
        '-s', '--skip-delete-previous',
        action='store_true',
        help='Do not delete previous mysqldump*.tar.gz archives'
    )
    parser.add_argument(
        '-u', '--user',
        help='MySQL username (default: mysqldump)'
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Report progress'
    )
    parser.add_argument(
        '-t', '--skip-tarballing',
        action='store_true',
        help='Keep the dump folder instead of archiving it'
    )
    parser.add_argument(
        '--abort-on-error',
        action='store_true',
        help='Stop at the first failed dump instead of continuing'
    )
    parser.add_argument(
        '--query-backend',
        choices=[backend.value for backend in QueryBackend],
        help='Run administrative queries with the mysql client or mysql-connector'
    )
    parser.add_argument(
        '--config',
        help='Path to an optional YAML configuration file'
    )
    return parser


def required_commands(settings: BackupSettings) -> list[str]:
    commands = ['mysqldump']
    if settings.query_backend is QueryBackend.CLIENT:
        commands.append('mysql')
    if settings.archive:
        commands.append('tar')
    return commands


def main(argv=None):
    """Main entry point."""
    args = build_parser().parse_args(argv)

    # Load configuration
    try:
        config = ConfigLoader(args.config)
    except FileNotFoundError:
        print(f"Error: Configuration file '{args.config}' not found", file=sys.stderr)
        sys.exit(EXIT_PRECONDITION)
    except yaml.YAMLError as e:
        print(f"Error: Invalid YAML in configuration file: {e}", file=sys.stderr)
        sys.exit(EXIT_PRECONDITION)

    # Setup logging
    log_settings = dict(config.get_logging_settings())
    if args.verbose and log_settings.get('level', 'WARNING').upper() != 'DEBUG':
        log_settings['level'] = 'INFO'
    setup_logging(log_settings)

    try:
        settings = BackupSettings.from_sources(config, args)
        runner = CommandRunner(
            resolve_executables(settings.executables, required_commands(settings))
        )
        result = BackupRunner(settings, runner).run()
    except PreconditionError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(EXIT_PRECONDITION)
    except (BackupError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(EXIT_RUNTIME)

    # recorded dump and archiving errors are reported in the summary only
    log_summary(result)
    sys.exit(0)


if __name__ == '__main__':
    main()
