#!/usr/bin/env python3
"""
Command line entry point for reading project properties.

Reads the given files or URLs, resolves placeholders and prints the resulting
properties to stdout. Log records go to stderr.

Examples:
    # Flatten a YAML file and print key=value lines
    properties-reader --file config/application.yml

    # Several files, later ones overriding earlier ones, with a key prefix
    properties-reader -f defaults.properties -f local.yml --key-prefix app.

    # Seed existing properties, load a .env file first and print JSON
    properties-reader -f app.yml -D basedir=/srv/app --env-file .env --format json

    # Skip files that do not exist
    properties-reader -f optional.yml --quiet

    # Settings from a YAML file (files, urls, quiet, key_prefix, max_depth, ...)
    properties-reader --config read-properties.yml

Environment variables prefixed with PROPERTIES_READER_ (e.g.
PROPERTIES_READER_QUIET=true) provide defaults for the same settings;
unrecognised PROPERTIES_READER_ variables are reported as warnings.

Exit codes: 0 success, 1 failure while reading or resolving, 2 invalid configuration.
"""

import argparse
import json
import sys
from typing import Dict, List, Optional, TextIO

import dotenv

from .framework.builder import ReadPropertiesBuilder
from .framework.configuration import ConfigurationValidationError, ConfigurationValidator
from .infrastructure.exceptions import ConfigurationError, PropertiesReaderException
from .infrastructure.observability import LogLevel, configure_default_logging, get_logger

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIGURATION_ERROR = 2


def _parse_define(text: str) -> tuple:
    if "=" not in text:
        raise argparse.ArgumentTypeError(f"expected key=value, got '{text}'")
    key, value = text.split("=", 1)
    if not key:
        raise argparse.ArgumentTypeError(f"empty property name in '{text}'")
    return key, value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="properties-reader",
        description="Read properties and YAML files, resolve placeholders and print the result.",
        epilog="Files and URLs cannot be combined in one run."
    )
    parser.add_argument("-f", "--file", dest="files", action="append", default=None,
                        metavar="PATH", help="properties or YAML file to read (repeatable)")
    parser.add_argument("-u", "--url", dest="urls", action="append", default=None,
                        metavar="URL", help="URL or classpath: resource to read (repeatable)")
    parser.add_argument("-q", "--quiet", action="store_true", default=None,
                        help="skip resources that cannot be opened")
    parser.add_argument("--key-prefix", default=None, help="prefix added to every loaded key")
    parser.add_argument("--max-depth", type=int, default=None,
                        help="maximum YAML nesting depth")
    parser.add_argument("--classpath", action="append", default=None, metavar="DIR",
                        help="root directory for classpath: URLs (repeatable, default: sys.path)")
    parser.add_argument("-D", "--define", dest="defines", action="append", type=_parse_define,
                        default=[], metavar="KEY=VALUE",
                        help="property already present before reading (repeatable)")
    parser.add_argument("--config", default=None, metavar="PATH", help="YAML settings file")
    parser.add_argument("--env-file", default=None, metavar="PATH",
                        help="dotenv file loaded into the environment before reading")
    parser.add_argument("--format", choices=["text", "json"], default="text",
                        help="output format (default: text)")
    parser.add_argument("--log-level", choices=[level.value for level in LogLevel], default="WARNING",
                        help="log level (default: WARNING)")
    parser.add_argument("--log-format", choices=["json", "text"], default="text",
                        help="log record format (default: text)")
    return parser


def _builder_from_args(args: argparse.Namespace) -> ReadPropertiesBuilder:
    builder = ReadPropertiesBuilder().add_environment_source()
    if args.config:
        builder.add_yaml_source(args.config)

    for path in args.files or []:
        builder.add_file(path)
    for url in args.urls or []:
        builder.add_url(url)
    if args.quiet is not None:
        builder.quiet(args.quiet)
    if args.key_prefix is not None:
        builder.key_prefix(args.key_prefix)
    if args.max_depth is not None:
        builder.max_depth(args.max_depth)
    if args.classpath:
        builder.classpath(args.classpath)
    return builder


def write_properties(properties: Dict[str, str], output_format: str, stream: TextIO) -> None:
    if output_format == "json":
        json.dump(properties, stream, indent=2, ensure_ascii=False)
        stream.write("\n")
        return
    for key, value in properties.items():
        stream.write(f"{key}={value}\n")


def main(argv: Optional[List[str]] = None, stdout: Optional[TextIO] = None) -> int:
    args = build_parser().parse_args(argv)
    stdout = stdout or sys.stdout

    configure_default_logging(
        level=LogLevel(args.log_level),
        use_json=args.log_format == "json"
    )

    if args.env_file:
        if not dotenv.load_dotenv(args.env_file, override=False):
            logger.warning("No variables loaded from env file", extra={'env_file': args.env_file})

    for warning in ConfigurationValidator.validate_environment_variables():
        logger.warning(warning)

    store: Dict[str, str] = dict(args.defines)

    try:
        goal = _builder_from_args(args).build(store)
        properties = goal.execute()
    except ConfigurationError as e:
        detail = e.get_detailed_message() if isinstance(e, ConfigurationValidationError) else e.message
        logger.error(f"Invalid configuration: {detail}", exc_info=e)
        return EXIT_CONFIGURATION_ERROR
    except PropertiesReaderException as e:
        logger.error(f"Reading properties failed: {e.message}", exc_info=e)
        return EXIT_FAILURE

    write_properties(dict(properties), args.format, stdout)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
