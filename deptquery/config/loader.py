"""
Schema-driven configuration loader.

This module provides a ConfigLoader that uses the configuration schema
to automatically load, validate, and merge configuration from multiple sources.
"""

import logging
import os
import typing
from argparse import ArgumentParser, Namespace
from typing import Any, Dict, Mapping, Optional

from dotenv import load_dotenv
from pydantic import ValidationError

from ..constants import DEFAULT_DELETE_PARENT_IDS
from .schema import ConfigSchema

logger = logging.getLogger(__name__)

DOTENV_FILE = ".env.local"


class ConfigError(Exception):
    """Raised when configuration validation fails."""
    pass


def _field_extra(field_info) -> dict:
    return field_info.json_schema_extra or {}


class ConfigLoader:
    """Loads and validates configuration using a schema-driven approach."""

    @staticmethod
    def load(
        schema: type[ConfigSchema] = ConfigSchema,
        cli_args: Optional[Namespace] = None,
        overrides: Optional[Mapping[str, Any]] = None,
    ) -> ConfigSchema:
        """
        Load configuration from all sources with precedence handling.

        Loading order (lowest to highest priority):
        1. Schema defaults
        2. .env.local file (if it exists)
        3. OS environment variables
        4. Explicit overrides keyed by environment variable name
        5. CLI arguments (highest priority)

        Args:
            schema: The configuration schema class to use
            cli_args: Parsed CLI arguments (if available)
            overrides: Mapping of env var name to value (useful for tests)

        Returns:
            Validated configuration instance

        Raises:
            ConfigError: If configuration validation fails
        """
        config_dict: Dict[str, Any] = {}

        # Step 1: Load from .env.local file; never overrides the real environment
        _load_from_dotenv_file()

        # Step 2: Environment variables named in the schema
        for field_name, field_info in schema.model_fields.items():
            env_var = _field_extra(field_info).get("env_var")
            if env_var:
                env_value = os.getenv(env_var)
                if env_value is not None and env_value.strip():
                    config_dict[field_name] = env_value.strip()

        # Step 3: Explicit overrides
        if overrides:
            for field_name, field_info in schema.model_fields.items():
                env_var = _field_extra(field_info).get("env_var")
                if env_var in overrides and overrides[env_var] is not None:
                    config_dict[field_name] = _clean_value(overrides[env_var])

        # Step 4: CLI arguments
        if cli_args:
            for field_name, field_info in schema.model_fields.items():
                cli_arg = _field_extra(field_info).get("cli_arg")
                if cli_arg and getattr(cli_args, cli_arg, None) is not None:
                    config_dict[field_name] = _clean_value(getattr(cli_args, cli_arg))

        # Step 5: Create and validate the configuration
        try:
            config = schema(**config_dict)
            logger.debug(f"Configuration loaded: {config.mask()}")
            return config
        except ValidationError as e:
            errors = []
            for error in e.errors():
                loc = error.get("loc") or ()
                field_info = schema.model_fields.get(loc[0]) if loc else None
                if field_info is not None:
                    name = _field_extra(field_info).get("env_var", str(loc[0]).upper())
                else:
                    name = "configuration"
                errors.append(f"{name}: {error['msg']}")

            error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {err}" for err in errors)
            raise ConfigError(error_msg) from e

    @staticmethod
    def generate_cli_parser(
        schema: type[ConfigSchema] = ConfigSchema,
        description: str = "Query employees by department through a pooled PostgreSQL connection",
    ) -> ArgumentParser:
        """
        Generate an ArgumentParser from the configuration schema.

        Every sub-command accepts the schema-derived options so the same
        settings can be overridden whichever command is run.

        Args:
            schema: The configuration schema class
            description: Parser description

        Returns:
            Configured ArgumentParser
        """
        common = ArgumentParser(add_help=False)
        common.add_argument(
            "--verbose",
            action="store_true",
            help="Enable verbose logging (DEBUG level)",
        )
        _add_schema_arguments(common, schema)

        parser = ArgumentParser(
            description=description,
            epilog="""
Examples:
  deptquery serve --port 7000
  deptquery rowcounts --parent-id 20 --parent-id 30 --parent-id 50
  deptquery seed-demo
            """,
        )
        subparsers = parser.add_subparsers(dest="command", required=True)

        subparsers.add_parser(
            "serve",
            parents=[common],
            help="Run the HTTP server (GET /<department id>)",
        )

        rowcounts = subparsers.add_parser(
            "rowcounts",
            parents=[common],
            help="Delete child rows per parent id and report per-id row counts",
        )
        rowcounts.add_argument(
            "--parent-id",
            dest="parent_ids",
            type=int,
            action="append",
            help=(
                "Parent id to delete children for; repeat for a batch "
                f"(default: {' '.join(str(i) for i in DEFAULT_DELETE_PARENT_IDS)})"
            ),
        )
        rowcounts.add_argument(
            "--commit",
            action="store_true",
            help="Commit the deletes (default: roll back so the example is re-runnable)",
        )

        subparsers.add_parser(
            "seed-demo",
            parents=[common],
            help="Create and populate the demo tables",
        )

        return parser


def _add_schema_arguments(parser: ArgumentParser, schema: type[ConfigSchema]) -> None:
    """Add one option per schema field that declares a cli_arg."""
    for field_name, field_info in schema.model_fields.items():
        extra = _field_extra(field_info)
        cli_arg = extra.get("cli_arg")
        if not cli_arg:
            continue

        kwargs = {
            "dest": cli_arg,
            "help": field_info.description or f"Override {extra.get('env_var', field_name.upper())} env var",
            "default": None,  # Defaults come from the schema, not argparse
        }

        # Unwrap Optional[...] to the underlying type
        field_type = field_info.annotation
        if typing.get_origin(field_type) is typing.Union:
            non_none_args = [arg for arg in typing.get_args(field_type) if arg is not type(None)]
            if len(non_none_args) == 1:
                field_type = non_none_args[0]

        if field_type is int:
            kwargs["type"] = int
        elif field_type is float:
            kwargs["type"] = float

        parser.add_argument(f"--{cli_arg.replace('_', '-')}", **kwargs)


def _clean_value(value: Any) -> Any:
    """Strip strings; an explicit empty string clears the value."""
    if isinstance(value, str):
        stripped = value.strip()
        return stripped if stripped else None
    return value


def _load_from_dotenv_file() -> None:
    """Load values from the .env.local file if it exists."""
    if os.path.exists(DOTENV_FILE):
        load_dotenv(DOTENV_FILE, override=False)
        logger.debug(f"Loaded configuration from {DOTENV_FILE} file")
    else:
        logger.debug(f"{DOTENV_FILE} file not found, skipping")
