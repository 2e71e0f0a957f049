"""
CLI main application module.

This module contains the main entry point and the flow of each command:
running the HTTP server, the batched delete with row counts, and seeding
the demo schema.
"""

import asyncio
import json
import logging
import sys
from argparse import Namespace
from typing import List, Optional, Sequence, Tuple

from ..constants import (
    DEFAULT_DELETE_PARENT_IDS,
    EXIT_CONFIG_ERROR,
    EXIT_INTERRUPTED,
    EXIT_STARTUP_ERROR,
    EXIT_STATEMENT_ERROR,
    EXIT_SUCCESS,
    EXIT_UNEXPECTED_ERROR,
)

from ..config import ConfigError, ConfigLoader, ConfigSchema

from ..core import DEFAULT_SIGNALS, ShutdownCoordinator

from ..database import (
    DatabasePool,
    close_db_connection_pool,
    create_db_connection_pool,
    delete_children_with_rowcounts,
    pool_config_from_settings,
    seed_demo_schema,
)

from ..exceptions import ExecError, ServerStartError
from ..models import PoolConfig
from ..utils import setup_logging
from ..web import DepartmentServer

from .parser import create_argument_parser

logger = logging.getLogger(__name__)


async def _start_service(
    settings: ConfigSchema, pool_config: PoolConfig
) -> Optional[Tuple[DatabasePool, DepartmentServer]]:
    """Open the pool and start the HTTP server; None if either fails."""
    try:
        pool = await create_db_connection_pool(pool_config)
    except Exception as e:
        logger.error(f"Failed to initialize database connection pool: {e}")
        return None

    server = DepartmentServer(pool, host=settings.http_host, port=settings.http_port)
    try:
        await server.start()
    except ServerStartError:
        await close_db_connection_pool(pool)
        return None
    except asyncio.CancelledError:
        await server.stop()
        await close_db_connection_pool(pool)
        raise
    return pool, server


async def run_server(settings: ConfigSchema, pool_config: PoolConfig, args: Namespace) -> int:
    """Serve department lookups until SIGINT or SIGTERM."""
    loop = asyncio.get_running_loop()
    startup_task = asyncio.current_task()
    interrupted: List[str] = []

    def interrupt_startup(signal_name: str) -> None:
        if not interrupted:
            logger.info(f"Received {signal_name} during startup, stopping")
            startup_task.cancel()
        interrupted.append(signal_name)

    for sig in DEFAULT_SIGNALS:
        loop.add_signal_handler(sig, interrupt_startup, sig.name)

    started = None
    try:
        started = await _start_service(settings, pool_config)
    except asyncio.CancelledError:
        if not interrupted:
            raise
        logger.info("Startup interrupted, pool closed")
        return EXIT_SUCCESS
    finally:
        if started is None:
            for sig in DEFAULT_SIGNALS:
                loop.remove_signal_handler(sig)

    if started is None:
        return EXIT_STARTUP_ERROR

    pool, server = started
    coordinator = ShutdownCoordinator(
        pool,
        grace_period=settings.shutdown_grace_period,
        server=server,
    )
    # Replaces the startup handlers with no window in between
    coordinator.install_signal_handlers()
    try:
        await coordinator.wait_stopped()
    finally:
        coordinator.remove_signal_handlers()

    if coordinator.forced:
        logger.info("Pool force-closed after grace period")
    else:
        logger.info("Pool closed")
    return EXIT_SUCCESS


async def run_rowcounts(settings: ConfigSchema, pool_config: PoolConfig, args: Namespace) -> int:
    """Run the batched delete and print the per-parent row counts."""
    parent_ids = args.parent_ids or list(DEFAULT_DELETE_PARENT_IDS)

    try:
        pool = await create_db_connection_pool(pool_config)
    except Exception as e:
        logger.error(f"Failed to initialize database connection pool: {e}")
        return EXIT_STARTUP_ERROR

    try:
        result = await delete_children_with_rowcounts(pool, parent_ids, commit=args.commit)
    except ExecError as e:
        logger.error(f"Batch delete failed: {e}")
        return EXIT_STATEMENT_ERROR
    finally:
        await close_db_connection_pool(pool)

    payload = {
        "parent_ids": parent_ids,
        "rows_affected": result.rows_affected,
        "row_counts": list(result.row_counts or ()),
        "committed": args.commit,
    }
    print(f"Result is: {json.dumps(payload)}")
    return EXIT_SUCCESS


async def run_seed_demo(settings: ConfigSchema, pool_config: PoolConfig, args: Namespace) -> int:
    """Create and populate the demo tables."""
    try:
        pool = await create_db_connection_pool(pool_config)
    except Exception as e:
        logger.error(f"Failed to initialize database connection pool: {e}")
        return EXIT_STARTUP_ERROR

    try:
        await seed_demo_schema(pool)
    except ExecError as e:
        logger.error(f"Seeding demo schema failed: {e}")
        return EXIT_STATEMENT_ERROR
    finally:
        await close_db_connection_pool(pool)

    return EXIT_SUCCESS


COMMANDS = {
    "serve": run_server,
    "rowcounts": run_rowcounts,
    "seed-demo": run_seed_demo,
}


def main(argv: Optional[Sequence[str]] = None):
    """Main entry point for the script."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    setup_logging(verbose=args.verbose)

    try:
        settings = ConfigLoader.load(cli_args=args)
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(EXIT_CONFIG_ERROR)

    pool_config = pool_config_from_settings(settings)
    if pool_config is None:
        logger.error("Invalid database pool configuration")
        sys.exit(EXIT_CONFIG_ERROR)

    command = COMMANDS[args.command]
    try:
        exit_code = asyncio.run(command(settings, pool_config, args))
    except KeyboardInterrupt:
        logger.warning("Interrupted by user (Ctrl+C)")
        sys.exit(EXIT_INTERRUPTED)
    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        sys.exit(EXIT_UNEXPECTED_ERROR)

    if exit_code != EXIT_SUCCESS:
        sys.exit(exit_code)
