"""Launcher entrypoint.

Responsibilities (and nothing more):
- Configure structlog
- Split the launcher argument into crate and symbol queries
- Create AppState via the ``open_state`` context manager
- Write the Alfred item list to stdout, or clear the cache
"""

from __future__ import annotations

import asyncio
import logging
import sys
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, TextIO

import structlog

from docsrs_lookup import __version__
from docsrs_lookup.cache import open_cache
from docsrs_lookup.config import Settings
from docsrs_lookup.errors import DocsRsError
from docsrs_lookup.fetcher import Fetcher, build_http_client
from docsrs_lookup.lookup import clear_cache, suggest
from docsrs_lookup.output import write_items
from docsrs_lookup.state import AppState

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Sequence

log = structlog.get_logger()


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(settings: Settings) -> None:
    """Configure structlog. Called once at startup before any log statements."""
    log_level = logging.getLevelNamesMapping()[settings.logging.level]

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if settings.logging.format == "json":
        processors = [*shared_processors, structlog.processors.JSONRenderer()]
    else:
        processors = [*shared_processors, structlog.dev.ConsoleRenderer(colors=False)]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        # stdout carries the Alfred item list; logs go to stderr
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


# ---------------------------------------------------------------------------
# Arguments
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Invocation:
    crate_name: str
    symbol_name: str = ""
    clear: bool = False


def parse_args(argv: Sequence[str], clear_flag: str = "-f") -> Invocation | None:
    """Interpret ``argv`` (without the program name).

    ``argv[0]`` is Alfred's free-text query, split on whitespace into crate
    and symbol; ``argv[1] == clear_flag`` requests a cache clear. Returns
    None when there is nothing to do.
    """
    if not argv:
        return None
    clear = len(argv) > 1 and argv[1] == clear_flag
    tokens = argv[0].split()
    if not tokens and not clear:
        return None
    crate_name = tokens[0] if tokens else ""
    symbol_name = tokens[1] if len(tokens) > 1 else ""
    return Invocation(crate_name=crate_name, symbol_name=symbol_name, clear=clear)


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------


@asynccontextmanager
async def open_state(settings: Settings) -> AsyncIterator[AppState]:
    """Own the cache connection and HTTP client for one process run."""
    async with open_cache(settings.cache.db_path) as cache:
        async with build_http_client(settings.fetcher) as http_client:
            fetcher = Fetcher(http_client, max_redirects=settings.fetcher.max_redirects)
            yield AppState(settings=settings, cache=cache, fetcher=fetcher)


async def run(invocation: Invocation, settings: Settings, stdout: TextIO) -> None:
    log.info(
        "lookup_starting",
        version=__version__,
        crate_name=invocation.crate_name,
        symbol_name=invocation.symbol_name,
        clear=invocation.clear,
        cache_path=settings.cache.db_path,
    )
    async with open_state(settings) as state:
        if invocation.clear:
            await clear_cache(state)
            return
        items = await suggest(state, invocation.crate_name, invocation.symbol_name)
        write_items(items, stdout)


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------


def main(argv: Sequence[str] | None = None) -> int:
    settings = Settings()
    _setup_logging(settings)

    invocation = parse_args(sys.argv[1:] if argv is None else argv, settings.clear_flag)
    if invocation is None:
        return 0

    try:
        asyncio.run(run(invocation, settings, sys.stdout))
    except DocsRsError as exc:
        log.error(
            "lookup_failed",
            code=exc.code,
            message=exc.message,
            suggestion=exc.suggestion,
        )
        return 1
    except Exception:
        log.error("lookup_unexpected_error", exc_info=True)
        raise
    return 0


if __name__ == "__main__":
    sys.exit(main())
