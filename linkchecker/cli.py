"""Command-line interface for the link checker."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import shutil
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

from .checker import check_links_async
from .cli_config import CONFIG_DIR, CONFIG_ENV_FILE, load_config
from .cli_output import format_summary, print_progress
from .cli_parsers import parse_check_args
from .config import DEFAULT_TARGET_URL, CheckerConfig
from .errors import LinkCheckError
from .report import report_to_dict, write_report

EXIT_OK = 0
EXIT_BROKEN_LINKS = 1
EXIT_FATAL = 2
EXIT_INTERRUPTED = 130


def _load_config() -> None:
    """Load .env from the working directory or ~/.config/linkchecker."""
    load_config(
        config_dir=CONFIG_DIR,
        config_env_file=CONFIG_ENV_FILE,
        cwd=Path.cwd(),
        load_env=load_dotenv,
        copy_file=shutil.copy,
    )


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
    )


def _resolve_url(args: argparse.Namespace) -> str:
    return args.url or os.getenv("LINKCHECK_URL") or DEFAULT_TARGET_URL


def _build_config(args: argparse.Namespace) -> CheckerConfig:
    """Environment defaults, overridden by explicit command-line flags."""
    config = CheckerConfig.from_env()
    overrides: Dict[str, Any] = {}
    if args.report:
        overrides["report_path"] = args.report
    if args.screenshots:
        overrides["screenshot_dir"] = args.screenshots
    if args.timeout is not None:
        if args.timeout <= 0:
            raise ValueError("--timeout must be a positive number of milliseconds")
        overrides["probe_timeout_ms"] = args.timeout
    if args.content_selector:
        overrides["content_selector"] = args.content_selector
    if args.exclude:
        overrides["excluded_selectors"] = list(args.exclude)
    if args.headed:
        overrides["headless"] = False
    if args.dismiss_popups:
        overrides["dismiss_popups"] = True
    if args.no_screenshots:
        overrides["capture_screenshots"] = False
    return replace(config, **overrides) if overrides else config


async def _run_check_async(args: argparse.Namespace) -> int:
    """Main async entry point for linkcheck."""
    url = _resolve_url(args)
    config = _build_config(args)

    if not args.json_output:
        print(f"Navigating to: {url}")

    report = await check_links_async(
        url,
        config=config,
        on_result=None if args.json_output else print_progress,
    )

    report_path = write_report(report, config.report_path, origin_url=url)

    if args.json_output:
        print(json.dumps(report_to_dict(report, url), indent=2, ensure_ascii=False))
    else:
        print(format_summary(report))
        print(f"\n\U0001f4c4 Full report saved to: {report_path}")
        if config.capture_screenshots:
            print(f"\U0001f4c1 Screenshots saved to: {config.screenshot_dir}/")

    return EXIT_BROKEN_LINKS if report.broken else EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point for the linkcheck command."""
    args = parse_check_args(argv)
    _load_config()
    _setup_logging(args.verbose)

    try:
        return asyncio.run(_run_check_async(args))
    except KeyboardInterrupt:
        logging.info("Interrupted")
        return EXIT_INTERRUPTED
    except LinkCheckError as exc:
        logging.error("%s", exc)
        return EXIT_FATAL
    except Exception as exc:
        logging.error("Error: %s", exc)
        if args.verbose:
            logging.exception("Full traceback:")
        return EXIT_FATAL


if __name__ == "__main__":
    sys.exit(main())
