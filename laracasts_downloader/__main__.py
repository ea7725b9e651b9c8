#!/usr/bin/env python3
"""
Command line entry point for Laracasts Downloader.

Usage examples:
  python -m laracasts_downloader USERNAME PASSWORD [DIRECTORY]
  python -m laracasts_downloader --refresh me@example.com secret ./videos
  LARACASTS_USERNAME=... LARACASTS_PASSWORD=... laracasts-downloader
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from typing import List, Optional

from rich.logging import RichHandler

from laracasts_downloader import __version__
from laracasts_downloader.auth import Authenticator
from laracasts_downloader.catalog import Catalog
from laracasts_downloader.config import Settings
from laracasts_downloader.downloader import LessonDownloader
from laracasts_downloader.exceptions import ConfigurationError, LaracastsError
from laracasts_downloader.manifest import ManifestStore
from laracasts_downloader.progress_manager import (
    ProgressDisplay,
    console,
    print_banner,
    print_completion_summary,
)
from laracasts_downloader.session import LaracastsSession

logger = logging.getLogger("laracasts_downloader")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="laracasts-downloader",
        description="Crawl the Laracasts catalog once and download every lesson.",
    )
    parser.add_argument("username", nargs="?", help="Account email (default: $LARACASTS_USERNAME).")
    parser.add_argument("password", nargs="?", help="Account password (default: $LARACASTS_PASSWORD).")
    parser.add_argument(
        "directory",
        nargs="?",
        help="Directory to download into (default: $OUTPUT_DIR or the current directory).",
    )
    parser.add_argument(
        "--manifest",
        dest="manifest_path",
        help="Where the crawled lesson list is cached (default: lessons.txt).",
    )
    parser.add_argument("--base-url", dest="base_url", help="Site origin (default: https://laracasts.com).")
    parser.add_argument(
        "--refresh",
        action="store_true",
        help="Delete the cached lesson list and crawl the catalog again.",
    )
    parser.add_argument(
        "--no-fail-fast",
        dest="fail_fast_tags",
        action="store_false",
        default=None,
        help="Skip tag pages that fail to load instead of aborting the crawl.",
    )
    parser.add_argument("-q", "--quiet", action="store_true", help="Hide the progress bar.")
    parser.add_argument("--debug", action="store_true", default=None, help="Verbose logging.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def setup_logging(debug: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[
            RichHandler(
                console=console,
                rich_tracebacks=True,
                show_path=False,
                markup=False,
            )
        ],
        force=True,
    )
    # urllib3 is chatty at debug level and would print every connection
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def discover(session: LaracastsSession, manifest: ManifestStore, fail_fast: bool = True):
    """Crawl the catalog and cache the result, unless a cached lesson list already exists."""
    if manifest.exists():
        logger.info("Using cached lesson list %s", manifest.path)
        return

    catalog = Catalog(session, fail_fast=fail_fast)
    tags = catalog.list_tags()
    lesson_urls = catalog.resolve(tags)
    manifest.write(lesson_urls)


def run(settings: Settings, refresh: bool = False) -> int:
    manifest = ManifestStore(settings.manifest_path)

    start_time = time.time()
    with LaracastsSession(settings.base_url, timeout=settings.request_timeout) as session:
        try:
            if refresh:
                manifest.remove()
            discover(session, manifest, fail_fast=settings.fail_fast_tags)
            lesson_urls = manifest.read()
            Authenticator(session).login(settings.username, settings.password)

            downloader = LessonDownloader(
                session,
                settings.output_dir,
                progress=ProgressDisplay(enabled=settings.show_progress),
            )
            summary = downloader.download_all(lesson_urls)
        except (LaracastsError, OSError) as e:
            logger.error("%s", e, exc_info=settings.debug)
            return 1

    print_completion_summary(summary, time.time() - start_time)
    return 0


def main(argv: Optional[List[str]] = None) -> None:
    args = _build_parser().parse_args(argv)
    setup_logging(bool(args.debug))

    try:
        settings = Settings.from_env(
            username=args.username,
            password=args.password,
            output_dir=args.directory,
            manifest_path=args.manifest_path,
            base_url=args.base_url.rstrip("/") if args.base_url else None,
            fail_fast_tags=args.fail_fast_tags,
            show_progress=False if args.quiet else None,
            debug=args.debug,
        )
    except ConfigurationError as e:
        logger.error("%s", e)
        _build_parser().print_usage(sys.stderr)
        sys.exit(2)

    setup_logging(settings.debug)
    print_banner()
    sys.exit(run(settings, refresh=args.refresh))


if __name__ == "__main__":
    main()
