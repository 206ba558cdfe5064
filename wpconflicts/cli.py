"""Command-line interface.

Examples::

    $ wpconflicts gen --production
    $ wpconflicts gen --scanner --base composer.base.json
    $ wpconflicts gen --production --ignore UUID1 --ignore CVE-2099-0001
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, Sequence

from pydantic import ValidationError

from . import __version__
from .composer import write_document
from .config import GeneratorConfig, find_config, load_config
from .downloaders import FEEDS, FeedClient
from .errors import ConfigurationError, WPConflictsError
from .generator import Generator
from .logging_config import setup_logging
from .searchers import default_searcher

CONNECT_TIMEOUT = 10


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wpconflicts",
        description="Generate Composer conflicts from WordPress vulnerability data feeds.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser(
        "gen",
        help="Generate composer conflicts from a vulnerability data feed",
        description="Generate composer conflicts from a vulnerability data feed.",
    )
    feed = gen.add_mutually_exclusive_group()
    feed.add_argument("--production", action="store_const", const="production", dest="feed",
                      help="Generate from the Wordfence production feed")
    feed.add_argument("--scanner", action="store_const", const="scanner", dest="feed",
                      help="Generate from the Wordfence scanner feed")
    gen.add_argument("--url", help="Feed URL, overriding the feed selection")
    gen.add_argument("--plugin-vendor", action="append", dest="plugin_vendors", metavar="PREFIX",
                     help="Vendor prefix for plugin packages (repeatable, default: wpackagist-plugin)")
    gen.add_argument("--theme-vendor", action="append", dest="theme_vendors", metavar="PREFIX",
                     help="Vendor prefix for theme packages (repeatable, default: wpackagist-theme)")
    gen.add_argument("--core-package", action="append", dest="core_packages", metavar="NAME",
                     help="Package name publishing WordPress core (repeatable)")
    gen.add_argument("-i", "--ignore", action="append", metavar="ID",
                     help="CVE or record id to ignore (repeatable, replaces the defaults)")
    gen.add_argument("-b", "--base", type=Path, help="Base composer.json to merge")
    gen.add_argument("-c", "--config", type=Path, help="Config file (YAML or JSON)")
    gen.add_argument("-o", "--output", type=Path, help="Write the document here instead of stdout")
    gen.add_argument("--timeout", type=float, help="Read timeout in seconds")
    gen.add_argument("--retries", type=int, help="Extra fetch attempts after a failure")
    gen.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    gen.set_defaults(func=cmd_gen)

    return parser


def resolve_config(args: argparse.Namespace) -> GeneratorConfig:
    """Merge the config file (explicit or discovered) with CLI overrides.

    Raises:
        ConfigurationError: If the file or an override is invalid.
    """
    path = args.config or find_config()
    cfg = load_config(path) if path else GeneratorConfig()

    overrides: dict[str, Any] = {}
    for key in (
        "feed",
        "url",
        "plugin_vendors",
        "theme_vendors",
        "core_packages",
        "ignore",
        "base",
        "timeout",
        "retries",
    ):
        value = getattr(args, key, None)
        if value is not None:
            overrides[key] = value

    # A feed flag outranks a url from the config file.
    if getattr(args, "feed", None) and not getattr(args, "url", None):
        overrides["url"] = None

    if not overrides:
        return cfg

    try:
        return GeneratorConfig.model_validate({**cfg.model_dump(), **overrides})
    except ValidationError as e:
        raise ConfigurationError(f"invalid option: {e}") from e


def read_base(path: Path | None) -> bytes:
    if path is None:
        return b"{}"
    return path.read_bytes()


def cmd_gen(args: argparse.Namespace, parser: argparse.ArgumentParser) -> int:
    try:
        cfg = resolve_config(args)
    except WPConflictsError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not cfg.url and not cfg.feed:
        parser.error("missing feed selection. Exactly one of --production or --scanner is required")

    url = cfg.url or FEEDS[cfg.feed]

    try:
        base = read_base(cfg.base)
    except OSError as e:
        print(f"Error: cannot read base document: {e}", file=sys.stderr)
        return 1

    client = FeedClient(url, timeout=(CONNECT_TIMEOUT, cfg.timeout), retries=cfg.retries)
    searcher = default_searcher(cfg.plugin_vendors, cfg.theme_vendors, cfg.core_packages)

    try:
        doc = Generator(client, searcher).generate(cfg.ignore)
        out = doc.merge(base)
    except WPConflictsError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.output:
        write_document(args.output, out)
    else:
        sys.stdout.write(out.decode("utf-8"))
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(verbose=getattr(args, "verbose", False))
    return args.func(args, parser)


if __name__ == "__main__":
    raise SystemExit(main())
