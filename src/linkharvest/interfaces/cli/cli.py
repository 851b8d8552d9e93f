from __future__ import annotations

import argparse
import asyncio
import json
import sys
from collections.abc import Iterable
from pathlib import Path
from typing import Any, TextIO
from urllib.parse import urlsplit

import httpx
import structlog

from linkharvest.application.use_cases import PushLinksUseCase, ScanPageUseCase
from linkharvest.domain.entities import Aria2Config, LinkRecord, ScanContext, ScanResult
from linkharvest.domain.exceptions import LinkHarvestError
from linkharvest.domain.rules import SiteRule
from linkharvest.infrastructure.common import filter_links, split_keywords
from linkharvest.infrastructure.config import AppConfig, load_config
from linkharvest.infrastructure.crawling import HttpxPageFetcher
from linkharvest.infrastructure.extraction import LinkExtractor
from linkharvest.infrastructure.logging.setup import configure_logging
from linkharvest.infrastructure.rpc import Aria2RpcClient
from linkharvest.infrastructure.rules import BUILTIN_RULES, load_rules_file, preset_rules

log = structlog.get_logger(__name__)


def _parse_args(argv: Iterable[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="linkharvest",
        description="Extract magnet/torrent/download links from pages and push them to aria2.",
    )

    # Config wiring flags (no business logic)
    parser.add_argument("--config", default=None, help="Path to YAML config file.")
    parser.add_argument("--dotenv", default=None, help="Path to .env file.")
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override log level.",
    )
    parser.add_argument(
        "--log-format",
        default=None,
        choices=["json", "console"],
        help="Override log format.",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    scan = sub.add_parser("scan", help="Scan a page for downloadable links.")
    scan.add_argument("url", help="Page URL (used for rule matching and href resolution).")
    scan.add_argument("--html", default=None, help="Read the page from FILE instead of fetching it.")
    _add_rule_args(scan)
    scan.add_argument("--json", action="store_true", help="Print the scan result as JSON.")
    scan.add_argument("--keywords", default="", help="Keep links containing all of these keywords.")
    scan.add_argument("--any-keywords", default="", help="Keep links containing any of these keywords.")
    scan.add_argument("--exclude", default="", help="Drop links containing any of these keywords.")

    push = sub.add_parser("push", help="Push links to aria2.")
    push.add_argument(
        "input",
        nargs="?",
        default="-",
        help="JSON file with links, URLs or a scan result; one URL per line also works ('-' = stdin).",
    )
    push.add_argument("--endpoint", default=None, help="Override aria2 RPC endpoint.")
    push.add_argument("--token", default=None, help="Override aria2 RPC secret.")
    push.add_argument("--dir", default=None, help="Override download directory.")

    rules = sub.add_parser("rules", help="Validate and list rules.")
    _add_rule_args(rules)

    return parser.parse_args(argv)


def _add_rule_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--rules", default=None, help="YAML/JSON file with custom rules.")
    parser.add_argument(
        "--presets",
        action="store_true",
        help="Append the bundled preset rules after the custom rules.",
    )


# ----------------------------------------------------------------------
# Helpers
# ----------------------------------------------------------------------


def _custom_rules(args: argparse.Namespace, config: AppConfig) -> list[SiteRule]:
    rules_file = Path(args.rules) if args.rules else config.rules_file
    rules: list[SiteRule] = []
    if rules_file is not None:
        rules.extend(
            load_rules_file(rules_file, default_follow_limit=config.follow_default_limit)
        )
    if args.presets:
        rules.extend(preset_rules())
    return rules


def _read_input(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def parse_push_input(text: str) -> list[LinkRecord]:
    """Links from JSON (records, URLs or a scan result) or plain URL lines."""
    try:
        data: Any = json.loads(text)
    except json.JSONDecodeError:
        data = [line.strip() for line in text.splitlines() if line.strip()]

    if isinstance(data, dict):
        data = data.get("links", [])
    if not isinstance(data, list):
        raise ValueError("push input must be a list of links or URLs")

    links: list[LinkRecord] = []
    for item in data:
        if isinstance(item, str):
            url = item.strip()
            if url:
                links.append(LinkRecord(url=url, title=url, source_host=""))
        elif isinstance(item, dict):
            links.append(LinkRecord.from_dict(item))
        else:
            raise ValueError(f"unsupported push entry: {item!r}")
    return links


def _print_scan(result: ScanResult, out: TextIO) -> None:
    out.write(f"# {result.rule_name} ({result.rule_id}): {result.count} link(s)\n")
    for link in result.links:
        stats = ""
        if link.seeders is not None or link.leechers is not None:
            seeders = "-" if link.seeders is None else link.seeders
            leechers = "-" if link.leechers is None else link.leechers
            stats = f"  [S:{seeders} L:{leechers}]"
        size = f"  {link.size}" if link.size else ""
        out.write(f"{link.title}{stats}{size}\n  {link.url}\n")


# ----------------------------------------------------------------------
# Commands
# ----------------------------------------------------------------------


async def _cmd_scan(args: argparse.Namespace, config: AppConfig) -> int:
    host = urlsplit(args.url).hostname or ""
    context = ScanContext(host=host, url=args.url)
    custom_rules = _custom_rules(args, config)

    async with HttpxPageFetcher(
        timeout_seconds=config.http_timeout_seconds,
        follow_redirects=config.http_follow_redirects,
        user_agent=config.http_user_agent,
        cookies=config.http_cookies,
    ) as fetcher:
        if args.html:
            html = Path(args.html).read_text(encoding="utf-8")
        else:
            html = await fetcher.fetch(args.url)

        use_case = ScanPageUseCase(
            extractor=LinkExtractor(config.download_keywords),
            fetcher=fetcher,
            builtin_rules=BUILTIN_RULES,
            batch_size=config.follow_batch_size,
        )
        result = await use_case.execute(html, context, custom_rules)

    result.links = filter_links(
        result.links,
        include_all=split_keywords(args.keywords),
        include_any=split_keywords(args.any_keywords),
        exclude=split_keywords(args.exclude),
    )

    if args.json:
        json.dump(result.to_dict(), sys.stdout, ensure_ascii=False, indent=2)
        sys.stdout.write("\n")
    else:
        _print_scan(result, sys.stdout)
    return 0


async def _cmd_push(args: argparse.Namespace, config: AppConfig) -> int:
    links = parse_push_input(_read_input(args.input))
    aria2 = config.to_aria2_config()
    target = Aria2Config(
        endpoint=args.endpoint or aria2.endpoint,
        token=args.token if args.token is not None else aria2.token,
        dir=args.dir if args.dir is not None else aria2.dir,
    )

    async with Aria2RpcClient(timeout_seconds=config.http_timeout_seconds) as rpc:
        outcome = await PushLinksUseCase(rpc).execute(links, target)

    json.dump(outcome.to_dict(), sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")
    return 0


def _cmd_rules(args: argparse.Namespace, config: AppConfig) -> int:
    custom = _custom_rules(args, config)
    for rule in custom:
        state = "enabled" if rule.enabled else "disabled"
        follow = " follow" if rule.is_follow_rule else ""
        sys.stdout.write(f"custom:{rule.id}\t{rule.mode}{follow}\t{state}\t{rule.name}\n")
    for rule in BUILTIN_RULES:
        sys.stdout.write(f"{rule.id}\t{rule.mode}\tbuiltin\t{rule.name}\n")
    return 0


def start(argv: Iterable[str] | None = None) -> int:
    """
    Process entrypoint.

    Loads config exactly once, configures logging, then dispatches the
    subcommand.  Returns the process exit code.
    """
    if argv is None:
        argv = sys.argv[1:]

    args = _parse_args(argv)

    cli_overrides: dict[str, Any] = {}
    if args.log_level:
        cli_overrides["log_level"] = args.log_level
    if args.log_format:
        cli_overrides["log_format"] = args.log_format

    try:
        config = load_config(
            config_path=Path(args.config) if args.config else None,
            dotenv_path=Path(args.dotenv) if args.dotenv else None,
            cli_overrides=cli_overrides,
        )
    except (FileNotFoundError, ValueError) as e:
        sys.stderr.write(f"linkharvest: invalid configuration: {e}\n")
        return 1

    configure_logging(config)

    try:
        if args.command == "scan":
            return asyncio.run(_cmd_scan(args, config))
        if args.command == "push":
            return asyncio.run(_cmd_push(args, config))
        return _cmd_rules(args, config)
    except (LinkHarvestError, httpx.HTTPError, OSError, ValueError) as e:
        log.error(
            "command_failed",
            command=args.command,
            error_type=type(e).__name__,
            error=str(e),
        )
        return 1


def main() -> None:
    raise SystemExit(start())


if __name__ == "__main__":
    main()
