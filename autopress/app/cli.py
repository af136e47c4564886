"""Command-line interface for article generation and site management."""

from __future__ import annotations

import argparse
import getpass
import json
import sys
from pathlib import Path
from typing import Any, Callable, Sequence

from ..platforms.wordpress import WordPressClient, WordPressPublishTarget
from ..services.batch_request import BatchRequest
from ..services.errors import ConfigurationError, ValidationError
from ..services.models import BatchReport
from ..settings import AppConfig, SiteRegistry, load_config
from ..utils.file_helper import timestamped_name, write_text
from ..utils.logging import configure_logging, get_logger
from .bootstrap import build_orchestrator, build_registry

LOGGER = get_logger(__name__)

Handler = Callable[[argparse.Namespace, AppConfig], int]


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(structured=not args.log_plain)

    handler: Handler | None = getattr(args, "handler", None)
    if handler is None:
        parser.print_help(sys.stderr)
        return 1

    try:
        config = load_config(args.config)
    except FileNotFoundError as exc:
        LOGGER.error(str(exc), extra={"event": "cli.error"})
        return 2
    configure_logging(level=config.log_level, structured=not args.log_plain)

    try:
        return handler(args, config)
    except (ValidationError, ConfigurationError) as exc:
        LOGGER.error(
            str(exc),
            extra={"event": "cli.error", "command": args.command, "error_type": type(exc).__name__},
        )
        return 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="autopress", description="AI blog writer and WordPress publisher")
    parser.add_argument("--config", help="Path to configuration file", default=None)
    parser.add_argument(
        "--log-plain",
        action="store_true",
        help="Use plain-text logs instead of JSON",
    )

    subparsers = parser.add_subparsers(dest="command")

    _add_generate_command(subparsers)
    _add_sites_commands(subparsers)
    _add_key_commands(subparsers)
    _add_settings_commands(subparsers)

    return parser


def _add_generate_command(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    gen = subparsers.add_parser("generate", help="Generate articles and optionally publish them")
    gen.add_argument(
        "--topic",
        action="append",
        default=[],
        help="Article topic; repeat for a bulk run",
    )
    gen.add_argument("--topics-file", type=Path, help="File with one topic per line (bulk run)")
    gen.add_argument("--site", dest="site_id", help="Target site id")
    gen.add_argument(
        "--sites",
        nargs="+",
        metavar="SITE_ID",
        default=None,
        help="Publish every topic to each of these sites",
    )
    gen.add_argument("--image", action="store_true", help="Generate a featured image")
    gen.add_argument("--publish", action="store_true", help="Publish immediately")
    gen.add_argument("--schedule", help="ISO-8601 time to schedule the post for")
    gen.add_argument("--money-site", dest="money_site_url", help="External URL to link once")
    gen.add_argument(
        "--internal-link",
        action="store_true",
        help="Link to the target site itself instead of a money site",
    )
    gen.add_argument("--internal-path", help="Path appended to the site URL for internal links")
    gen.add_argument("--keyword", help="Anchor keyword for the link")
    gen.add_argument("--delay", type=float, default=None, help="Seconds between items")
    gen.add_argument("--output", type=Path, help="Where to write the JSON report")
    gen.add_argument(
        "--no-save-images",
        action="store_true",
        help="Do not keep generated images under the images directory",
    )
    gen.set_defaults(handler=_handle_generate)


def _add_sites_commands(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    sites_parser = subparsers.add_parser("sites", help="Manage registered WordPress sites")
    sites_sub = sites_parser.add_subparsers(dest="sites_command", required=True)

    list_parser = sites_sub.add_parser("list", help="List registered sites")
    list_parser.set_defaults(handler=_handle_sites_list)

    add_parser = sites_sub.add_parser("add", help="Register a site")
    add_parser.add_argument("--name", required=True)
    add_parser.add_argument("--url", required=True)
    add_parser.add_argument("--username", required=True)
    add_parser.add_argument("--password", help="Application password; prompted when omitted")
    add_parser.set_defaults(handler=_handle_sites_add)

    remove_parser = sites_sub.add_parser("remove", help="Delete a site")
    remove_parser.add_argument("site_id")
    remove_parser.set_defaults(handler=_handle_sites_remove)

    test_parser = sites_sub.add_parser("test", help="Check credentials against /users/me")
    test_parser.add_argument("site_id", nargs="?", help="Registered site id")
    test_parser.add_argument("--url")
    test_parser.add_argument("--username")
    test_parser.add_argument("--password")
    test_parser.set_defaults(handler=_handle_sites_test)


def _add_key_commands(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    key_parser = subparsers.add_parser("key", help="Manage the Gemini API key")
    key_sub = key_parser.add_subparsers(dest="key_command", required=True)

    set_parser = key_sub.add_parser("set", help="Store the API key")
    set_parser.add_argument("key", nargs="?", help="API key; prompted when omitted")
    set_parser.set_defaults(handler=_handle_key_set)

    status_parser = key_sub.add_parser("status", help="Show whether a key is configured")
    status_parser.set_defaults(handler=_handle_key_status)


def _add_settings_commands(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    settings_parser = subparsers.add_parser("settings", help="Back up or restore stored settings")
    settings_sub = settings_parser.add_subparsers(dest="settings_command", required=True)

    backup_parser = settings_sub.add_parser("backup", help="Print or write a settings backup")
    backup_parser.add_argument("--output", type=Path)
    backup_parser.set_defaults(handler=_handle_settings_backup)

    restore_parser = settings_sub.add_parser("restore", help="Restore settings from a backup file")
    restore_parser.add_argument("path", type=Path)
    restore_parser.set_defaults(handler=_handle_settings_restore)

    clear_parser = settings_sub.add_parser("clear", help="Remove all sites and the API key")
    clear_parser.add_argument("--yes", action="store_true", help="Confirm the deletion")
    clear_parser.set_defaults(handler=_handle_settings_clear)


# -- generate --------------------------------------------------------------


def _collect_topics(args: argparse.Namespace) -> list[str]:
    topics = [topic for topic in args.topic if topic.strip()]
    if args.topics_file:
        try:
            lines = args.topics_file.read_text(encoding="utf-8").splitlines()
        except OSError as exc:
            raise ValidationError(f"Cannot read topics file: {exc}") from exc
        topics.extend(line for line in lines if line.strip())
    return topics


def request_from_args(args: argparse.Namespace, *, default_delay: float) -> BatchRequest:
    """Translate ``generate`` arguments into a batch request payload."""
    topics = _collect_topics(args)
    bulk = len(topics) > 1 or args.topics_file is not None
    payload: dict[str, Any] = {
        "topic": topics[0] if topics and not bulk else None,
        "bulk_topics": topics if bulk else None,
        "bulk_post": bulk,
        "site_id": args.site_id,
        "selected_multisites": args.sites,
        "multisite_post": bool(args.sites),
        "generate_image": args.image,
        "auto_publish": args.publish,
        "schedule_time": args.schedule,
        "include_money_site": bool(args.money_site_url or args.internal_link),
        "is_internal_link": args.internal_link,
        "money_site_url": args.money_site_url,
        "money_site_keyword": args.keyword,
        "internal_path": args.internal_path,
        "bulk_delay": args.delay if args.delay is not None else default_delay,
    }
    return BatchRequest.from_payload(payload)


def _handle_generate(args: argparse.Namespace, config: AppConfig) -> int:
    request = request_from_args(args, default_delay=config.publish.default_delay)
    orchestrator = build_orchestrator(config, save_images=not args.no_save_images)

    LOGGER.info(
        "Generation requested",
        extra={"event": "cli.command", "command": "generate", "mode": request.mode.value},
    )
    report = orchestrator.run(request)

    output = args.output or config.paths.reports_dir / timestamped_name("report", "json")
    _write_report(report, output)
    failed = report.total_processed - sum(1 for item in report.items if item.succeeded)
    return 1 if failed else 0


def _write_report(report: BatchReport, output: Path) -> None:
    rendered = json.dumps(report.to_dict(), ensure_ascii=False, indent=2)
    write_text(output, rendered + "\n")
    print(rendered)
    LOGGER.info(
        "Report written",
        extra={"event": "cli.report", "path": str(output), "counts": report.counts()},
    )


# -- sites -----------------------------------------------------------------


def _handle_sites_list(args: argparse.Namespace, config: AppConfig) -> int:
    registry = build_registry(config)
    sites = [site.public_dict() for site in registry.list_sites()]
    print(json.dumps(sites, ensure_ascii=False, indent=2))
    return 0


def _handle_sites_add(args: argparse.Namespace, config: AppConfig) -> int:
    if not args.name.strip() or not args.url.strip() or not args.username.strip():
        raise ValidationError("Name, URL and username are required")
    password = args.password or getpass.getpass("Application password: ")
    if not password:
        raise ValidationError("Password is required")
    site = build_registry(config).add_site(
        name=args.name, url=args.url, username=args.username, password=password
    )
    print(json.dumps(site.public_dict(), ensure_ascii=False, indent=2))
    return 0


def _handle_sites_remove(args: argparse.Namespace, config: AppConfig) -> int:
    if not build_registry(config).remove_site(args.site_id):
        raise ConfigurationError(f"Unknown site id: {args.site_id}")
    print(f"Removed {args.site_id}")
    return 0


def _handle_sites_test(args: argparse.Namespace, config: AppConfig) -> int:
    if args.site_id:
        site = build_registry(config).get_site(args.site_id)
        if site is None:
            raise ConfigurationError(f"Unknown site id: {args.site_id}")
        target = WordPressPublishTarget.from_site(site, timeout=config.publish.timeout)
    else:
        if not (args.url and args.username and args.password):
            raise ValidationError("Give a site id or --url, --username and --password")
        client = WordPressClient(
            args.url, args.username, args.password, timeout=config.publish.timeout
        )
        target = WordPressPublishTarget(client)

    ok = target.test_connection()
    print(json.dumps({"site": target.site_name, "success": ok}, ensure_ascii=False))
    return 0 if ok else 1


# -- key -------------------------------------------------------------------


def _handle_key_set(args: argparse.Namespace, config: AppConfig) -> int:
    key = args.key or getpass.getpass("Gemini API key: ")
    if not key.strip():
        raise ValidationError("API key must not be empty")
    build_registry(config).set_api_key(key)
    print("API key saved")
    return 0


def _handle_key_status(args: argparse.Namespace, config: AppConfig) -> int:
    key = build_registry(config).get_api_key()
    status = {"configured": bool(key), "key": _mask(key) if key else None}
    print(json.dumps(status, ensure_ascii=False))
    return 0


def _mask(value: str) -> str:
    if len(value) <= 8:
        return "*" * len(value)
    return f"{value[:4]}...{value[-4:]}"


# -- settings --------------------------------------------------------------


def _handle_settings_backup(args: argparse.Namespace, config: AppConfig) -> int:
    backup = build_registry(config).backup()
    if args.output:
        write_text(args.output, backup + "\n")
        LOGGER.info("Backup written", extra={"event": "cli.backup", "path": str(args.output)})
    else:
        print(backup)
    return 0


def _handle_settings_restore(args: argparse.Namespace, config: AppConfig) -> int:
    try:
        raw = args.path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ValidationError(f"Cannot read backup: {exc}") from exc
    registry: SiteRegistry = build_registry(config)
    if not registry.restore(raw):
        raise ValidationError("Invalid backup file")
    print(f"Restored {len(registry.list_sites())} site(s)")
    return 0


def _handle_settings_clear(args: argparse.Namespace, config: AppConfig) -> int:
    if not args.yes:
        LOGGER.error("Refusing to clear settings without --yes", extra={"event": "cli.error"})
        return 2
    build_registry(config).clear()
    print("Settings cleared")
    return 0


__all__ = ["main", "request_from_args"]
