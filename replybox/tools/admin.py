#!/usr/bin/env python3
"""
ReplyBox admin — activation and settings from the command line.

Subcommands:
  init-db         create tables
  activate        create tables and issue the secure token (no-op if one exists)
  set-site-id     store the site id from the ReplyBox dashboard
  show-settings   print site id and secure token

Usage:
  python -m replybox.tools.admin activate
  python -m replybox.tools.admin set-site-id abc123
"""

from __future__ import annotations

import argparse
import sys

from replybox.api_server.services import ReplyBoxServices, build_services
from replybox.config import get_settings
from replybox.replybox_logging import get_logger

logger = get_logger(__name__)


def _log(msg: str) -> None:
    print(f"[replybox] {msg}")


def cmd_init_db(services: ReplyBoxServices, args: argparse.Namespace) -> int:
    services.db.init_db()
    _log("tables created")
    return 0


def cmd_activate(services: ReplyBoxServices, args: argparse.Namespace) -> int:
    services.activate()
    _log("activated; secure token is set")
    return 0


def cmd_set_site_id(services: ReplyBoxServices, args: argparse.Namespace) -> int:
    value = services.save_site_id(args.site_id)
    if not value:
        _log("site id cleared; comments will not be replaced")
    else:
        _log(f"site id set to {value}")
    return 0


def cmd_show_settings(services: ReplyBoxServices, args: argparse.Namespace) -> int:
    snapshot = services.settings.snapshot()
    _log(f"site_id={snapshot.site_id or '-'}")
    _log(f"secure_token={snapshot.secure_token or '-'}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="replybox-admin", description="ReplyBox administration")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="Create tables").set_defaults(func=cmd_init_db)
    sub.add_parser("activate", help="Create tables and issue the secure token").set_defaults(func=cmd_activate)
    p_site = sub.add_parser("set-site-id", help="Store the ReplyBox site id")
    p_site.add_argument("site_id", help="Site id from the ReplyBox dashboard (empty string clears it)")
    p_site.set_defaults(func=cmd_set_site_id)
    sub.add_parser("show-settings", help="Print site id and secure token").set_defaults(func=cmd_show_settings)
    return parser


def main(argv: list[str] | None = None, services: ReplyBoxServices | None = None) -> int:
    args = build_parser().parse_args(argv)
    if services is None:
        services = build_services(get_settings())
    try:
        return args.func(services, args)
    except Exception as e:
        logger.exception("admin_command_failed", command=args.command, error=str(e))
        raise


if __name__ == "__main__":
    sys.exit(main())
