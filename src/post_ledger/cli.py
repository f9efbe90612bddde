"""Operator command line for the ledger.

Every subcommand maps onto one registry operation and prints its result as
JSON. Rejections are reported on stderr with exit status 1.
"""
from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Sequence

from pydantic import BaseModel

from post_ledger.core.errors import RegistryError
from post_ledger.core.logging import configure_logging
from post_ledger.core.settings import settings
from post_ledger.db.session import SessionLocal, create_tables
from post_ledger.services.registry import Registry, get_registry


def _emit(result: object) -> None:
    if isinstance(result, BaseModel):
        print(result.model_dump_json())
    elif isinstance(result, list) and all(isinstance(item, BaseModel) for item in result):
        print(json.dumps([item.model_dump(mode="json") for item in result]))
    else:
        print(json.dumps(result))


def _cmd_init(args: argparse.Namespace) -> object:
    create_tables()
    registry = Registry.deploy(SessionLocal, args.owner)
    return {"owner": registry.owner}


def _cmd_register(args: argparse.Namespace) -> object:
    return get_registry().register_user(args.caller, args.username, args.bio, args.image_ref)


def _cmd_post(args: argparse.Namespace) -> object:
    post_id = get_registry().create_post(args.caller, args.title, args.content, args.content_ref)
    return {"post_id": post_id}


def _cmd_like(args: argparse.Namespace) -> object:
    return {"post_id": args.post_id, "state": get_registry().toggle_like(args.caller, args.post_id).value}


def _cmd_deactivate(args: argparse.Namespace) -> object:
    get_registry().deactivate_post(args.caller, args.post_id)
    return {"post_id": args.post_id, "active": False}


def _cmd_update_profile(args: argparse.Namespace) -> object:
    return get_registry().update_profile(args.caller, args.bio, args.image_ref)


def _cmd_show_post(args: argparse.Namespace) -> object:
    return get_registry().get_post(args.post_id)


def _cmd_show_user(args: argparse.Namespace) -> object:
    return get_registry().get_user_profile(args.identity)


def _cmd_user_posts(args: argparse.Namespace) -> object:
    return get_registry().get_user_posts(args.identity)


def _cmd_stats(args: argparse.Namespace) -> object:
    return get_registry().get_platform_stats()


def _cmd_notifications(args: argparse.Namespace) -> object:
    return get_registry().get_notifications(after_seq=args.after, limit=args.limit)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="post-ledger", description=f"{settings.app_name} operator tool")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    sub = parser.add_subparsers(dest="command", required=True)

    init = sub.add_parser("init", help="Create tables and deploy the registry")
    init.add_argument("--owner", default=settings.registry_owner)
    init.set_defaults(handler=_cmd_init)

    register = sub.add_parser("register", help="Register the caller's profile")
    register.add_argument("--caller", required=True)
    register.add_argument("username")
    register.add_argument("--bio", default="")
    register.add_argument("--image-ref", default="")
    register.set_defaults(handler=_cmd_register)

    post = sub.add_parser("post", help="Publish a post")
    post.add_argument("--caller", required=True)
    post.add_argument("title")
    post.add_argument("content")
    post.add_argument("--content-ref", default="")
    post.set_defaults(handler=_cmd_post)

    like = sub.add_parser("like", help="Toggle the caller's like on a post")
    like.add_argument("--caller", required=True)
    like.add_argument("post_id", type=int)
    like.set_defaults(handler=_cmd_like)

    deactivate = sub.add_parser("deactivate", help="Deactivate a post")
    deactivate.add_argument("--caller", required=True)
    deactivate.add_argument("post_id", type=int)
    deactivate.set_defaults(handler=_cmd_deactivate)

    update = sub.add_parser("update-profile", help="Replace bio and profile image reference")
    update.add_argument("--caller", required=True)
    update.add_argument("--bio", default="")
    update.add_argument("--image-ref", default="")
    update.set_defaults(handler=_cmd_update_profile)

    show_post = sub.add_parser("show-post", help="Show an active post")
    show_post.add_argument("post_id", type=int)
    show_post.set_defaults(handler=_cmd_show_post)

    show_user = sub.add_parser("show-user", help="Show a registered profile")
    show_user.add_argument("identity")
    show_user.set_defaults(handler=_cmd_show_user)

    user_posts = sub.add_parser("user-posts", help="List post ids authored by an identity")
    user_posts.add_argument("identity")
    user_posts.set_defaults(handler=_cmd_user_posts)

    stats = sub.add_parser("stats", help="Show platform totals")
    stats.set_defaults(handler=_cmd_stats)

    notifications = sub.add_parser("notifications", help="Dump the notification log")
    notifications.add_argument("--after", type=int, default=0)
    notifications.add_argument("--limit", type=int, default=None)
    notifications.set_defaults(handler=_cmd_notifications)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    try:
        result = args.handler(args)
    except RegistryError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    _emit(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
