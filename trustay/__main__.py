"""Command line entry point: browse Trustay listings through the stores."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any


def _dump(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, indent=2, default=str)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="trustay",
        description="Trustay client - query the rental marketplace API",
    )
    parser.add_argument("--api-url", help="Backend base URL (overrides TRUSTAY_API_URL)")
    parser.add_argument("--token", help="Bearer token for authenticated commands")
    sub = parser.add_subparsers(dest="command", required=True)

    rooms = sub.add_parser("rooms", help="Search room listings")
    rooms.add_argument("--search", "-s", default=None, help="Search term")
    rooms.add_argument("--page", type=int, default=1, help="First page to load")
    rooms.add_argument("--pages", type=int, default=1, help="Number of pages to accumulate")
    rooms.add_argument("--limit", type=int, default=None, help="Page size")

    room = sub.add_parser("room", help="Show one room by slug")
    room.add_argument("slug")

    posts = sub.add_parser("my-posts", help="List your room-seeking posts")
    posts.add_argument("--page", type=int, default=1)
    posts.add_argument("--limit", type=int, default=None)
    return parser


async def _run_rooms(stores, args) -> int:
    params: dict[str, Any] = {"search": args.search, "page": args.page}
    if args.limit:
        params["limit"] = args.limit
    await stores.rooms.search_rooms(params)
    for _ in range(max(0, args.pages - 1)):
        if stores.rooms.search.error or not await stores.rooms.load_more():
            break
    if stores.rooms.search.error:
        print(stores.rooms.search.error, file=sys.stderr)
        return 1
    meta = stores.rooms.search_pagination
    print(
        _dump(
            {
                "meta": meta.model_dump(by_alias=True) if meta else None,
                "rooms": [room.model_dump(mode="json", by_alias=True) for room in stores.rooms.search_results],
            }
        )
    )
    return 0


async def _run_room(stores, args) -> int:
    await stores.rooms.load_room_detail(args.slug)
    if stores.rooms.detail.error:
        print(stores.rooms.detail.error, file=sys.stderr)
        return 1
    print(_dump(stores.rooms.current_room.model_dump(mode="json", by_alias=True)))
    return 0


async def _run_my_posts(stores, args) -> int:
    params: dict[str, Any] = {"page": args.page}
    if args.limit:
        params["limit"] = args.limit
    await stores.room_seeking.load_user_posts(params, force=True)
    if stores.room_seeking.user_posts.error:
        print(stores.room_seeking.user_posts.error, file=sys.stderr)
        return 1
    print(_dump([post.model_dump(mode="json", by_alias=True) for post in stores.room_seeking.posts]))
    return 0


_COMMANDS = {
    "rooms": _run_rooms,
    "room": _run_room,
    "my-posts": _run_my_posts,
}


async def _run(args) -> int:
    from trustay.app import build_stores
    from trustay.config import get_settings, update_runtime_overrides

    update_runtime_overrides({"api_base_url": args.api_url, "access_token": args.token})
    async with build_stores(get_settings(), configure_logging=True) as stores:
        return await _COMMANDS[args.command](stores, args)


def main(argv=None) -> int:
    args = _build_parser().parse_args(argv)
    return asyncio.run(_run(args))


if __name__ == "__main__":
    sys.exit(main())
