from __future__ import annotations

import argparse
import asyncio
import json
import logging
from typing import Any, Optional

from dotenv import load_dotenv

from .api_client import MundoApiClient
from .champions import ROLE_FILTERS, champion_query
from .config import CHAMPION_PAGE_SIZE, DEFAULT_QUEUE_TYPE, ClientConfig, client_config_from_env
from .errors import MundoError
from .models import DraftLifecycle
from .push import PushChannel
from .queue import summarize_queue
from .reconciler import DraftView
from .render import render_champions, render_draft, render_queue
from .serialize import champion_to_dict, queue_to_dict, session_to_dict, view_to_dict
from .sync import DraftSync, join_draft, join_error_message

TERMINAL_STATES = (DraftLifecycle.COMPLETED, DraftLifecycle.CANCELLED)


def _print_json(obj: Any) -> None:
    print(json.dumps(obj, indent=2))


def _parse_args(argv: Optional[list] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="MundoDraft companion client")
    parser.add_argument("--json", action="store_true", help="Print JSON instead of text")
    parser.add_argument("--debug", action="store_true", help="Print debug logs")
    sub = parser.add_subparsers(dest="command", required=True)

    p_join = sub.add_parser("join", help="Resolve a draft code")
    p_join.add_argument("code", help="Draft code from Discord")

    p_watch = sub.add_parser("watch", help="Follow a draft live")
    p_watch.add_argument("code", help="Draft code from Discord")
    p_watch.add_argument("--no-push", action="store_true", help="Poll only, skip the WebSocket")

    p_select = sub.add_parser("select", help="Ban or pick a champion for the current turn")
    p_select.add_argument("code", help="Draft code from Discord")
    p_select.add_argument("champion_id", help="Champion id")

    p_champs = sub.add_parser("champions", help="List champions")
    p_champs.add_argument("--role", choices=ROLE_FILTERS, default=None, type=str.upper)
    p_champs.add_argument("--search", default=None)
    p_champs.add_argument("--limit", type=int, default=CHAMPION_PAGE_SIZE)

    p_queue = sub.add_parser("queue", help="Show guild queue fill")
    p_queue.add_argument("guild_id")
    p_queue.add_argument("--queue-type", default=DEFAULT_QUEUE_TYPE)

    return parser.parse_args(argv)


async def _join(api: MundoApiClient, code: str, as_json: bool) -> int:
    try:
        session = await join_draft(api, code)
    except (ValueError, MundoError) as exc:
        print(join_error_message(exc))
        return 1
    if as_json:
        _print_json(session_to_dict(session))
    else:
        print(f"Joined draft {session.unique_id} ({session.status.value})")
        for team in session.teams:
            print(f"  {team.side.value}: {team.name}")
    return 0


async def _watch(api: MundoApiClient, config: ClientConfig, code: str, as_json: bool, use_push: bool) -> int:
    try:
        session = await join_draft(api, code)
    except (ValueError, MundoError) as exc:
        print(join_error_message(exc))
        return 1

    finished = asyncio.Event()

    def _show(view: DraftView) -> None:
        if as_json:
            print(json.dumps(view_to_dict(view)))
        else:
            print(render_draft(view))
            print("-" * 40)
        if view.status is not None and view.status.status in TERMINAL_STATES:
            finished.set()

    push = None
    if use_push and config.push_enabled:
        push = PushChannel(
            config.ws_url,
            max_reconnect_attempts=config.ws_max_reconnects,
            reconnect_delay_s=config.ws_reconnect_delay_s,
            max_reconnect_delay_s=config.ws_max_reconnect_delay_s,
        )
        push.start()

    sync = DraftSync(api, session.unique_id, push=push, poll_interval_s=config.poll_interval_s)
    sync.add_listener(_show)
    try:
        async with sync:
            await finished.wait()
    finally:
        if push is not None:
            await push.close()
    return 0


async def _select(api: MundoApiClient, code: str, champion_id: str, as_json: bool) -> int:
    try:
        session = await join_draft(api, code)
    except (ValueError, MundoError) as exc:
        print(join_error_message(exc))
        return 1

    sync = DraftSync(api, session.unique_id)
    await sync.refresh()
    outcome = await sync.attempt_select(champion_id)
    await sync.close()
    if as_json:
        _print_json(
            {
                "ok": outcome.ok,
                "reason": outcome.reason.value if outcome.reason else None,
                "message": outcome.message,
                "view": view_to_dict(sync.view),
            }
        )
    else:
        print("Selection accepted" if outcome.ok else f"Selection rejected: {outcome.message}")
        print(render_draft(sync.view))
    return 0 if outcome.ok else 2


def main(argv: Optional[list] = None) -> int:
    load_dotenv()
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = client_config_from_env()
    api = MundoApiClient(config)
    try:
        if args.command == "join":
            return asyncio.run(_join(api, args.code, args.json))
        if args.command == "watch":
            return asyncio.run(_watch(api, config, args.code, args.json, not args.no_push))
        if args.command == "select":
            return asyncio.run(_select(api, args.code, args.champion_id, args.json))
        if args.command == "champions":
            page = api.get_champions(**champion_query(args.role, args.search, args.limit))
            if args.json:
                _print_json([champion_to_dict(c) for c in page.champions])
            else:
                print(render_champions(page.champions))
            return 0
        if args.command == "queue":
            view = summarize_queue(api.get_guild_queue(args.guild_id, args.queue_type))
            if args.json:
                _print_json(queue_to_dict(view))
            else:
                print(render_queue(view))
            return 0
    except KeyboardInterrupt:
        return 130
    except MundoError as exc:
        print(f"Error: {exc}")
        return 1
    finally:
        api.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
