"""Command-line front end for the dictionary.

Usage:
    tudien "học sinh"                 # one-shot lookup
    tudien --url "/?search=h%25E1%25BB%258Dc"
    tudien                            # interactive session

Interactive commands: any text searches; :clear, :tab N, :related WORD,
:pron N, :play, :retry, :q
"""

import argparse
import asyncio
import json
import logging
import os
import sys
from urllib.parse import urlencode

from dotenv import load_dotenv

load_dotenv()

from adapter.audio.player import HttpAudioPlayer
from adapter.external.remote_dictionary import RemoteDictionaryAdapter
from adapter.url.location import UrlLocation
from domain.model.errors import ValidationError
from domain.model.query import clean_query, encode_query
from domain.model.session import SessionStatus
from presentation.renderer import render
from services.session_controller import SEARCH_PARAM, SearchSessionController
from utils.logging import setup_structured_logging

logger = logging.getLogger(__name__)

PROMPT = "> "
HELP = ":clear | :tab N | :related WORD | :pron N | :play | :retry | :q"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tudien", description="Tra cứu từ điển tiếng Việt")
    parser.add_argument("word", nargs="*", help="Word to look up")
    parser.add_argument(
        "--url",
        help="Start from a page URL. The search value is double-encoded, "
             "e.g. '/?search=h%%25E1%%25BB%%258Dc'; a single-encoded value is "
             "looked up again on the next submit of the same word",
    )
    parser.add_argument("--base-url", help="Dictionary service origin")
    parser.add_argument("--json", action="store_true", help="Print grouped entries as JSON")
    parser.add_argument("--log-level", default=None, help="Log level (default: $LOG_LEVEL or WARNING)")
    return parser


def initial_url(url: str | None, words: list[str]) -> str:
    """URL the session starts from: --url, else ?search=<word>, else bare path."""
    if url:
        return url
    word = clean_query(" ".join(words))
    if word:
        return "/?" + urlencode({SEARCH_PARAM: encode_query(word)})
    return "/"


def grouped_json(controller: SearchSessionController) -> str:
    state = controller.state
    payload = {
        "search": state.search_term,
        "status": state.status.value,
        "entries": [g.to_dict() for g in state.groups],
        "suggestions": state.suggestions,
    }
    return json.dumps(payload, ensure_ascii=False, indent=2)


async def handle_command(controller: SearchSessionController, line: str) -> bool:
    """Apply one interactive command. Returns False when the user quits."""
    line = line.strip()
    if not line:
        return True
    if line in (":q", ":quit"):
        return False

    command, _, arg = line.partition(" ")
    arg = arg.strip()
    try:
        if command == ":clear":
            controller.clear()
        elif command == ":tab":
            controller.select_tab(int(arg) - 1)
        elif command == ":related":
            await controller.select_related(arg)
        elif command == ":pron":
            index = int(arg) - 1 if arg else controller.state.active_tab_index
            controller.toggle_pronunciation_panel(index)
        elif command == ":play":
            await controller.play_audio()
        elif command == ":retry":
            await controller.retry()
        elif command.startswith(":"):
            print(HELP)
        else:
            controller.set_search_term(line)
            await controller.submit()
    except (ValueError, ValidationError) as e:
        print(f"! {e}")
    return True


async def interactive(controller: SearchSessionController) -> None:
    print(render(controller.state))
    while True:
        try:
            line = await asyncio.to_thread(input, PROMPT)
        except EOFError:
            break
        if not await handle_command(controller, line):
            break
        print(render(controller.state))


async def run(args: argparse.Namespace) -> int:
    location = UrlLocation(initial_url(args.url, args.word))
    controller = SearchSessionController(
        dictionary=RemoteDictionaryAdapter(base_url=args.base_url),
        location=location,
        audio=HttpAudioPlayer(),
    )
    logger.debug("Session started", extra={"href": location.href})

    started = await controller.init_from_url()
    if not started and not args.url:
        await interactive(controller)
        return 0

    print(grouped_json(controller) if args.json else render(controller.state))
    return 1 if controller.state.status is SessionStatus.ERRORED else 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_structured_logging(args.log_level or os.getenv("LOG_LEVEL", "WARNING"))
    try:
        return asyncio.run(run(args))
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
