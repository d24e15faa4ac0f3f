"""
Command-line entry point.

    docanalyzer serve [--host H] [--port P] [--reload]
    docanalyzer analyze FILE [--api URL] [--chat]
    docanalyzer history {list,delete,clear}
"""
from __future__ import annotations

import argparse
import asyncio
import sys
from datetime import datetime
from typing import List, Optional

import httpx

from docanalyzer.client.history import HistoryStore
from docanalyzer.client.session import DocumentSession
from docanalyzer.config import settings
from docanalyzer.utils.helpers import truncate_text

# Color codes for terminal output
GREEN = "\033[92m"
RED = "\033[91m"
BLUE = "\033[94m"
RESET = "\033[0m"

EXIT_COMMANDS = {"exit", "quit", ":q"}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docanalyzer",
        description="Analyze PDF/DOCX documents and chat about them.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the API server")
    serve.add_argument("--host", default=settings.HOST)
    serve.add_argument("--port", type=int, default=settings.PORT)
    serve.add_argument("--reload", action="store_true")

    analyze = sub.add_parser("analyze", help="Analyze a document")
    analyze.add_argument("file")
    analyze.add_argument("--api", default=settings.API_BASE_URL, help="API base URL")
    analyze.add_argument("--chat", action="store_true", help="Chat about the document afterwards")
    analyze.add_argument("--history-file", default=None)

    history = sub.add_parser("history", help="Manage local analysis history")
    history.add_argument("--history-file", default=None)
    history_sub = history.add_subparsers(dest="action", required=True)
    history_sub.add_parser("list")
    delete = history_sub.add_parser("delete")
    delete.add_argument("id")
    history_sub.add_parser("clear")

    return parser


# ---------------------------------------------------------------------------
# analyze
# ---------------------------------------------------------------------------

def print_result(session: DocumentSession) -> None:
    result = session.result
    print(f"{BLUE}Words:{RESET} {result.word_count}")
    print(f"\n{BLUE}Summary{RESET}\n{result.analysis}")
    if result.suggestions:
        print(f"\n{BLUE}Suggestions{RESET}")
        for index, suggestion in enumerate(result.suggestions, start=1):
            print(f"  {index}. {suggestion}")


async def chat_loop(session: DocumentSession) -> None:
    print("\nAsk about the document (type 'exit' to stop).")
    while True:
        try:
            text = input("> ")
        except EOFError:
            break
        if text.strip().lower() in EXIT_COMMANDS:
            break

        reply = await session.send_chat(text)
        if reply is None:
            if session.error:
                print(f"{RED}✗ {session.error}{RESET}")
                session.dismiss_error()
            continue
        print(reply.content)
        if reply.image_url:
            print(f"{GREEN}Image:{RESET} {reply.image_url}")


async def run_analyze(args: argparse.Namespace) -> int:
    history = HistoryStore(args.history_file)
    async with httpx.AsyncClient(
        base_url=args.api, timeout=float(settings.GROQ_TIMEOUT) + 30
    ) as http:
        session = DocumentSession(http, history=history)
        if not session.select_file(args.file):
            print(f"{RED}✗ {session.error}{RESET}")
            return 1

        print(f"Analyzing {session.file.name} …")
        if await session.analyze() is None:
            print(f"{RED}✗ {session.error}{RESET}")
            return 1

        print_result(session)
        if args.chat:
            await chat_loop(session)
    return 0


# ---------------------------------------------------------------------------
# history
# ---------------------------------------------------------------------------

def run_history(args: argparse.Namespace) -> int:
    store = HistoryStore(args.history_file)

    if args.action == "list":
        items = store.list()
        if not items:
            print("No analysis history yet")
        for item in items:
            when = datetime.fromtimestamp(item.timestamp / 1000).strftime("%Y-%m-%d %H:%M")
            print(f"{item.id}  {when}  {item.file_name}  ({item.word_count} words)")
            print(f"    {truncate_text(item.analysis, 160)}")
        return 0

    if args.action == "delete":
        if store.delete(args.id):
            print(f"{GREEN}✓{RESET} Deleted {args.id}")
            return 0
        print(f"{RED}✗{RESET} No history entry {args.id}")
        return 1

    store.clear()
    print(f"{GREEN}✓{RESET} History cleared")
    return 0


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.command == "serve":
        import uvicorn

        uvicorn.run(
            "docanalyzer.main:app",
            host=args.host,
            port=args.port,
            reload=args.reload,
            log_level="info",
        )
        return 0
    if args.command == "analyze":
        return asyncio.run(run_analyze(args))
    return run_history(args)


if __name__ == "__main__":
    sys.exit(main())
