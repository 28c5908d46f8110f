# main.py
"""
CLI entry point for the price list assistant.
Usage examples:
  # Import a price list (replaces the stored catalog)
  python main.py import /path/to/prices.xlsx

  # Set exchange rate and fixed markup
  python main.py config --rate 98 --markup 1500

  # Show what the assistant would be given for a question, then ask it
  python main.py search "chanel no 5"
  python main.py ask "How much is Chanel No.5?"
"""
from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from catalog.assistant import ChatSession
from catalog.errors import CatalogError, EmptyCatalogError, ParseError
from catalog.models import PricingConfig
from catalog.price import apply_pricing
from catalog.reader import import_price_list
from catalog.relevance import build_context
from catalog.store import StateStore
from config.settings import settings
from utils.logger import get_logger

logger = get_logger("main")


def _parse_args(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(
        description="Import spreadsheet price lists and answer questions about them."
    )
    parser.add_argument(
        "--state-file", default=settings.STATE_FILE, help="Where the catalog and pricing config are stored."
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_import = sub.add_parser("import", help="Import a price list (.xlsx, .xlsm, .xls or .csv).")
    p_import.add_argument("file", help="Path to the spreadsheet.")

    p_config = sub.add_parser("config", help="Show or apply the pricing config.")
    p_config.add_argument("--rate", type=float, help="Exchange rate (positive number).")
    p_config.add_argument("--markup", type=float, help="Fixed markup (may be 0 or negative).")

    p_list = sub.add_parser("list", help="List products with display prices.")
    p_list.add_argument("--limit", type=int, default=None)

    p_search = sub.add_parser("search", help="Show the context selected for a query.")
    p_search.add_argument("query")
    p_search.add_argument("--limit", type=int, default=settings.CONTEXT_LIMIT)

    p_ask = sub.add_parser("ask", help="Ask the assistant one question.")
    p_ask.add_argument("question")

    sub.add_parser("chat", help="Interactive chat with the assistant.")
    sub.add_parser("reset", help="Delete the stored price list.")
    return parser.parse_args(argv)


def _cmd_import(store: StateStore, args) -> int:
    state = store.load()
    try:
        catalog = import_price_list(args.file)
    except (ParseError, EmptyCatalogError) as exc:
        # Stored catalog stays as it was
        logger.error("Import failed", extra={"file": args.file, "error": str(exc)})
        print(f"Import failed: {exc}", file=sys.stderr)
        return 1

    state.catalog = catalog
    store.save(state)
    priced = sum(1 for r in catalog if r.is_priced)
    print(f"Imported {len(catalog)} products ({priced} priced).")
    return 0


def _cmd_config(store: StateStore, args) -> int:
    state = store.load()
    if args.rate is None and args.markup is None:
        print(f"exchange rate: {state.config.exchange_rate}  fixed markup: {state.config.fixed_markup}")
        return 0
    try:
        config = PricingConfig(
            exchange_rate=args.rate if args.rate is not None else state.config.exchange_rate,
            fixed_markup=args.markup if args.markup is not None else state.config.fixed_markup,
        )
    except ValueError as exc:
        print(f"Invalid config: {exc}", file=sys.stderr)
        return 1
    state.config = config
    store.save(state)
    print(f"exchange rate: {config.exchange_rate}  fixed markup: {config.fixed_markup}")
    return 0


def _cmd_list(store: StateStore, args) -> int:
    state = store.load()
    products = apply_pricing(state.catalog, state.config)
    if args.limit is not None:
        products = products[: args.limit]
    for product in products:
        print(product.as_line())
    return 0


def _cmd_search(store: StateStore, args) -> int:
    state = store.load()
    print(build_context(args.query, state.catalog, state.config, limit=args.limit))
    return 0


def _session_from(store: StateStore) -> Optional[ChatSession]:
    state = store.load()
    if not state.catalog:
        print("No price list loaded. Run `main.py import FILE` first.", file=sys.stderr)
        return None
    return ChatSession(catalog=state.catalog, config=state.config)


def _cmd_ask(store: StateStore, args) -> int:
    session = _session_from(store)
    if session is None:
        return 1
    print(session.ask(args.question))
    return 0


def _cmd_chat(store: StateStore, args) -> int:
    session = _session_from(store)
    if session is None:
        return 1
    print("Ask about products and prices. Empty line or Ctrl-D to quit.")
    while True:
        try:
            question = input("> ").strip()
        except EOFError:
            break
        if not question:
            break
        print(session.ask(question))
    return 0


def _cmd_reset(store: StateStore, args) -> int:
    store.clear_catalog()
    print("Price list deleted.")
    return 0


COMMANDS = {
    "import": _cmd_import,
    "config": _cmd_config,
    "list": _cmd_list,
    "search": _cmd_search,
    "ask": _cmd_ask,
    "chat": _cmd_chat,
    "reset": _cmd_reset,
}


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)
    store = StateStore(args.state_file)
    logger.info("Running command", extra={"command": args.command})
    try:
        return COMMANDS[args.command](store, args)
    except CatalogError as exc:
        logger.exception("Command failed", extra={"command": args.command})
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
