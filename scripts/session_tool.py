"""
Session maintenance tool.

Works on the file-backed session storage (WORDY_STORAGE_DIR) to export,
import, inspect or clear a learner's saved session, and to preview the next
generated word batch.

Usage:
    python scripts/session_tool.py export --out ./backups
    python scripts/session_tool.py import ./backups/wordy-session-2025-01-03.json
    python scripts/session_tool.py generate --seed 7
    python scripts/session_tool.py stats
    python scripts/session_tool.py clear
"""

import argparse
import json
import logging
import random
import sys
from pathlib import Path

from dotenv import load_dotenv

# Allow running from a checkout without installing the package
project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root / "word_adventure" / "src"))

from word_adventure.catalog import load_default_catalog
from word_adventure.config import (
    get_storage_dir,
    load_generator_settings,
    load_progression_thresholds,
    load_store_settings,
)
from word_adventure.logger import get_logger, setup_logging
from word_adventure.session_store import SessionStore
from word_adventure.storage import JsonFileStorage, StorageError
from word_adventure.user_progress import build_user_progress
from word_adventure.word_session_generator import WordSessionGenerator

logger = get_logger("scripts.session_tool")


def build_store(storage_dir: str) -> SessionStore:
    storage = JsonFileStorage(storage_dir)
    store = SessionStore(storage, settings=load_store_settings())
    store.init()
    return store


def cmd_export(store: SessionStore, args) -> int:
    path = store.export_to_file(args.out)
    if path is None:
        print("❌ Export failed")
        return 1
    print(f"✅ Exported session to {path}")
    return 0


def cmd_import(store: SessionStore, args) -> int:
    if store.import_from_file(args.file):
        print("✅ Session imported successfully")
        return 0
    print("❌ Failed to import session. Please check the file format.")
    return 1


def cmd_generate(store: SessionStore, args) -> int:
    catalog = load_default_catalog()
    thresholds = load_progression_thresholds()
    generator = WordSessionGenerator(
        catalog,
        thresholds=thresholds,
        settings=load_generator_settings(),
        rng=random.Random(args.seed) if args.seed is not None else None,
    )
    session = store.data
    progress = build_user_progress(session, catalog, thresholds)
    batch = generator.generate_dashboard_session(progress, args.session or session.session_number)

    info = generator.get_progression_info(progress.words_completed)
    logger.section("Next word session", info.to_dict())
    print(json.dumps(batch.to_dict(), indent=2, ensure_ascii=False))
    return 0


def cmd_stats(store: SessionStore, args) -> int:
    logger.section("Session stats", store.get_session_stats())
    message = store.get_restore_message()
    if message:
        print(message)
    return 0


def cmd_clear(store: SessionStore, args) -> int:
    store.clear()
    print("✅ Session cleared")
    return 0


def main(argv=None) -> int:
    load_dotenv()

    parser = argparse.ArgumentParser(description="Inspect and maintain a saved learning session")
    parser.add_argument("--storage-dir", default=None, help="Storage directory (default: WORDY_STORAGE_DIR)")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    export_parser = subparsers.add_parser("export", help="Export the session to a JSON file")
    export_parser.add_argument("--out", default=".", help="Directory for the export file")

    import_parser = subparsers.add_parser("import", help="Import a session from a JSON file")
    import_parser.add_argument("file", help="Exported session file")

    generate_parser = subparsers.add_parser("generate", help="Preview the next word session")
    generate_parser.add_argument("--session", type=int, default=None, help="Session number to report")
    generate_parser.add_argument("--seed", type=int, default=None, help="Seed for a reproducible batch")

    subparsers.add_parser("stats", help="Show session statistics")
    subparsers.add_parser("clear", help="Delete the saved session")

    args = parser.parse_args(argv)
    setup_logging(level=logging.DEBUG if args.verbose else logging.INFO)

    commands = {
        "export": cmd_export,
        "import": cmd_import,
        "generate": cmd_generate,
        "stats": cmd_stats,
        "clear": cmd_clear,
    }

    try:
        store = build_store(args.storage_dir or get_storage_dir())
    except StorageError as e:
        logger.error("Cannot open session storage", error=e)
        return 1

    try:
        return commands[args.command](store, args)
    finally:
        store.dispose()


if __name__ == "__main__":
    sys.exit(main())
