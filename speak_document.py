"""Read a text or Markdown document aloud.

The document is split on blank lines into blocks, which are spoken one after another
through the configured synthesis engine. A block range can be selected with --start/--end.

Examples:
    python speak_document.py notes.md
    python speak_document.py notes.md --start 3 --end 7 --rate 1.25
    python speak_document.py --list-voices --json
"""

from __future__ import annotations

import argparse
import asyncio
import json
import re
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Final, NoReturn

from config.loader import AUTO_CONTEXT, ConfigLoader, ConfigLoaderError
from core.tts.manager import TTSManager
from core.tts.playback_engine import PlaybackCallbacks
from core.version import VERSION
from handlers.text_preprocessor import TextPreprocessor
from models.playback_models import Block, DocumentContext
from utils.file_utils import FileUtils, FileUtilsError
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

    from models.config_models import Config
    from models.voice_models import VoiceCatalogEntry

CFG_FILE: Final[str] = "docspeak.ini"
DOCUMENT_SUFFIXES: Final[list[str]] = [".txt", ".md", ".markdown"]
CONTEXT_CHOICES: Final[list[str]] = [AUTO_CONTEXT, *(context.value for context in DocumentContext)]

_PARAGRAPH_SEPARATOR: Final[re.Pattern[str]] = re.compile(r"\n\s*\n")

logger: logging.Logger = LoggerUtils.get_logger(__name__)


def check_python_version() -> None:
    """Check if Python version is 3.13 or later.

    Raises:
        RuntimeError: If Python version is below 3.13.
    """
    if sys.version_info < (3, 13):
        msg = "Python 3.13 or later is required"
        raise RuntimeError(msg)


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        print(f"\n{message}\n", file=sys.stderr)
        self.print_help(sys.stderr)
        raise SystemExit(2)


def parse_arguments(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        argparse.Namespace: Parsed arguments.
    """
    parser = _ArgumentParser(
        description="Read a text or Markdown document aloud",
        epilog="Example: python speak_document.py notes.md --start 3 --rate 1.25",
    )
    parser.add_argument("document", nargs="?", metavar="DOCUMENT", help="Text or Markdown file to read")
    parser.add_argument("--config", dest="config_file", default=CFG_FILE, metavar="INI", help="Configuration file")
    parser.add_argument("--start", type=int, metavar="BLOCK_ID", help="First block to read")
    parser.add_argument("--end", type=int, metavar="BLOCK_ID", help="Last block to read")
    parser.add_argument("--rate", type=float, metavar="RATE", help="Speech rate multiplier (0.5-3.0)")
    parser.add_argument("--voice", metavar="VOICE_ID", help="Voice identifier (see --list-voices)")
    parser.add_argument("--context", choices=CONTEXT_CHOICES, help="Document context for abbreviations")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--list-voices", action="store_true", help="List installed voices and exit")
    parser.add_argument("--json", action="store_true", help="With --list-voices, print a JSON array")
    parser.add_argument("--show-text", action="store_true", help="Print the speakable text instead of speaking")
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")

    args: argparse.Namespace = parser.parse_args(argv)
    if not args.list_voices and not args.document:
        parser.error("the following arguments are required: DOCUMENT")
    return args


def load_config(args: argparse.Namespace) -> Config:
    """Load configuration file and apply CLI overrides.

    Raises:
        ConfigLoaderError: If configuration file cannot be loaded.
    """
    script_name: str = Path(sys.argv[0]).stem
    return ConfigLoader(
        config_filename=args.config_file,
        script_name=script_name,
        debug=args.debug,
        rate=args.rate,
        voice=args.voice,
        context=args.context,
    ).config


def split_blocks(text: str) -> list[Block]:
    """Split text on blank lines into blocks numbered 0..n-1.

    Blank paragraphs are dropped; numbering counts only the kept ones.
    """
    paragraphs: list[str] = [part.strip() for part in _PARAGRAPH_SEPARATOR.split(text.replace("\r\n", "\n"))]
    return [Block(id=index, text=paragraph) for index, paragraph in enumerate(p for p in paragraphs if p)]


def read_document(document: str) -> list[Block]:
    """Read a UTF-8 document into blocks.

    Raises:
        FileUtilsError: If the file is missing or has an unsupported suffix.
        OSError, UnicodeDecodeError: If the file cannot be read.
    """
    path: Path = FileUtils.resolve_path(document)
    FileUtils.validate_file_path(path, DOCUMENT_SUFFIXES)
    return split_blocks(path.read_text(encoding="utf-8"))


def format_catalog(catalog: list[VoiceCatalogEntry], *, as_json: bool = False) -> str:
    if as_json:
        return json.dumps([entry.to_dict() for entry in catalog], ensure_ascii=False, indent=2)
    if not catalog:
        return "No local voices installed."
    return "\n".join(
        f"{entry.language_label:<32} {entry.display_name:<24} {entry.identifier}" for entry in catalog
    )


def show_text(config: Config, blocks: list[Block]) -> None:
    """Print each block's speakable text."""
    preprocessor = TextPreprocessor()
    if config.SPEECH.CONTEXT != AUTO_CONTEXT:
        preprocessor.set_context(DocumentContext(config.SPEECH.CONTEXT))
    else:
        preprocessor.detect_context(" ".join(block.text for block in blocks))
    print(f"Context: {preprocessor.context_description}")
    for block in blocks:
        print(f"[{block.id}] {preprocessor.preprocess(block.text)}")


async def speak(config: Config, args: argparse.Namespace, blocks: list[Block]) -> int:
    """Speak the blocks, or list the voices, and wait until playback ends.

    Returns:
        int: Exit status, 0 on success and 1 on an engine error.
    """
    finished: asyncio.Event = asyncio.Event()
    errors: list[str] = []

    def on_error(message: str) -> None:
        errors.append(message)
        finished.set()

    callbacks = PlaybackCallbacks(
        on_block_started=lambda block_id: print(f"Reading block {block_id}"),
        on_playback_completed=finished.set,
        on_error=on_error,
    )
    manager = TTSManager(config, callbacks)
    try:
        await manager.initialize()
        if errors:
            print(f"\nError: {errors[0]}", file=sys.stderr)
            return 1

        if args.list_voices:
            print(format_catalog(manager.catalog, as_json=args.json))
            return 0

        context: DocumentContext = manager.load_document(blocks)
        print(f"Context: {context.description}")
        if not blocks:
            print("Nothing to read.")
            return 0
        if args.start is not None:
            manager.set_start_block(args.start)
        if args.end is not None:
            manager.set_end_block(args.end)
        manager.play()
        await finished.wait()
    finally:
        await manager.close()

    if errors:
        print(f"\nError: {errors[0]}", file=sys.stderr)
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    check_python_version()
    args: argparse.Namespace = parse_arguments(argv)
    try:
        config: Config = load_config(args)
    except ConfigLoaderError as err:
        print("\nError: Failed to load configuration file.", file=sys.stderr)
        print(f"Details: {err}", file=sys.stderr)
        return 1

    LoggerUtils.from_config(config.GENERAL)

    blocks: list[Block] = []
    if args.document:
        try:
            blocks = read_document(args.document)
        except (FileUtilsError, OSError, UnicodeDecodeError) as err:
            print(f"\nError: {err}", file=sys.stderr)
            return 1
        logger.info("Read %d block(s) from '%s'", len(blocks), args.document)

    if args.show_text and not args.list_voices:
        show_text(config, blocks)
        return 0

    try:
        return asyncio.run(speak(config, args, blocks))
    except KeyboardInterrupt:
        print("\nPlayback stopped.", file=sys.stderr)
        return 0
    except ValueError as err:
        # unknown engine name or invalid engine settings
        print(f"\nError: {err}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
