"""
share-dedupe - Command Line Shell
=================================

Thin command-line wrapper around the reorganizer and the deduplicator.
This is the only module that configures logging or prints.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from share_dedupe.config import Config
from share_dedupe.deduplication import Deduplicator
from share_dedupe.filesystem import OsFileSystem
from share_dedupe.reorganize import MoveJournal, Reorganizer
from share_dedupe.utils.exceptions import ShareDedupeError
from share_dedupe.utils.logging_config import get_logger, new_correlation_id, setup_logging

logger = get_logger(__name__)


def _reorganizer(path: Optional[str], config: Config) -> Reorganizer:
    if path:
        return Reorganizer(Path(path))
    if config.organizer.base_path:
        return Reorganizer(config.organizer.base_path)
    return Reorganizer.from_working_directory()


def cmd_names(args: argparse.Namespace, config: Config) -> int:
    """Print the discovered title prefixes."""
    organizer = _reorganizer(args.path, config)
    for name in organizer.names:
        print(name)
    return 0


def cmd_sort(args: argparse.Namespace, config: Config) -> int:
    """Create sibling directories and move files into them."""
    organizer = _reorganizer(args.path, config)

    if args.dry_run:
        moves = organizer.plan()
        for move in moves:
            print(f"{move.source} -> {move.destination}")
        print(f"\n{len(moves)} files would move into {len(organizer.names)} directories")
        return 0

    journal_file = args.journal or config.organizer.journal_file
    journal = MoveJournal(Path(journal_file)) if journal_file else None
    exist_ok = args.exist_ok or config.organizer.create_if_absent

    result = organizer.run(exist_ok=exist_ok, journal=journal)
    print(f"✓ Created {len(result.created)} directories")
    print(f"✓ Moved {len(result.moves)} files")
    return 0


def cmd_resume(args: argparse.Namespace, config: Config) -> int:
    """Finish moves recorded in a journal."""
    journal_file = args.journal or config.organizer.journal_file
    if not journal_file:
        print("✗ No journal file given", file=sys.stderr)
        return 1

    journal = MoveJournal(Path(journal_file))
    moved = journal.resume(OsFileSystem())
    print(f"✓ Resumed {len(moved)} moves")
    return 0


def cmd_dedupe(args: argparse.Namespace, config: Config) -> int:
    """Report duplicate files, optionally quarantining them."""
    settings = config.deduplication
    workers = args.workers if args.workers is not None else settings.max_workers

    with Deduplicator(
        Path(args.directory),
        max_workers=workers,
        buffer_size=settings.buffer_size,
        algorithm=settings.hash_algorithm,
    ) as dedupe:
        report = dedupe.scan()

        quarantine_dir = args.quarantine or settings.quarantine_directory
        moved = []
        if quarantine_dir:
            moved = dedupe.quarantine(report, Path(quarantine_dir))

    if args.json:
        print(json.dumps(report.to_dict(), indent=2))
        return 0

    if not report.duplicates:
        print("No duplicates found.")
    else:
        print(f"\n📋 Duplicates ({report.duplicate_count}):\n")
        for canonical, dupes in report.duplicates.items():
            print(f"  {canonical}")
            for dup in dupes:
                print(f"      = {dup}")

    for warning in report.warnings:
        print(f"  ⚠ {warning.path}: {warning.message}", file=sys.stderr)

    if moved:
        print(f"\n✓ Quarantined {len(moved)} files")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="share-dedupe",
        description="Sort and deduplicate PlayStation 'Deleted Games and Apps' captures"
    )
    parser.add_argument(
        '--config', '-c',
        type=Path,
        help='Path to a YAML configuration file'
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable debug logging'
    )
    sub = parser.add_subparsers(dest="command", required=True)

    names = sub.add_parser('names', help='List title prefixes')
    names.add_argument('path', nargs='?', help="'Deleted Games and Apps' directory")
    names.set_defaults(func=cmd_names)

    sort = sub.add_parser('sort', help='Move files into per-title directories')
    sort.add_argument('path', nargs='?', help="'Deleted Games and Apps' directory")
    sort.add_argument(
        '--exist-ok',
        action='store_true',
        help='Accept per-title directories that already exist'
    )
    sort.add_argument(
        '--dry-run', '-n',
        action='store_true',
        help='Show the planned moves without changing anything'
    )
    sort.add_argument('--journal', type=Path, help='Journal moves to this file')
    sort.set_defaults(func=cmd_sort)

    resume = sub.add_parser('resume', help='Finish an interrupted sort')
    resume.add_argument('--journal', type=Path, help='Journal file of the interrupted run')
    resume.set_defaults(func=cmd_resume)

    dedupe = sub.add_parser('dedupe', help='Report duplicate files')
    dedupe.add_argument('directory', help='Directory to scan')
    dedupe.add_argument('--workers', '-w', type=int, help='Hashing threads')
    dedupe.add_argument('--quarantine', type=Path, help='Move duplicates here')
    dedupe.add_argument('--json', action='store_true', help='Print the report as JSON')
    dedupe.set_defaults(func=cmd_dedupe)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point with CLI support."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = Config.load(args.config) if args.config else Config()
        if args.verbose:
            config.logging.level = "DEBUG"
        setup_logging(config.logging)
        run_id = new_correlation_id()
        logger.debug(f"Starting {args.command} (run {run_id})")
        return args.func(args, config)
    except ShareDedupeError as e:
        logger.debug(f"Command failed: {e.to_dict()}")
        print(f"✗ {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
