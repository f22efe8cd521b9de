"""Main entry point for the Chord Lens CLI."""

import sys
import argparse
from typing import List, Optional

from ..chord_templates import all_templates_in_precedence_order
from ..core.config import ConfigManager
from ..core.factory import ComponentFactory
from ..logger import get_logger
from ..logging_config import setup_logging
from ..midi_file import scan_midi_file
from ..note_utils import parse_note

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_NO_CHORD = 1
EXIT_BAD_INPUT = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chord-lens", description="Chord Lens - chord recognition from MIDI notes"
    )
    parser.add_argument(
        "--log-level", default=None, help="Log level for chord_lens modules (e.g. DEBUG)"
    )
    parser.add_argument(
        "--flats", action="store_true", help="Use flat notes instead of sharps"
    )
    parser.add_argument(
        "--config-dir", default=None, help="Configuration directory (default ~/.config/chord_lens)"
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    classify_parser = subparsers.add_parser(
        "classify", help="Name the chord formed by the given notes"
    )
    classify_parser.add_argument(
        "notes", nargs="+", help="MIDI note numbers or note names (e.g. 60 64 67 or C4 E4 G4)"
    )

    scan_parser = subparsers.add_parser(
        "scan", help="List the chord changes in a MIDI file"
    )
    scan_parser.add_argument("path", help="Path to a .mid file")
    scan_parser.add_argument(
        "--channel",
        type=int,
        choices=range(1, 17),
        metavar="CHANNEL",
        action="append",
        default=None,
        help="Only listen to this channel (1-16); may be repeated",
    )

    subparsers.add_parser("templates", help="List recognised chord qualities in precedence order")
    return parser


def run_classify(factory: ComponentFactory, tokens: List[str], use_flats: bool) -> int:
    try:
        notes = [parse_note(token) for token in tokens]
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_BAD_INPUT

    logger.debug(f"Classifying notes {notes}")
    detector = factory.create_chord_detector(**({"use_flats": True} if use_flats else {}))
    result = detector.classify(notes)
    if result is None:
        print("No chord recognised")
        return EXIT_NO_CHORD

    print(f"{result.chord_name} ({result.confidence * 100:.0f}%)")
    print(f"  root: {result.root_note}  notes: {' '.join(result.notes)}")
    return EXIT_OK


def run_scan(
    factory: ComponentFactory, path: str, channels: Optional[List[int]], use_flats: bool
) -> int:
    detector = factory.create_chord_detector(**({"use_flats": True} if use_flats else {}))
    ignore_drums = factory.config_manager.get_config("scanner").get("ignore_drums", True)
    zero_based = [channel - 1 for channel in channels] if channels else None

    try:
        changes = scan_midi_file(
            path, detector=detector, channels=zero_based, ignore_drums=ignore_drums
        )
    except (OSError, EOFError, ValueError) as e:
        print(f"Error reading {path}: {e}", file=sys.stderr)
        return EXIT_BAD_INPUT

    for change in changes:
        confidence = f"{change.result.confidence * 100:.0f}%" if change.result else "-"
        print(f"{change.time:9.3f}  {change.chord_name:<20} {confidence}")
    return EXIT_OK


def run_templates() -> int:
    for index, template in enumerate(all_templates_in_precedence_order(), start=1):
        required = ",".join(str(i) for i in sorted(template.required))
        optional = ",".join(str(i) for i in sorted(template.optional)) or "-"
        print(
            f"{index:2d}. {template.name:<11} {template.family.name.lower():<10} "
            f"required={required:<12} optional={optional:<8} {template.confidence:.2f}"
        )
    return EXIT_OK


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI.

    Args:
        args: Command line arguments, or None to use sys.argv

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = build_parser()
    parsed_args = parser.parse_args(args)

    setup_logging(parsed_args.log_level)

    if parsed_args.command == "templates":
        return run_templates()

    if parsed_args.command not in ("classify", "scan"):
        parser.print_help()
        return EXIT_NO_CHORD

    factory = ComponentFactory(ConfigManager(parsed_args.config_dir))
    if parsed_args.command == "classify":
        return run_classify(factory, parsed_args.notes, parsed_args.flats)
    return run_scan(factory, parsed_args.path, parsed_args.channel, parsed_args.flats)


if __name__ == "__main__":
    sys.exit(main())
