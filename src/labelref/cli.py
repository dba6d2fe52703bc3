"""
Command line entry point for checking Org cross-references.

Usage:
    # Check every .org file under a directory
    check-references notes/

    # Save a JSON report and fail when a reference is broken
    check-references paper.org --report reports/refs.json --fail-on-broken

    # Jump target of a label
    check-references paper.org --resolve eq:energy

    # Available reference types
    check-references --list-types
"""

import argparse
import sys

from .errors import LabelNotFoundError
from .parsers.document import Document
from .pipeline import ReferenceCheckPipeline


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Check label cross-references in Org documents",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Check a directory of notes
    check-references notes/

    # Custom configuration
    check-references paper.org --config configs/config.yaml
        """
    )

    parser.add_argument(
        "targets",
        nargs="*",
        help="Org files or directories to check"
    )

    parser.add_argument(
        "--config",
        type=str,
        default="configs/config.yaml",
        help="Path to configuration file"
    )

    parser.add_argument(
        "--report",
        type=str,
        default=None,
        help="Write a JSON report to this path"
    )

    parser.add_argument(
        "--resolve",
        metavar="LABEL",
        type=str,
        default=None,
        help="Print where LABEL is declared in the single target file"
    )

    parser.add_argument(
        "--list-types",
        action="store_true",
        help="List reference types and exit"
    )

    parser.add_argument(
        "--fail-on-broken",
        action="store_true",
        help="Exit with status 1 when broken references are found"
    )

    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    pipeline = ReferenceCheckPipeline(args.config)

    if args.list_types:
        for tag, description in pipeline.list_type_tags():
            print(f"{tag:<10} {description}")
        return 0

    if not args.targets:
        print("No files or directories given", file=sys.stderr)
        return 2

    if args.resolve:
        if len(args.targets) != 1:
            print("--resolve needs exactly one file", file=sys.stderr)
            return 2
        document = Document.from_file(args.targets[0])
        try:
            target = pipeline.navigate(args.resolve, document)
        except LabelNotFoundError as e:
            print(e, file=sys.stderr)
            return 1
        print(f"{document.path}:{target.position.line}:{target.position.column}")
        return 0

    stats = pipeline.run(args.targets, report_path=args.report)

    for report in stats.reports:
        for broken in report.broken:
            names = ", ".join(f"{p.name} ({p.status.value})" for p in broken.problems)
            line = broken.position.line if broken.position else "?"
            print(f"{report.source}:{line}: {broken.marker}: {names}")
        for error in report.arity_errors:
            line = error["position"]["line"] if error["position"] else "?"
            print(f"{report.source}:{line}: {error['marker']}: expected {error['expected']}, "
                  f"found {error['found']}")

    print(f"Checked {stats.checked_docs}/{stats.total_docs} document(s), "
          f"{stats.total_markers} reference(s), {stats.broken_references} broken")

    if args.fail_on_broken and stats.broken_references:
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
