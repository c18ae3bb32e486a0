"""Command-line interface for the redundant blank-line checker."""

import argparse
import json
import logging
import sys
from pathlib import Path

from .analysis import DetectorConfig
from .errors import RedundantLinesError
from .pipeline import FileReport, LintPipeline, PipelineConfig


logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FOUND = 1
EXIT_ERROR = 2


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(name)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        stream=sys.stderr,
    )


def build_pipeline(args: argparse.Namespace) -> LintPipeline:
    """Create a pipeline from parsed command-line options."""
    config = PipelineConfig(
        detector_config=DetectorConfig(min_blank_lines=args.min_blank_lines),
        skip_generated=not args.include_generated,
        file_patterns=args.pattern or [],
        output_format=args.format,
        jobs=args.jobs,
    )
    return LintPipeline(config)


def print_reports(reports: list[FileReport], output_format: str) -> None:
    """Write reports to stdout in the requested format."""
    if output_format == "json":
        json.dump([r.to_dict() for r in reports], sys.stdout, indent=2)
        sys.stdout.write("\n")
        return
    for report in reports:
        for line in report.format_lines():
            print(line)


def _read_stdin_report(pipeline: LintPipeline, fix: bool) -> FileReport:
    # sys.stdin.read() would translate \r\n, so read raw bytes
    text = sys.stdin.buffer.read().decode(pipeline.config.encoding)
    if not fix:
        return FileReport(path=Path("-"), diagnostics=pipeline.check_text(text), text=text)

    result = pipeline.fix_text(text)
    return FileReport(
        path=Path("-"),
        diagnostics=sorted(result.applied + result.skipped, key=lambda d: d.span.start),
        fixed=len(result.applied),
        skipped=len(result.skipped),
        text=text,
        fixed_text=result.text,
    )


def cmd_check(args: argparse.Namespace) -> int:
    """Handle the check command."""
    try:
        pipeline = build_pipeline(args)
        if args.paths == ["-"]:
            reports = [_read_stdin_report(pipeline, fix=False)]
        else:
            reports = pipeline.check_paths(args.paths)
    except RedundantLinesError as e:
        logger.error(f"Error: {e}")
        return EXIT_ERROR

    print_reports(reports, pipeline.config.output_format)

    if any(r.error for r in reports):
        return EXIT_ERROR
    found = sum(len(r.diagnostics) for r in reports)
    logger.info(f"{found} redundant blank-line runs in {len(reports)} files")
    return EXIT_FOUND if found else EXIT_OK


def cmd_fix(args: argparse.Namespace) -> int:
    """Handle the fix command."""
    write = not (args.check or args.stdout)
    try:
        pipeline = build_pipeline(args)
        if args.paths == ["-"]:
            reports = [_read_stdin_report(pipeline, fix=True)]
        else:
            reports = pipeline.fix_paths(args.paths, write=write)

        # stdin always echoes its result unless only checking
        if args.stdout or (args.paths == ["-"] and not args.check):
            for report in reports:
                if report.error is None:
                    sys.stdout.write(report.fixed_text)
    except RedundantLinesError as e:
        logger.error(f"Error: {e}")
        return EXIT_ERROR

    if args.check:
        print_reports(reports, pipeline.config.output_format)

    for report in reports:
        if report.skipped:
            logger.warning(f"{report.path}: {report.skipped} fixes could not be applied")

    if any(r.error for r in reports):
        return EXIT_ERROR
    if args.check and any(r.fixed for r in reports):
        return EXIT_FOUND
    return EXIT_OK


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        'paths',
        nargs='+',
        help="Files or directories to process ('-' reads stdin)"
    )
    parser.add_argument(
        '-n', '--min-blank-lines',
        type=int,
        default=2,
        help='Blank lines in one run that count as redundant (default: 2, minimum: 2)'
    )
    parser.add_argument(
        '-f', '--format',
        choices=['text', 'json'],
        default='text',
        help='Report format (default: text)'
    )
    parser.add_argument(
        '-p', '--pattern',
        action='append',
        help='Glob pattern for files inside directories (repeatable)'
    )
    parser.add_argument(
        '-j', '--jobs',
        type=int,
        default=1,
        help='Number of files processed in parallel (default: 1)'
    )
    parser.add_argument(
        '--include-generated',
        action='store_true',
        help='Also process files marked as generated code'
    )


def main(argv=None) -> int:
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(
        prog='redundant-lines',
        description='Find and remove redundant blank lines in source code'
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose output'
    )

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # Check command
    check_parser = subparsers.add_parser(
        'check',
        help='Report redundant blank lines'
    )
    _add_common_arguments(check_parser)
    check_parser.set_defaults(func=cmd_check)

    # Fix command
    fix_parser = subparsers.add_parser(
        'fix',
        help='Remove redundant blank lines'
    )
    _add_common_arguments(fix_parser)
    fix_parser.add_argument(
        '--check',
        action='store_true',
        help="Don't write files; exit 1 if anything would change"
    )
    fix_parser.add_argument(
        '--stdout',
        action='store_true',
        help='Print fixed sources instead of writing them back'
    )
    fix_parser.set_defaults(func=cmd_fix)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return EXIT_OK

    setup_logging(args.verbose)
    return args.func(args)


if __name__ == '__main__':
    sys.exit(main())
