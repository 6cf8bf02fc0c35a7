"""
BoothDocs - Command-line entry point

Analyzes already-extracted document text through the app's generate route.
Progress lines go to stderr, the result to stdout.
"""

import argparse
import os
import sys
from pathlib import Path

import yaml

from boothdocs.analysis import AnalysisError, AnalysisKind, AnalysisRequest, BackendCredentials, DocumentAnalyzer
from boothdocs.analysis.client import AnalysisClient
from boothdocs.assistant import check_connection
from boothdocs.config import load_settings
from boothdocs.logging_config import error, info


def _credentials(api_base: str) -> BackendCredentials:
    return BackendCredentials(
        api_base=api_base,
        api_key=os.environ.get('BOOTHDOCS_API_KEY'),
        org_id=os.environ.get('BOOTHDOCS_ORG_ID'),
    )


def _print_progress(event):
    print(f"[{event.current}/{event.total}] {event.stage}", file=sys.stderr)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="boothdocs",
        description="BoothDocs - Analyze trade show and exhibitor documents",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Pull every deadline out of an exhibitor manual
  boothdocs analyze manual.txt --type extract_deadlines

  # Ask a question about the document
  boothdocs analyze manual.txt --type custom --question "Is carpet included?"

  # Confirm the API key and organization work
  boothdocs check

Credentials are read from BOOTHDOCS_API_KEY and BOOTHDOCS_ORG_ID.
        """
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        '--settings',
        help='YAML settings file (default: config/analysis.yaml)'
    )

    subparsers = parser.add_subparsers(dest='command', required=True)

    analyze = subparsers.add_parser('analyze', parents=[common], help='Analyze a plain-text document')
    analyze.add_argument('file', help='UTF-8 text file to analyze')
    analyze.add_argument(
        '--type',
        dest='analysis_type',
        required=True,
        choices=[kind.value for kind in AnalysisKind],
        help='Analysis to run'
    )
    analyze.add_argument(
        '--question',
        help='Question to answer (required for --type custom)'
    )

    subparsers.add_parser('check', parents=[common], help='Test the connection to the AI service')

    return parser


def _run_analyze(args, settings) -> int:
    try:
        text = Path(args.file).read_text(encoding='utf-8')
    except OSError as e:
        print(f"Error: Cannot read {args.file}: {e}", file=sys.stderr)
        return 1

    analyzer = DocumentAnalyzer.from_credentials(_credentials(settings.api_base), settings)

    try:
        result = analyzer.analyze(AnalysisRequest(
            document_text=text,
            kind=args.analysis_type,
            question=args.question,
            on_progress=_print_progress,
        ))
    except AnalysisError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    info(f"[CLI] {args.file}: {result.chunk_count} section(s), method={result.method}")
    print(result.to_display_text())
    return 0


def _run_check(settings) -> int:
    client = AnalysisClient(_credentials(settings.api_base), timeout=settings.timeout_seconds)
    ok, message = check_connection(client)
    if not ok:
        print(f"Error: {message}", file=sys.stderr)
        return 1
    print("Connected!")
    return 0


def main(argv=None) -> int:
    """Command-line interface for document analysis."""
    args = _build_parser().parse_args(argv)

    try:
        settings = load_settings(args.settings)
    except (ValueError, TypeError, yaml.YAMLError) as e:
        error(f"[CLI] Invalid settings: {e}")
        print(f"Error: Invalid settings: {e}", file=sys.stderr)
        return 1

    if args.command == 'analyze':
        return _run_analyze(args, settings)
    return _run_check(settings)


if __name__ == "__main__":
    sys.exit(main())
