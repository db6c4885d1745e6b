"""
BAI2 command line tool - parse, validate, print and format BAI2 files.

Usage:
  python main.py parse  --input data/sample.bai
  python main.py print  --input gs://bucket/path/file.bai
  python main.py format --input data/sample.bai --no-integrity
"""
import argparse
import json
import logging
import sys
from typing import Dict, List, Optional

import bai2_core
from bai2_core.exceptions.exceptions import Bai2Exception
from bai2_core.models.bai2_model import Bai2File
from common import settings
from gcp_services.gcs_service import is_gcs_path, read_file_from_gcs

logger = logging.getLogger(__name__)


def configure_logging(level: str = settings.LOG_LEVEL) -> None:
    # stdout carries command output, so logs go to stderr
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr
    )


def load_file(path: str, check_integrity: bool = settings.CHECK_INTEGRITY,
              strict: bool = settings.STRICT) -> Bai2File:
    """
    Parse and validate a BAI2 file from a local path or a gs:// path.

    Raises:
        Bai2Exception: If the file cannot be parsed or fails validation.
        FileNotFoundError: If the input does not exist.
    """
    logger.info(f"Processing file: {path}")
    options = {
        "strict": strict,
        "chunk_size": settings.READ_CHUNK_SIZE,
        "encoding": settings.ENCODING,
    }

    if is_gcs_path(path):
        bai_file = bai2_core.parse(read_file_from_gcs(path), **options)
    else:
        bai_file = bai2_core.parse_from_file(path, **options)

    bai_file.validate(check_integrity=check_integrity)
    logger.info(f"Validated {path}")
    return bai_file


def summarize(bai_file: Bai2File) -> Dict:
    accounts = [account for group in bai_file.groups for account in group.accounts()]
    return {
        "groups": len(bai_file.groups),
        "accounts": len(accounts),
        "transactions": sum(len(account.children) for account in accounts),
        "records": bai_file.number_of_records,
    }


def run_command(args: argparse.Namespace) -> str:
    bai_file = load_file(args.input, check_integrity=args.check_integrity, strict=args.strict)

    if args.command == "print":
        return bai2_core.write(bai_file)

    if args.command == "format":
        return json.dumps(bai_file.to_dict(), indent=2)

    return json.dumps({"status": "SUCCESS", "filename": args.input, **summarize(bai_file)}, indent=2)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="BAI2 file parser and validator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py parse --input data/sample.bai
  python main.py print --input gs://bucket/path/file.bai
        """
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    commands = {
        "parse": "Parse and validate a file, print a JSON summary",
        "print": "Parse and validate a file, print it back in BAI2 format",
        "format": "Parse and validate a file, print it as JSON",
    }
    for name, help_text in commands.items():
        command = subparsers.add_parser(name, help=help_text)
        command.add_argument("--input", required=True, help="Local path or gs://bucket/blob")
        command.add_argument(
            "--no-integrity",
            dest="check_integrity",
            action="store_false",
            default=settings.CHECK_INTEGRITY,
            help="Skip trailer count and control total checks"
        )
        command.add_argument(
            "--strict",
            action="store_true",
            default=settings.STRICT,
            help="Fail on a group without a group trailer instead of dropping it"
        )
        command.add_argument(
            "--no-strict",
            dest="strict",
            action="store_false",
            default=settings.STRICT,
            help="Drop a group without a group trailer (overrides BAI2_STRICT)"
        )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point.

    Returns:
        Process exit code: 0 on success, 1 on failure.
    """
    args = build_parser().parse_args(argv)

    try:
        print(run_command(args))
        return 0

    except (Bai2Exception, FileNotFoundError, ValueError) as e:
        logger.error(f"Failed to process {args.input}: {e}", exc_info=True)
        error_result = {
            "status": "FAILED",
            "filename": args.input,
            "error": str(e),
            "error_type": type(e).__name__
        }
        if getattr(e, "line_number", None) is not None:
            error_result["line_number"] = e.line_number
        print(json.dumps(error_result, indent=2))
        return 1


def entrypoint() -> None:
    configure_logging()
    sys.exit(main())


if __name__ == "__main__":
    entrypoint()
