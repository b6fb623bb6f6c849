"""Command line interface: ``repcon PATH [options]``."""
from __future__ import annotations

import argparse
import sys
from typing import Optional, Sequence

from pydantic import ValidationError

from .config import (
    DEFAULT_MAX_FILE_SIZE,
    DEFAULT_MAX_FILES,
    DEFAULT_OUTPUT_DIRECTORY,
    DEFAULT_OUTPUT_NAME,
    CondenseSettings,
)
from .logging_config import configure_logging
from .paginate import CapacityTooSmallError, ContainerWriteError
from .service import condense
from .sizing import SizeLimitExceededError

EXIT_OK = 0
EXIT_SIZE_LIMIT = 1
EXIT_CONFIG = 2
EXIT_IO = 3

_UPLOAD_FROM_ENV = ""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="repcon",
        description="Repo Condenser - condense repository files into size-bounded text containers.",
    )
    parser.add_argument("path_to_repo", help="Path to the repository's root directory")
    parser.add_argument(
        "-o", "--output", default=DEFAULT_OUTPUT_DIRECTORY, help="Directory the containers are written to"
    )
    parser.add_argument("-n", "--name", default=DEFAULT_OUTPUT_NAME, help="Base name of the generated containers")
    parser.add_argument(
        "-i",
        "--ignore",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Glob pattern to ignore (repeatable)",
    )
    parser.add_argument(
        "--ignore-file", default=None, help="Ignore file to read patterns from (default: <repo>/.repconignore)"
    )
    parser.add_argument(
        "--hidden", action="store_true", help="Include dot-files and dot-directories (skipped by default)"
    )
    parser.add_argument("-f", "--max-files", type=int, default=DEFAULT_MAX_FILES, help="Maximum number of containers")
    parser.add_argument(
        "-s", "--max-file-size", type=int, default=DEFAULT_MAX_FILE_SIZE, help="Maximum size of one container in bytes"
    )
    parser.add_argument(
        "-u",
        "--upload",
        nargs="?",
        const=_UPLOAD_FROM_ENV,
        default=None,
        metavar="API_KEY",
        help="Upload the containers; without a key OPENAI_API_KEY is used",
    )
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    try:
        settings = CondenseSettings(
            path_to_repo=args.path_to_repo,
            output_directory=args.output,
            output_name=args.name,
            ignore_patterns=args.ignore,
            ignore_file=args.ignore_file,
            include_hidden=args.hidden,
            max_files=args.max_files,
            max_file_size=args.max_file_size,
            upload=args.upload is not None,
            api_key=args.upload or None,
        )
    except ValidationError as exc:
        print(f"Error: invalid options: {exc}", file=sys.stderr)
        return EXIT_CONFIG

    print(f"Repository Path: {settings.path_to_repo}")
    try:
        report = condense(settings)
    except SizeLimitExceededError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_SIZE_LIMIT
    except (CapacityTooSmallError, NotADirectoryError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_CONFIG
    except ContainerWriteError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_IO

    print(f"Total size: {report.total_size_human} in {report.file_count} file(s)")
    for path in report.containers:
        print(f"Generated: {path}")
    for warning in report.warnings:
        print(f"Warning: {warning.identifier}: {warning.stage.value}: {warning.reason}", file=sys.stderr)
    for upload in report.uploads:
        status = f"uploaded as {upload.file_id}" if upload.ok else f"upload failed ({upload.detail})"
        print(f"{upload.path}: {status}")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
