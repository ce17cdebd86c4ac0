from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from mediafixer.app import run_fix_command
from mediafixer.config import ConfigurationError, configure_logging
from mediafixer.domain.errors import FixAborted
from mediafixer.domain.filters import parse_upload_date
from mediafixer.domain.reconciliation import DEFAULT_BATCH_SIZE, FixSettings, split_list

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import date
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Audit and repair WordPress media titles")
    subparsers = parser.add_subparsers(dest="command", required=True)

    fix = subparsers.add_parser("fix", help="Fix weird attachment titles and alt text")
    fix.add_argument(
        "--execute",
        action="store_true",
        help="Persist changes (default is a dry run)",
    )
    fix.add_argument(
        "--update-alt",
        action="store_true",
        help="Also repair missing or weird alt text",
    )
    fix.add_argument(
        "--include-keyword",
        type=str,
        default="",
        help="Keyword appended to derived titles",
    )
    fix.add_argument(
        "--food-cats",
        type=str,
        default=None,
        help="Comma separated category slugs that allow the keyword",
    )
    fix.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Maximum number of attachments to scan",
    )
    fix.add_argument(
        "--batch-size",
        type=int,
        default=DEFAULT_BATCH_SIZE,
        help="Attachments per page (minimum 50, default: %(default)s)",
    )
    fix.add_argument(
        "--min-title-length",
        type=int,
        default=None,
        help="Titles shorter than this are weird (default: 3)",
    )
    fix.add_argument(
        "--search-parent",
        action="store_true",
        help="Look up content that embeds orphaned attachments (slow)",
    )
    fix.add_argument(
        "--mapping",
        type=str,
        default=None,
        help="CSV file with attachment_id, proposed_title, proposed_alt columns",
    )
    fix.add_argument(
        "--mime-include",
        type=str,
        default=None,
        help="Comma separated MIME types to process",
    )
    fix.add_argument(
        "--mime-exclude",
        type=str,
        default=None,
        help="Comma separated MIME types to skip",
    )
    fix.add_argument(
        "--uploaded-after",
        type=str,
        default=None,
        help="Only attachments uploaded after this day (YYYY-MM-DD)",
    )
    fix.add_argument(
        "--uploaded-before",
        type=str,
        default=None,
        help="Only attachments uploaded before this day (YYYY-MM-DD)",
    )
    fix.add_argument(
        "--backend",
        choices=("database", "rest"),
        default="database",
        help="Where the media library lives (default: %(default)s)",
    )
    fix.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    return parser.parse_args(list(argv))


def _parse_date_bound(value: str | None) -> date | None:
    if not value:
        return None
    try:
        return parse_upload_date(value)
    except ConfigurationError as exc:
        log.warning("%s. Ignoring.", exc)
        return None


def _build_settings(args: argparse.Namespace) -> FixSettings:
    return FixSettings.build(
        execute=args.execute,
        update_alt=args.update_alt,
        search_parent=args.search_parent,
        include_keyword=args.include_keyword,
        keyword_categories=split_list(args.food_cats),
        limit=args.limit,
        batch_size=args.batch_size,
        min_length=args.min_title_length,
        mime_include=split_list(args.mime_include),
        mime_exclude=split_list(args.mime_exclude),
        uploaded_after=_parse_date_bound(args.uploaded_after),
        uploaded_before=_parse_date_bound(args.uploaded_before),
    )


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)
    settings = _build_settings(parsed_args)

    try:
        run_fix_command(
            settings,
            backend=parsed_args.backend,
            mapping_path=parsed_args.mapping,
        )
    except FixAborted as exc:
        log.error("Run aborted: %s", exc)  # noqa: TRY400
        log.error(exc.summary.describe())  # noqa: TRY400
        sys.exit(1)
    except ConfigurationError:
        log.exception("Configuration error")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error during fix")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
