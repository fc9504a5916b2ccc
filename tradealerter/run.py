"""Main entry point for TradeAlerter."""

import json
import logging
import sys
from typing import List

import click
from rich.console import Console
from rich.logging import RichHandler

from .config import settings
from .digest import DigestFormatter, to_html
from .gazetteer import default_gazetteer
from .notices import Notice
from .notifiers.base import NotificationError
from .notifiers.email import EmailNotifier
from .parser import NoticeParser
from .scraper import AnrOptions, AnrScraper, ScraperError

console = Console()

logger = logging.getLogger(__name__)


class JsonFormatter(logging.Formatter):
    """One JSON object per log record."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "level": record.levelname,
            "time": self.formatTime(record, "%Y-%m-%dT%H:%M:%SZ"),
            "message": record.getMessage(),
            "name": record.name,
        }
        return json.dumps(payload)


def setup_logging(level: str) -> None:
    """Set up logging with Rich handler or JSON lines."""
    log_level = getattr(logging, level.upper())
    if settings.log_json:
        handler = logging.StreamHandler()
        handler.setFormatter(JsonFormatter())
        logging.basicConfig(level=log_level, handlers=[handler], force=True)
    else:
        logging.basicConfig(
            level=log_level,
            format="%(message)s",
            datefmt="[%X]",
            handlers=[RichHandler(console=console, rich_tracebacks=True)],
            force=True,
        )


def create_notifier() -> EmailNotifier:
    """Create and return the configured email notifier.

    Raises:
        ValueError: If SMTP settings are incomplete
    """
    settings.validate_notifier_config()
    return EmailNotifier(
        host=settings.smtp_host or "",
        port=int(settings.smtp_port),
        from_address=settings.email_from_address or "",
        to_addresses=settings.get_email_recipients(),
        username=settings.smtp_username,
        password=settings.smtp_password,
        use_tls=settings.smtp_use_tls,
        subject_prefix=settings.email_subject_prefix,
    )


def collect_notices() -> List[Notice]:
    """Scrape and parse ANR notices using the current settings."""
    gazetteer = default_gazetteer(settings.location_csv_path)
    scraper = AnrScraper(
        AnrOptions(
            base_url=settings.anr_base_url,
            lookback_days=settings.anr_lookback_days,
            timeout=settings.http_timeout_seconds,
        )
    )
    parser = NoticeParser(gazetteer)
    return parser.parse_all(scraper.fetch_notices())


@click.command()
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Print the alert instead of emailing it",
)
@click.option(
    "--all",
    "include_all",
    is_flag=True,
    default=False,
    help="Include notices that are not trading signals",
)
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    default=False,
    help="Print parsed notices as JSON and exit",
)
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Set logging level",
)
def main(dry_run: bool, include_all: bool, as_json: bool, log_level: str) -> None:
    """Scan ANR pipeline notices and email the trading signals."""
    if dry_run:
        settings.dry_run = True
    if log_level:
        settings.log_level = log_level

    setup_logging(settings.log_level)
    logger.info("Starting TradeAlerter notice scan...")

    try:
        notices = collect_notices()
    except ScraperError as e:
        logger.error(f"Failed to collect notices: {e}")
        sys.exit(1)

    selected = notices if include_all else [n for n in notices if n.is_relevant]
    logger.info(f"{len(selected)} of {len(notices)} notices selected")

    if as_json:
        click.echo(json.dumps([n.to_dict() for n in selected], indent=2))
        return

    formatter = DigestFormatter()
    digest_text = formatter.format_digest(selected)

    if settings.dry_run:
        console.print("\n[yellow]DRY RUN - Would send this alert:[/yellow]")
        console.print("=" * 50)
        console.print(digest_text, markup=False)
        console.print("=" * 50)
        return

    if not selected:
        logger.info("No relevant notices to send via email")
        return

    try:
        notifier = create_notifier()
        notifier.send(
            digest_text,
            subject=formatter.subject_line(len(selected)),
            html=to_html(digest_text),
        )
    except (NotificationError, ValueError) as e:
        logger.error(f"Failed to send notification: {e}")
        console.print(f"[red]Notification failed:[/red] {e}")
        sys.exit(1)

    logger.info("Trading alert sent successfully")


if __name__ == "__main__":
    main()
