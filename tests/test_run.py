"""Tests for tradealerter/run.py - command line runner."""

import json
import logging
from datetime import datetime, timezone
from typing import Any

import pytest
from click.testing import CliRunner

from tradealerter.config import Settings
from tradealerter.notices import NoticeType, RawNotice
from tradealerter.notifiers.base import NotificationError
from tradealerter.notifiers.email import EmailNotifier
from tradealerter.run import JsonFormatter, collect_notices, create_notifier, main
from tradealerter.scraper import ScraperError


@pytest.fixture
def settings(mocker: Any) -> Settings:
    test_settings = Settings(
        _env_file=None,
        smtp_host="smtp.example.com",
        email_from_address="alerts@example.com",
        email_to="desk@example.com, risk@example.com",
        dry_run=False,
        log_json=False,
    )
    mocker.patch("tradealerter.run.settings", test_settings)
    mocker.patch("tradealerter.run.setup_logging")
    return test_settings


@pytest.fixture
def notices(make_notice):
    return [
        make_notice(type=NoticeType.MAINTENANCE, subject="Sandwich work", id=1),
        make_notice(subject="Rate posting", id=2),
    ]


class TestCreateNotifier:
    """Tests for notifier creation."""

    def test_create_notifier(self, settings: Settings) -> None:
        notifier = create_notifier()

        assert isinstance(notifier, EmailNotifier)
        assert notifier.host == "smtp.example.com"
        assert notifier.to_addresses == ["desk@example.com", "risk@example.com"]

    def test_create_notifier_misconfigured(self, settings: Settings) -> None:
        settings.smtp_host = None

        with pytest.raises(ValueError, match="SMTP_HOST"):
            create_notifier()


class TestMain:
    """Tests for the click entry point."""

    def test_sends_relevant_notices(self, settings, notices, mocker: Any) -> None:
        mocker.patch("tradealerter.run.collect_notices", return_value=notices)
        notifier = mocker.Mock()
        mocker.patch("tradealerter.run.create_notifier", return_value=notifier)

        result = CliRunner().invoke(main, [])

        assert result.exit_code == 0
        notifier.send.assert_called_once()
        text = notifier.send.call_args.args[0]
        kwargs = notifier.send.call_args.kwargs
        assert "Sandwich work" in text
        assert "Rate posting" not in text
        assert kwargs["subject"] == "Trading Alert: 1 Pipeline Notice Detected"
        assert kwargs["html"].startswith("<div")

    def test_include_all(self, settings, notices, mocker: Any) -> None:
        mocker.patch("tradealerter.run.collect_notices", return_value=notices)
        notifier = mocker.Mock()
        mocker.patch("tradealerter.run.create_notifier", return_value=notifier)

        result = CliRunner().invoke(main, ["--all"])

        assert result.exit_code == 0
        assert "Rate posting" in notifier.send.call_args.args[0]

    def test_dry_run_does_not_send(self, settings, notices, mocker: Any) -> None:
        mocker.patch("tradealerter.run.collect_notices", return_value=notices)
        create = mocker.patch("tradealerter.run.create_notifier")

        result = CliRunner().invoke(main, ["--dry-run"])

        assert result.exit_code == 0
        assert "DRY RUN" in result.output
        assert "Sandwich work" in result.output
        create.assert_not_called()

    def test_json_output(self, settings, notices, mocker: Any) -> None:
        mocker.patch("tradealerter.run.collect_notices", return_value=notices)
        create = mocker.patch("tradealerter.run.create_notifier")

        result = CliRunner().invoke(main, ["--json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert [item["id"] for item in data] == [1]
        assert data[0]["type"] == "Maintenance"
        create.assert_not_called()

    def test_nothing_relevant_skips_email(self, settings, make_notice, mocker):
        mocker.patch("tradealerter.run.collect_notices", return_value=[make_notice()])
        create = mocker.patch("tradealerter.run.create_notifier")

        result = CliRunner().invoke(main, [])

        assert result.exit_code == 0
        create.assert_not_called()

    def test_scraper_failure_exits(self, settings, mocker: Any) -> None:
        mocker.patch(
            "tradealerter.run.collect_notices",
            side_effect=ScraperError("ANR notice search failed: timeout"),
        )

        result = CliRunner().invoke(main, [])

        assert result.exit_code == 1

    def test_notification_failure_exits(self, settings, notices, mocker) -> None:
        mocker.patch("tradealerter.run.collect_notices", return_value=notices)
        notifier = mocker.Mock()
        notifier.send.side_effect = NotificationError("Email notification failed")
        mocker.patch("tradealerter.run.create_notifier", return_value=notifier)

        result = CliRunner().invoke(main, [])

        assert result.exit_code == 1

    def test_log_level_option(self, settings, mocker: Any) -> None:
        mocker.patch("tradealerter.run.collect_notices", return_value=[])

        result = CliRunner().invoke(main, ["--log-level", "DEBUG", "--dry-run"])

        assert result.exit_code == 0
        assert settings.log_level == "DEBUG"


class TestJsonFormatter:
    """Tests for JSON-lines log output."""

    def test_format(self) -> None:
        record = logging.LogRecord(
            "tradealerter.scraper", logging.INFO, __file__, 1, "Fetched %d", (3,), None
        )

        payload = json.loads(JsonFormatter().format(record))

        assert payload["level"] == "INFO"
        assert payload["message"] == "Fetched 3"
        assert payload["name"] == "tradealerter.scraper"


class TestCollectNotices:
    """Tests for the scrape and parse step."""

    def test_uses_shared_gazetteer(self, settings, gazetteer, mocker: Any) -> None:
        shared = mocker.patch(
            "tradealerter.run.default_gazetteer", return_value=gazetteer
        )
        scraper_cls = mocker.patch("tradealerter.run.AnrScraper")
        scraper_cls.return_value.fetch_notices.return_value = [
            RawNotice(
                id=7,
                subject="Compressor work",
                body="Work at Sandwich, capped at 75 MMcf/d",
                category="Maint",
                timestamp=datetime.now(timezone.utc),
                link="https://ebb.anrpl.com/Notices/NoticeView.asp?sNoticeId=7",
            )
        ]

        notices = collect_notices()

        shared.assert_called_once_with(settings.location_csv_path)
        assert [n.location for n in notices] == ["Sandwich"]
        assert notices[0].type == NoticeType.MAINTENANCE
