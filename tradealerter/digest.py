"""Trading alert digest formatting for relevant notices."""

import html
from typing import List, Sequence

from .notices import Notice

SEPARATOR = "-" * 40
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S %z"


def _plural(count: int) -> str:
    return "s" if count != 1 else ""


def format_volume(volume) -> str:
    """Format a MMBtu/d volume for display, e.g. 155,700 -> '155,700 MMBtu/d'."""
    if volume is None:
        return "N/A"
    return f"{volume:,.0f} MMBtu/d"


class DigestFormatter:
    """Renders relevant notices as a plain-text alert."""

    def subject_line(self, count: int) -> str:
        return f"Trading Alert: {count} Pipeline Notice{_plural(count)} Detected"

    def format_notice(self, notice: Notice) -> List[str]:
        lines = [
            f"Pipeline: {notice.pipeline.value}",
            f"Type: {notice.type.value}",
            f"Summary: {notice.subject}",
            f"Location: {notice.location}",
            f"Timestamp: {notice.timestamp.strftime(TIMESTAMP_FORMAT)}",
        ]
        if notice.curtailment_volume is not None:
            lines.append(
                f"Curtailment Volume: {format_volume(notice.curtailment_volume)}"
            )
        reasons = notice.relevance_reasons()
        if reasons:
            lines.append(f"Matched: {', '.join(reasons)}")
        lines.append(f"Link: {notice.link}")
        return lines

    def format_digest(self, notices: Sequence[Notice]) -> str:
        """Format notices newest first.

        Args:
            notices: Notices to include (normally only relevant ones)

        Returns:
            Plain-text digest
        """
        if not notices:
            return "No relevant pipeline notices."

        count = len(notices)
        lines = [
            "TRADING ALERT - Pipeline Curtailment Notices",
            "=" * 44,
            "",
            f"Detected {count} relevant notice{_plural(count)} "
            "requiring trader attention:",
            "",
        ]

        for notice in sorted(notices, key=lambda n: n.timestamp, reverse=True):
            lines.extend(self.format_notice(notice))
            lines.extend(["", SEPARATOR, ""])

        lines.append("This is an automated alert from the TradeAlerter system.")
        return "\n".join(lines)


def to_html(text: str) -> str:
    """Convert a plain-text digest to lightweight HTML."""
    html_lines: List[str] = []
    for line in (text or "").splitlines():
        stripped = line.strip()
        if not stripped:
            html_lines.append("<br/>")
        elif stripped.startswith("Link: "):
            url = html.escape(stripped[len("Link: ") :], quote=True)
            html_lines.append(f'<p>Link: <a href="{url}">{url}</a></p>')
        elif set(stripped) <= {"-", "="}:
            html_lines.append("<hr/>")
        else:
            html_lines.append(f"<p>{html.escape(stripped)}</p>")

    body = "\n".join(html_lines)
    return (
        "<div style=\"font-family: 'Segoe UI', 'Helvetica Neue', Arial, sans-serif;"
        ' font-size: 14px; line-height: 1.5; color: #111;">'
        f"{body}"
        "</div>"
    )
