"""Render an alert into the HTML subset understood by Telegram."""

from __future__ import annotations

from contextvars import Context, copy_context
from html import escape as html_escape

from src.notifier.context import metadata_from_scope
from src.notifier.exceptions import EmptyMessageError, InvalidSeverityError
from src.notifier.severity import ALLOWED_SEVERITIES, Severity, severity_label

_SEVERITY_EMOJI: dict[Severity, str] = {
    Severity.INFO: "ℹ️",
    Severity.WARNING: "⚠️",
    Severity.CRITICAL: "🚨",
}


def severity_emoji(severity: int) -> str:
    """Glyph shown in front of the severity line ("" for invalid values)."""
    if not Severity.is_valid(severity):
        return ""
    return _SEVERITY_EMOJI[Severity(severity)]


def format_alert(
    severity: int,
    message: str,
    scope: Context | None = None,
) -> str:
    """Build the alert body.

    Args:
        severity: One of the valid :class:`Severity` members.
        message: Alert text. Escaped before rendering.
        scope: Context to read metadata from. None means the current
            context, so metadata bound with ``bind_metadata`` is picked up.

    Returns:
        The rendered body, without a trailing newline.

    Raises:
        EmptyMessageError: *message* is empty.
        InvalidSeverityError: *severity* is not a valid member.
    """
    if message == "":
        raise EmptyMessageError()

    if not Severity.is_valid(severity):
        raise InvalidSeverityError(severity_label(severity), ALLOWED_SEVERITIES)

    if scope is None:
        scope = copy_context()

    lines = [
        f"<b>{severity_emoji(severity)} Severity:</b> {severity_label(severity)}",
        f"<b>Alert Message:</b> {html_escape(message, quote=False)}",
    ]

    metadata = metadata_from_scope(scope)
    meta = metadata.to_dict() if metadata is not None else {}
    if meta:
        lines.append("<b>Meta:</b>")
        lines.extend(f"\t• {key}: {meta[key]}" for key in sorted(meta))

    return "\n".join(lines)
