"""Tests for format_alert — golden output, validation, metadata ordering."""

from __future__ import annotations

import contextvars
from datetime import datetime, timezone
from pathlib import Path

import pytest

from src.notifier.context import Metadata, bind_metadata, with_metadata
from src.notifier.exceptions import EmptyMessageError, InvalidSeverityError
from src.notifier.formatter import format_alert, severity_emoji
from src.notifier.severity import Severity

TESTDATA = Path(__file__).parent / "testdata"

_BUILD_DATE = datetime(2020, 1, 1, tzinfo=timezone.utc).strftime("%Y-%m-%d %H:%M:%S")


# ── Helpers ─────────────────────────────────────────────────────


def _golden(name: str) -> str:
    return (TESTDATA / name).read_text(encoding="utf-8")


def _scope(metadata: Metadata | None) -> contextvars.Context:
    scope = contextvars.Context()
    if metadata is not None:
        scope = with_metadata(scope, metadata)
    return scope


# ── Golden output ───────────────────────────────────────────────


class TestGolden:
    def test_without_metadata(self) -> None:
        got = format_alert(Severity.INFO, "test message", _scope(None))
        assert got == _golden("format_alert_without_metadata.golden")

    def test_with_metadata(self) -> None:
        meta = Metadata(
            app_name="test_app",
            instance_name="test_instance",
            commit="test_commit",
            build_date=_BUILD_DATE,
        )
        got = format_alert(Severity.CRITICAL, "test message", _scope(meta))
        assert got == _golden("format_alert_with_metadata.golden")

    def test_metadata_with_missed_app_name(self) -> None:
        meta = Metadata(
            instance_name="test_instance",
            commit="test_commit",
            build_date=_BUILD_DATE,
        )
        got = format_alert(Severity.WARNING, "test message", _scope(meta))
        assert got == _golden("format_alert_metadata_with_missed_app_name.golden")

    def test_metadata_with_empty_fields_has_no_meta_block(self) -> None:
        got = format_alert(Severity.INFO, "test message", _scope(Metadata()))
        assert got == _golden("format_alert_without_metadata.golden")
        assert "Meta" not in got

    def test_metadata_attached_to_none_scope(self) -> None:
        meta = Metadata(
            app_name="test_app",
            instance_name="test_instance",
            commit="test_commit",
            build_date=_BUILD_DATE,
        )
        got = format_alert(Severity.CRITICAL, "test message", with_metadata(None, meta))
        assert got == _golden("format_alert_with_metadata.golden")

    def test_warning_exact(self) -> None:
        got = format_alert(Severity.WARNING, "hi", _scope(Metadata(app_name="app")))
        assert got == (
            "<b>⚠️ Severity:</b> WARNING\n"
            "<b>Alert Message:</b> hi\n"
            "<b>Meta:</b>\n"
            "\t• app_name: app"
        )


# ── Validation ──────────────────────────────────────────────────


class TestValidation:
    def test_empty_message(self) -> None:
        with pytest.raises(EmptyMessageError, match="message is empty"):
            format_alert(Severity.INFO, "", _scope(None))

    def test_empty_message_with_metadata(self) -> None:
        with pytest.raises(EmptyMessageError):
            format_alert(Severity.INFO, "", _scope(Metadata(app_name="app")))

    def test_empty_message_checked_before_severity(self) -> None:
        with pytest.raises(EmptyMessageError):
            format_alert(100, "", _scope(None))

    @pytest.mark.parametrize("raw", [0, -1, 4, 100])
    def test_invalid_severity(self, raw: int) -> None:
        with pytest.raises(InvalidSeverityError) as exc_info:
            format_alert(raw, "msg", _scope(None))
        assert "[INFO WARNING CRITICAL]" in str(exc_info.value)

    def test_invalid_severity_text(self) -> None:
        with pytest.raises(InvalidSeverityError) as exc_info:
            format_alert(100, "msg", _scope(None))
        assert str(exc_info.value) == (
            "'UNKNOWN(100)', should be one of '[INFO WARNING CRITICAL]': invalid severity"
        )

    def test_unknown_member_invalid(self) -> None:
        with pytest.raises(InvalidSeverityError, match=r"UNKNOWN\(0\)"):
            format_alert(Severity.UNKNOWN, "msg", _scope(None))


# ── Rendering details ───────────────────────────────────────────


class TestRendering:
    def test_meta_keys_sorted(self) -> None:
        meta = Metadata(extra={"zeta": "1", "alpha": "2", "mid": "3"}, app_name="app")
        got = format_alert(Severity.INFO, "msg", _scope(meta))
        meta_lines = got.split("<b>Meta:</b>\n", 1)[1].split("\n")
        assert meta_lines == [
            "\t• alpha: 2",
            "\t• app_name: app",
            "\t• mid: 3",
            "\t• zeta: 1",
        ]

    def test_idempotent(self) -> None:
        scope = _scope(Metadata(app_name="app", extra={"b": "2", "a": "1"}))
        first = format_alert(Severity.CRITICAL, "same", scope)
        second = format_alert(Severity.CRITICAL, "same", scope)
        assert first == second

    def test_message_html_escaped(self) -> None:
        got = format_alert(Severity.INFO, "<script> & co", _scope(None))
        assert "&lt;script&gt; &amp; co" in got
        assert "<script>" not in got

    def test_quotes_not_escaped(self) -> None:
        got = format_alert(Severity.INFO, "it's \"fine\"", _scope(None))
        assert "it's \"fine\"" in got

    def test_ambient_metadata_when_scope_omitted(self) -> None:
        with bind_metadata(Metadata(app_name="ambient")):
            got = format_alert(Severity.INFO, "msg")
        assert "\t• app_name: ambient" in got

    def test_explicit_scope_ignores_ambient(self) -> None:
        with bind_metadata(Metadata(app_name="ambient")):
            got = format_alert(Severity.INFO, "msg", contextvars.Context())
        assert "Meta" not in got


class TestHelpers:
    def test_severity_emoji(self) -> None:
        assert severity_emoji(Severity.INFO) == "ℹ️"
        assert severity_emoji(Severity.WARNING) == "⚠️"
        assert severity_emoji(Severity.CRITICAL) == "🚨"
        assert severity_emoji(0) == ""

    def test_existing_entities_escaped_once(self) -> None:
        got = format_alert(Severity.INFO, "&lt; <", contextvars.Context())
        assert "<b>Alert Message:</b> &amp;lt; &lt;" in got
