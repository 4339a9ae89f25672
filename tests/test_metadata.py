"""Tests for tool display metadata."""

from openclaw.tools.metadata import (
    extract_result_url,
    should_suppress_output,
    tool_icon,
    tool_label,
)


def test_known_tool_display() -> None:
    """Known tools have their own icon and labels."""
    assert tool_icon("google_gmail_send") == "google.gmail"
    assert tool_label("google_gmail_send", complete=False) == "Sending email..."
    assert tool_label("google_gmail_send", complete=True) == "Email sent"


def test_unknown_tool_display() -> None:
    """Unknown tools fall back to a generic icon and labels."""
    assert tool_icon("mystery") == "gearshape"
    assert tool_label("mystery", complete=False) == "Working..."
    assert tool_label("mystery", complete=True) == "Done"


def test_extract_explicit_url_marker_first() -> None:
    """``URL:`` markers win over bare links earlier in the text."""
    output = "See https://mail.google.com/mail/u/0 and\nURL: https://www.notion.so/page-1"

    assert extract_result_url(output) == "https://www.notion.so/page-1"


def test_extract_strips_trailing_punctuation() -> None:
    """Sentence punctuation after a link is not part of it."""
    output = "Created https://docs.google.com/spreadsheets/d/xyz)."

    assert extract_result_url(output) == "https://docs.google.com/spreadsheets/d/xyz"


def test_extract_github_issue() -> None:
    """GitHub issue and pull request links are recognised."""
    output = "Opened https://github.com/acme/app/issues/42 for you"

    assert extract_result_url(output) == "https://github.com/acme/app/issues/42"


def test_extract_no_url() -> None:
    """Plain output has no link."""
    assert extract_result_url("no links here") is None


def test_suppress_browser_output() -> None:
    """Only the browser tool's output is withheld from clients."""
    assert should_suppress_output("browser")
    assert not should_suppress_output("run_bash_command")
