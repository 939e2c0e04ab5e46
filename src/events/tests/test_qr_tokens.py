import re
from unittest.mock import patch

import pytest
from freezegun import freeze_time

from events.service import qr_tokens

TOKEN_RE = re.compile(r"^EVT-[0-9A-Z]+-[A-Z2-7]{16}$")


def test_issue_format_is_url_safe() -> None:
    token = qr_tokens.issue()

    assert TOKEN_RE.match(token), token
    assert len(token) <= 64


def test_issue_is_unique_across_many_calls() -> None:
    tokens = {qr_tokens.issue() for _ in range(2000)}

    assert len(tokens) == 2000


@freeze_time("2026-01-01 00:00:00")
def test_issue_encodes_time_component() -> None:
    expected_millis = 1767225600000

    token = qr_tokens.issue()

    _, timestamp, _ = token.split("-")
    assert int(timestamp, 36) == expected_millis


def test_issue_fails_closed_when_randomness_is_unavailable() -> None:
    with patch("events.service.qr_tokens.secrets.token_bytes", side_effect=OSError("no entropy")):
        with pytest.raises(OSError):
            qr_tokens.issue()


def test_render_qr_png_returns_png_bytes() -> None:
    png = qr_tokens.render_qr_png(qr_tokens.issue())

    assert png.startswith(b"\x89PNG\r\n\x1a\n")
