# tests/services/test_messages.py
"""Tests for direct message text cleanup."""

import pytest

from veilpost.services.messages import strip_markup


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("<b>bold</b> move", "bold move"),
        ("hi <script>alert(1)</script>there", "hi there"),
        ("hi <STYLE type='x'>p {}</style>there", "hi there"),
        ("before <script>alert(1)", "before "),
        ("trailing <script", "trailing "),
        ("<img src=x onerror=alert(1)>", ""),
        ("<!-- note -->kept", "kept"),
        ("I <3 this", "I <3 this"),
        ("2 < 3 and 5 > 4", "2 < 3 and 5 > 4"),
    ],
)
def test_strip_markup(raw, expected) -> None:
    assert strip_markup(raw) == expected
