"""Shared fixtures for propsheet_core tests."""

import pytest

SAMPLE_SHEET = """\
SEPTEMBER 2025 RESIDENTIAL SALE LIST
SOUTH DELHI
VASANT VIHAR
A-12  200 YD 3BR GF
B-5 150 SQFT 2BR contact 9876543210
C-7 400 YD BMT+GF+FF+SF READY @ 45
D-2 4BHK FF
GREATER KAILASH
12B 250 GAJ TF TERR owner Ramesh Kumar 98765-43210
Page 2
3
E-9 300 YD STILT+4 U/C
"""


@pytest.fixture
def sample_sheet() -> str:
    """A small two-area listing sheet with headers, noise and contacts."""
    return SAMPLE_SHEET
