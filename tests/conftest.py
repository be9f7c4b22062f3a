"""Shared test fixtures for the srt_decoder test suite.

WHY: Most test modules need the same small SubRip documents: a clean two
record file, the same file with a broken record in the middle, and
encoded variants. Centralizing them keeps every module on identical data.

HOW: Module-level constants hold the documents as text; fixtures return
them encoded as bytes, the way the decoder receives them.

RULES:
- SAMPLE_SRT has no trailing newline, matching files cut by hand
- Expected values for SAMPLE_SRT are asserted in test_parser.py
"""

import codecs

import pytest

SAMPLE_SRT = (
    "1433\n"
    "01:04:00,705 --> 01:04:02,145\n"
    "It's only after\n"
    "we've lost everything\n"
    "\n"
    "1434\n"
    "01:04:02,170 --> 01:04:04,190\n"
    "that we're free to do anything."
)

BROKEN_POSITION_SRT = (
    "1\n"
    "00:00:01,000 --> 00:00:02,000\n"
    "First\n"
    "\n"
    "1b\n"
    "00:00:03,000 --> 00:00:04,000\n"
    "Lost\n"
    "\n"
    "3\n"
    "00:00:05,000 --> 00:00:06,000\n"
    "Third\n"
)

BROKEN_TIMECODE_SRT = (
    "1\n"
    "00:00:00,000\n"
    "Broken\n"
    "still broken\n"
    "\n"
    "2\n"
    "00:00:01,500 --> 00:00:03,000\n"
    "Recovered\n"
)

BOMS = {
    "utf-8": codecs.BOM_UTF8,
    "utf-16-be": codecs.BOM_UTF16_BE,
    "utf-16-le": codecs.BOM_UTF16_LE,
}


@pytest.fixture
def sample_bytes():
    """The two-record sample encoded as UTF-8 without a BOM."""
    return SAMPLE_SRT.encode("utf-8")


@pytest.fixture
def broken_position_bytes():
    return BROKEN_POSITION_SRT.encode("utf-8")


@pytest.fixture
def broken_timecode_bytes():
    return BROKEN_TIMECODE_SRT.encode("utf-8")


@pytest.fixture(params=sorted(BOMS))
def bom_encoded_sample(request):
    """The sample with a byte-order-mark, once per recognized encoding.

    Returns:
        Tuple of (codec name, encoded bytes including the mark).
    """
    codec = request.param
    return codec, BOMS[codec] + SAMPLE_SRT.encode(codec)
