"""Tests for the Record Parser state machine and the streaming iterator.

WHY: This is the contract every collaborator depends on: records come out
in order, each malformed block costs exactly one error and nothing else,
and the stream ends only at the end of input.

HOW: Drives srt_decoder.open() and SubRipParser over the shared sample
documents from conftest.py, including byte-order-marked variants, and
steps the state machine directly for the resync transition.

RULES:
- Expected values for the 1433/1434 sample are the reference output
- Errors are checked by kind; message text only where callers rely on it
"""

import io

import pytest

import srt_decoder
from srt_decoder import ErrorKind, ParserState, SubRip, SubRipError, TextEncoding, Timecode
from srt_decoder.core.parser import SubRipParser


def _entries(data, **kwargs):
    return list(srt_decoder.open(data, **kwargs))


class TestSampleDocument:
    """The two-record reference sample decodes exactly."""

    def test_yields_two_records_then_ends(self, sample_bytes):
        parser = srt_decoder.open(sample_bytes)

        first = next(parser)
        assert first == SubRip(
            position=1433,
            start=Timecode(1, 4, 0, 705),
            end=Timecode(1, 4, 2, 145),
            text=(b"It's only after", b"we've lost everything"),
        )

        second = next(parser)
        assert second.position == 1434
        assert second.start == Timecode(1, 4, 2, 170)
        assert second.end == Timecode(1, 4, 4, 190)
        assert second.text == (b"that we're free to do anything.",)

        with pytest.raises(StopIteration):
            next(parser)

    def test_crlf_input_gives_same_records(self, sample_bytes):
        crlf = sample_bytes.replace(b"\n", b"\r\n")
        assert _entries(crlf) == _entries(sample_bytes)

    def test_extra_blank_lines_between_records(self, sample_bytes):
        padded = b"\n\n" + sample_bytes.replace(b"\n\n", b"\n\n\n\n") + b"\n\n\n"
        assert _entries(padded) == _entries(sample_bytes)

    def test_determinism_across_copies(self, sample_bytes):
        first = _entries(bytes(sample_bytes))
        second = _entries(bytearray(sample_bytes))
        assert first == second
        assert len(first) == 2


class TestEncodings:

    def test_no_mark_matches_manual_utf8_decode(self):
        text = "\u00c7a m'\u00e9tonnerait \u2014 vraiment."
        data = "1\n00:00:01,000 --> 00:00:02,000\n{}\n".format(text).encode("utf-8")

        (record,) = _entries(data)
        assert record.encoding is TextEncoding.UTF8
        assert record.lines == (text,)
        assert record.lines[0] == record.text[0].decode("utf-8")

    def test_mark_is_stripped(self, bom_encoded_sample):
        codec, data = bom_encoded_sample

        entries = _entries(data)
        assert [entry.position for entry in entries] == [1433, 1434]
        first = entries[0]
        assert first.encoding.value == codec
        assert first.lines[0] == "It's only after"
        assert not first.lines[0].startswith("\ufeff")

    def test_invalid_bytes_are_kept_raw(self):
        data = b"7\n00:00:01,000 --> 00:00:02,000\nna\xefve\n"

        (record,) = _entries(data)
        assert record.text == (b"na\xefve",)
        assert record.lines == ("na\ufffdve",)


class TestEmptyInput:

    def test_empty_stream_yields_nothing(self):
        assert _entries(b"") == []

    def test_only_blank_lines_yield_nothing(self):
        assert _entries(b"\n\r\n\n") == []

    def test_empty_stream_never_detects_encoding(self):
        parser = srt_decoder.open(b"")
        assert list(parser) == []
        assert parser.encoding is None


class TestInvalidPosition:

    def test_one_error_then_resume(self, broken_position_bytes):
        entries = _entries(broken_position_bytes)

        assert len(entries) == 3
        assert isinstance(entries[0], SubRip)
        assert entries[0].position == 1

        error = entries[1]
        assert isinstance(error, SubRipError)
        assert error.kind is ErrorKind.INVALID_POSITION
        assert str(error).startswith("invalid position: ")
        assert isinstance(error.error, ValueError)
        assert error.__cause__ is error.error

        assert entries[2].position == 3
        assert entries[2].lines == ("Third",)

    def test_position_not_required_to_be_increasing(self):
        data = (
            b"5\n00:00:01,000 --> 00:00:02,000\na\n\n"
            b"5\n00:00:03,000 --> 00:00:04,000\nb\n\n"
            b"2\n00:00:05,000 --> 00:00:06,000\nc\n"
        )
        assert [entry.position for entry in _entries(data)] == [5, 5, 2]


class TestInvalidTimecode:

    def test_incomplete_timecode_then_resume(self, broken_timecode_bytes):
        entries = _entries(broken_timecode_bytes)

        assert len(entries) == 2
        assert isinstance(entries[0], SubRipError)
        assert entries[0].kind is ErrorKind.INVALID_TIMECODE
        assert str(entries[0]) == "invalid timecode: wrong timecode format"

        assert entries[1] == SubRip(
            position=2,
            start=Timecode(0, 0, 1, 500),
            end=Timecode(0, 0, 3, 0),
            text=(b"Recovered",),
        )

    def test_blank_timing_line_does_not_swallow_next_record(self):
        data = (
            b"1\n\n"
            b"2\n00:00:01,000 --> 00:00:02,000\nkept\n"
        )
        entries = _entries(data)

        assert [type(entry) for entry in entries] == [SubRipError, SubRip]
        assert entries[0].kind is ErrorKind.INVALID_TIMECODE
        assert entries[1].position == 2

    def test_end_of_stream_after_position(self):
        entries = _entries(b"1\n")

        assert len(entries) == 1
        assert entries[0].kind is ErrorKind.INVALID_TIMECODE
        assert "unexpected end of stream" in str(entries[0])

    def test_strict_mode_rejects_negative_fields(self):
        data = b"1\n00:-1:-58,-240 --> 00:-1:-55,-530\nnegative\n"

        (lenient,) = _entries(data, strict=False)
        assert lenient.start == Timecode(0, -1, -58, -240)

        (strict,) = _entries(data, strict=True)
        assert strict.kind is ErrorKind.INVALID_TIMECODE


class TestInvalidText:

    def test_strict_decoding_reports_invalid_text(self):
        data = (
            b"1\n00:00:01,000 --> 00:00:02,000\ngood\nba\xffd\nrest\n\n"
            b"2\n00:00:03,000 --> 00:00:04,000\nnext\n"
        )
        entries = _entries(data, errors="strict")

        assert entries[0].kind is ErrorKind.INVALID_TEXT
        assert entries[1].position == 2
        assert len(entries) == 2

    def test_lossy_decoding_never_reports_invalid_text(self):
        data = b"1\n00:00:01,000 --> 00:00:02,000\nba\xffd\n"
        (record,) = _entries(data)
        assert isinstance(record, SubRip)


class TestMissingText:

    def test_record_without_text_is_dropped(self):
        data = (
            b"1\n00:00:01,000 --> 00:00:02,000\n\n"
            b"2\n00:00:03,000 --> 00:00:04,000\nkept\n"
        )
        entries = _entries(data)

        assert len(entries) == 1
        assert entries[0].position == 2

    def test_record_without_text_at_end_of_stream(self):
        assert _entries(b"1\n00:00:01,000 --> 00:00:02,000\n") == []


class TestStateMachine:
    """The resync transition is an explicit, observable state."""

    def test_resync_state_after_error(self, broken_position_bytes):
        parser = srt_decoder.open(broken_position_bytes)

        next(parser)
        assert parser.state is ParserState.AWAIT_POSITION

        error = next(parser)
        assert error.kind is ErrorKind.INVALID_POSITION
        assert parser.state is ParserState.RESYNC

        assert next(parser).position == 3
        assert parser.parse_next() is None
        assert parser.state is ParserState.EXHAUSTED

    def test_pull_reads_only_one_record(self, sample_bytes):
        stream = io.BytesIO(sample_bytes)
        parser = SubRipParser(stream)

        next(parser)
        assert stream.tell() < len(sample_bytes)


class TestRecordsHelper:

    def test_errors_go_to_callback(self, broken_position_bytes):
        seen = []
        parser = srt_decoder.open(broken_position_bytes)

        positions = [record.position for record in parser.records(on_error=seen.append)]
        assert positions == [1, 3]
        assert [error.kind for error in seen] == [ErrorKind.INVALID_POSITION]

    def test_errors_dropped_without_callback(self, broken_position_bytes):
        records = list(srt_decoder.open(broken_position_bytes).records())
        assert len(records) == 2


class _BrokenPipe(io.RawIOBase):
    """Serves some bytes, then fails like a closed pipe."""

    def __init__(self, data):
        self._data = data

    def readable(self):
        return True

    def readinto(self, buffer):
        if not self._data:
            raise OSError("broken pipe")
        size = min(len(buffer), len(self._data))
        buffer[:size] = self._data[:size]
        self._data = self._data[size:]
        return size


class TestResources:

    def test_io_error_propagates_and_ends_iteration(self):
        parser = SubRipParser(_BrokenPipe(b"1\n00:00:01,000 --> 00:00:02,000\n"))

        with pytest.raises(OSError, match="broken pipe"):
            next(parser)
        assert parser.state is ParserState.EXHAUSTED
        with pytest.raises(StopIteration):
            next(parser)

    def test_path_source_is_closed(self, tmp_path, sample_bytes):
        path = tmp_path / "movie.srt"
        path.write_bytes(sample_bytes)

        with srt_decoder.open(path) as parser:
            first = next(parser)
            stream = parser._source
        assert first.position == 1433
        assert stream.closed
        assert list(parser) == []

    def test_caller_stream_is_left_open(self, sample_bytes):
        stream = io.BytesIO(sample_bytes)
        with srt_decoder.open(stream) as parser:
            next(parser)
        assert not stream.closed

    def test_path_source_released_when_exhausted(self, tmp_path, sample_bytes):
        path = tmp_path / "movie.srt"
        path.write_bytes(sample_bytes)
        parser = srt_decoder.open(path)
        stream = parser._source

        assert len(list(parser)) == 2
        assert stream.closed
        assert parser.state is ParserState.EXHAUSTED
        assert parser.encoding is TextEncoding.UTF8

    def test_records_helper_releases_source(self, tmp_path, broken_position_bytes):
        path = tmp_path / "broken.srt"
        path.write_bytes(broken_position_bytes)
        parser = srt_decoder.open(path)
        stream = parser._source

        assert [record.position for record in parser.records()] == [1, 3]
        assert stream.closed

    def test_owned_source_released_after_io_error(self):
        stream = _BrokenPipe(b"1\n00:00:01,000 --> 00:00:02,000\n")
        parser = SubRipParser(stream, owns_source=True)

        with pytest.raises(OSError, match="broken pipe"):
            next(parser)
        assert stream.closed

    def test_caller_stream_left_open_when_exhausted(self, sample_bytes):
        stream = io.BytesIO(sample_bytes)
        assert len(list(srt_decoder.open(stream))) == 2
        assert not stream.closed


class TestDecodePolicyValidation:
    """An unknown decode error policy is rejected before anything is read."""

    def test_open_bytes_rejects_unknown_policy(self):
        with pytest.raises(ValueError, match="Unknown decode error policy"):
            srt_decoder.open(b"", errors="ignore")

    def test_open_stream_rejects_unknown_policy(self, sample_bytes):
        stream = io.BytesIO(sample_bytes)
        with pytest.raises(ValueError, match="Unknown decode error policy"):
            srt_decoder.open(stream, errors="ignore")
        assert stream.tell() == 0

    def test_open_path_rejects_unknown_policy(self, tmp_path, sample_bytes):
        path = tmp_path / "movie.srt"
        path.write_bytes(sample_bytes)
        with pytest.raises(ValueError, match="Unknown decode error policy"):
            srt_decoder.open(path, errors="ignore")
