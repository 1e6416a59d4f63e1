"""Tests for the native timeline serializer."""

import io

import pytest

from nanoscope.models import Event
from nanoscope.timeline import TimelineError, save_timeline, write_timeline


def _span(name, start, end):
    duration = end - start
    return Event(name, start, True, duration), Event(name, end, False, duration)


class TestWriteTimeline:
    """Tests for write_timeline()."""

    def test_single_span(self):
        """Test that one span gives a push at 0 and a pop at its duration."""
        out = io.StringIO()
        count = write_timeline(_span("foo", 7_000.0, 7_250.0), out)
        assert out.getvalue() == "0:+foo\n250:POP\n"
        assert count == 2

    def test_nested_spans(self):
        """Test offsets relative to the first event for nested spans."""
        outer_start, outer_end = _span("outer", 100.0, 500.0)
        inner_start, inner_end = _span("inner", 200.0, 300.0)
        out = io.StringIO()
        write_timeline([outer_start, inner_start, inner_end, outer_end], out)
        assert out.getvalue().splitlines() == [
            "0:+outer",
            "100:+inner",
            "200:POP",
            "400:POP",
        ]

    def test_offsets_truncate_to_integers(self):
        """Test that fractional nanoseconds are truncated."""
        out = io.StringIO()
        write_timeline(
            [Event("a", 1000.9, True, 1000.8), Event("a", 2001.7, False, 1000.8)], out
        )
        assert out.getvalue() == "0:+a\n1001:POP\n"

    def test_name_kept_verbatim(self):
        """Test that names with separators are written unchanged."""
        out = io.StringIO()
        write_timeline(_span("com.example.Foo.bar(int, String):void", 0.0, 1.0), out)
        assert out.getvalue().startswith("0:+com.example.Foo.bar(int, String):void\n")

    def test_input_order_preserved(self):
        """Test that spans sharing an instant keep the order they were given in."""
        first = _span("first", 10.0, 20.0)
        second = _span("second", 20.0, 30.0)
        out = io.StringIO()
        write_timeline([first[0], first[1], second[0], second[1]], out)
        assert out.getvalue().splitlines() == ["0:+first", "10:POP", "10:+second", "20:POP"]

    def test_out_of_order_input_raises(self):
        """Test that input is not re-sorted and going back in time is an error."""
        later = _span("later", 50.0, 51.0)
        earlier = _span("earlier", 10.0, 11.0)
        out = io.StringIO()
        with pytest.raises(TimelineError, match="back in time"):
            write_timeline([*later, *earlier], out)
        assert "-" not in out.getvalue()

    def test_zero_duration_child_raises(self):
        """Test that an end that would close the enclosing span is rejected."""
        parent = _span("parent", 0.0, 100_000.0)
        child = _span("child", 50_000.0, 50_000.0)
        # Canonical order puts the child's end before its start
        events = [parent[0], child[1], child[0], parent[1]]
        with pytest.raises(TimelineError, match="would close 'parent'"):
            write_timeline(events, io.StringIO())

    def test_identical_intervals_with_different_names(self):
        """Test that equal spans closed in start order are accepted."""
        a = _span("a", 0.0, 10.0)
        b = _span("b", 0.0, 10.0)
        out = io.StringIO()
        write_timeline([a[0], b[0], a[1], b[1]], out)
        assert out.getvalue() == "0:+a\n0:+b\n10:POP\n10:POP\n"

    def test_empty_input(self):
        """Test that no events produce no output."""
        out = io.StringIO()
        assert write_timeline([], out) == 0
        assert out.getvalue() == ""

    def test_pop_without_push_raises(self):
        """Test that an unmatched end is reported."""
        with pytest.raises(TimelineError, match="Unmatched end"):
            write_timeline([Event("a", 0.0, False, 1.0)], io.StringIO())

    def test_unclosed_push_raises(self):
        """Test that spans left open are reported."""
        start, _ = _span("a", 0.0, 1.0)
        with pytest.raises(TimelineError, match="still open"):
            write_timeline([start], io.StringIO())

    def test_lines_written_incrementally(self):
        """Test that each line is written as its own write call."""
        writes = []

        class Recorder:
            def write(self, text):
                writes.append(text)

        write_timeline(_span("foo", 0.0, 5.0), Recorder())
        assert writes == ["0:+foo\n", "5:POP\n"]


class TestSaveTimeline:
    """Tests for save_timeline()."""

    def test_writes_file(self, tmp_path):
        """Test writing a timeline to disk."""
        path = save_timeline(_span("foo", 0.0, 3.0), tmp_path / "trace.txt")
        assert path.read_bytes() == b"0:+foo\n3:POP\n"
