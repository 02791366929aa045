import io
import threading
from collections import Counter

import pytest

from sysprog.pipeline import (
    highlight,
    merge_counts,
    printer,
    source_line_words,
    source_lines,
    text_filter,
    word_occurrence,
)

TEXT = "Nel mezzo del cammin di nostra vita\nmi ritrovai per una selva oscura\r\nche la diritta via era smarrita."


def test_source_lines_strips_endings():
    assert list(source_lines(io.StringIO(TEXT))) == [
        "Nel mezzo del cammin di nostra vita",
        "mi ritrovai per una selva oscura",
        "che la diritta via era smarrita.",
    ]


def test_source_lines_accepts_bytes():
    assert list(source_lines(io.BytesIO(b"a\nb\n"))) == ["a", "b"]


def test_source_lines_cancelled():
    cancel = threading.Event()
    cancel.set()
    assert list(source_lines(io.StringIO(TEXT), cancel)) == []


def test_text_filter_keeps_matching():
    lines = ["cammin", "selva", "diritta via"]
    assert list(text_filter(lines, "in")) == ["cammin"]


def test_text_filter_all_contain_needle():
    result = list(text_filter(source_lines(io.StringIO(TEXT)), "a"))
    assert result and all("a" in line for line in result)


def test_highlight_format():
    assert highlight("cammin", "in", 31) == "camm\x1b[31min\x1b[39m"


def test_highlight_missing_raises():
    with pytest.raises(ValueError):
        highlight("selva", "in", 31)


def test_printer_writes_highlighted_lines():
    out = io.StringIO()
    printer(["xin", "in"], 31, "in", out)
    assert out.getvalue() == "x\x1b[31min\x1b[39m\n\x1b[31min\x1b[39m\n"


def test_printer_cancelled_writes_nothing():
    cancel = threading.Event()
    cancel.set()
    out = io.StringIO()
    printer(["in"], 31, "in", out, cancel)
    assert out.getvalue() == ""


def test_source_line_words():
    words = list(source_line_words(io.StringIO("a b  c\nd")))
    assert words == [["a", "b", "c"], ["d"]]


def test_word_occurrence_totals_match_input():
    words = ["selva", "selva", "oscura"]
    (counts,) = list(word_occurrence([words]))
    assert sum(counts.values()) == len(words)
    assert counts["selva"] == 2


def test_merge_counts_fan_out_covers_all_words():
    words = source_line_words(io.StringIO(TEXT))
    total = merge_counts([word_occurrence(words), word_occurrence(words)])
    assert sum(total.values()) == len(TEXT.split())
    assert total == Counter(TEXT.split())


def test_merge_counts_cancelled_is_empty():
    cancel = threading.Event()
    cancel.set()
    assert merge_counts([[{"a": 1}]], cancel) == Counter()