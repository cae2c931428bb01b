import pytest

from winpick.formatter import CandidateFormatter, clean_title, display_width, pad, truncate
from winpick.models import WindowEntry

TITLES = [
    "short",
    "Mozilla Firefox - a rather long page title",
    "日本語のタイトル",
    "Café menu",
    "",
    "tab\tand\nnewline",
]


def entries(titles=TITLES, class_name="kitty"):
    return [WindowEntry(f"0x{i}", title, class_name) for i, title in enumerate(titles)]


def test_display_width():
    assert display_width("abc") == 3
    assert display_width("日本") == 4
    assert display_width("é") == 1
    assert display_width("") == 0


def test_truncate_ascii():
    assert truncate("abcdefghij", 6) == "abc..."
    assert truncate("abcdef", 6) == "abcdef"
    assert truncate("abcdefg", 6, "~") == "abcde~"


def test_truncate_wide_chars():
    assert truncate("日本語テキスト", 7) == "日本..."
    # a wide char can't be split
    result = truncate("日本語", 4, ".")
    assert result == "日."
    assert display_width(result) == 3


def test_truncate_marker_too_long():
    assert truncate("abcdef", 2, "...") == "ab"


def test_pad():
    assert pad("ab", 4) == "ab  "
    assert pad("日", 4) == "日  "
    assert pad("abcdef", 4) == "abcdef"


def test_clean_title():
    assert clean_title("a\nb\tc\r") == "a b c "


@pytest.mark.parametrize("max_length", [1, 3, 5, 10, 40, "auto"])
def test_rows_width(max_length):
    formatter = CandidateFormatter()
    width = formatter.resolve_width(entries(), max_length)
    for row in formatter.format(entries(), max_length, detail_mode=False):
        assert display_width(row.truncated_title) == width
        assert "\n" not in row.truncated_title
        assert "\t" not in row.truncated_title


def test_auto_width_is_widest_title():
    assert CandidateFormatter.resolve_width(entries(["a", "abcd", "日本語"]), "auto") == 6
    assert CandidateFormatter.resolve_width([], "auto") == 0
    assert CandidateFormatter.resolve_width(entries(), 12) == 12


def test_truncated_rows_keep_marker():
    rows = CandidateFormatter(end_marker="…").format(entries(["abcdefghij"]), 5, detail_mode=False)
    assert rows[0].truncated_title == "abcd…"


def test_detail_mode():
    formatter = CandidateFormatter()
    plain = formatter.format(entries(["abc", "abcdef"]), "auto", detail_mode=False)
    detailed = formatter.format(entries(["abc", "abcdef"]), "auto", detail_mode=True)
    assert [row.text for row in plain] == ["abc   ", "abcdef"]
    assert [row.text for row in detailed] == ["abc     kitty", "abcdef  kitty"]
    assert [row.source_id for row in detailed] == ["0x0", "0x1"]


def test_rows_are_rebuilt_not_mutated():
    formatter = CandidateFormatter()
    snapshot = entries(["abc"])
    first = formatter.format(snapshot, "auto", detail_mode=False)
    second = formatter.format(snapshot, "auto", detail_mode=False)
    assert first == second
    assert first[0] is not second[0]


def test_zero_width_chars():
    # variation selector, zero width space, zero width joiner
    assert display_width("❤️") == display_width("❤") == 1
    assert display_width("a​b") == 2
    assert display_width("\U0001f468‍\U0001f4bb") == 4


def test_zero_width_chars_padding():
    rows = CandidateFormatter().format(entries(["I ❤️ it", "abcdefgh"]), "auto", detail_mode=True)
    assert [display_width(row.truncated_title) for row in rows] == [8, 8]
    assert rows[0].truncated_title == "I ❤️ it  "
