"""
Tests for transcript parser
"""

import pytest
from datetime import datetime
from ratioed.parser import (
    TranscriptParser,
    _strip_weird_unicode,
    _looks_like_system,
    detect_dialect,
    parse_chat_export,
    parse_generic,
    parse_imessage,
    parse_timestamp,
    parse_whatsapp,
    validate_format,
)


SCENARIO_TRANSCRIPT = (
    "1/15/24, 3:00 PM - Alice: hey\n"
    "1/15/24, 3:05 PM - Bob: hey back\n"
    "1/15/24, 3:10 PM - Alice: what's up?\n"
    "1/15/24, 3:12 PM - Bob: nm u?"
)


def test_strip_unicode():
    """Test Unicode normalization."""
    assert _strip_weird_unicode("hello\u200bworld") == "hello world"
    assert _strip_weird_unicode("test\u00a0space") == "test space"
    assert _strip_weird_unicode("\ufeff\u200eAlice") == "Alice"


def test_system_message_detection():
    """Test system message detection."""
    assert _looks_like_system("Messages and calls are end-to-end encrypted")
    assert _looks_like_system("You deleted this message")
    assert not _looks_like_system("Hello world")


def test_parse_simple_chat():
    """Test parsing the dash-separated export."""
    parser = TranscriptParser()
    messages = parser.parse_text(SCENARIO_TRANSCRIPT)

    assert len(messages) == 4
    assert parser.last_dialect == "whatsapp"
    assert [m.sender for m in messages] == ["Alice", "Bob", "Alice", "Bob"]
    assert messages[0].text == "hey"
    assert messages[0].timestamp == "1/15/24, 3:00 PM"
    assert messages[3].text == "nm u?"


def test_parse_bracketed_timestamps():
    text = """[1/15/24, 3:45:10 PM] Alice: first
[1/15/24, 3:46:00 PM] Bob: second
[1/15/24, 3:47:30 PM] Alice: third"""

    messages = parse_whatsapp(text)

    assert len(messages) == 3
    assert messages[0].sender == "Alice"
    assert messages[0].timestamp == "1/15/24, 3:45:10 PM"
    assert messages[2].text == "third"


def test_parse_multiline_message():
    """Test parsing multiline messages."""
    text = """1/15/24, 09:15 - Alice: This is a long message
that spans multiple lines
with different content
1/15/24, 09:18 - Bob: Short reply
1/15/24, 09:20 - Alice: ok"""

    messages = parse_whatsapp(text)

    assert len(messages) == 3
    assert "multiple lines" in messages[0].text
    assert messages[0].text.count("\n") == 2
    assert messages[1].text == "Short reply"


def test_untimestamped_lines_use_short_name_rule():
    text = "Alice: hi\nBob: hello\nAlice: how are you"

    messages = parse_whatsapp(text)

    assert len(messages) == 3
    assert all(m.timestamp is None for m in messages)


def test_system_lines_are_skipped():
    text = """1/15/24, 3:00 PM - Messages and calls are end-to-end encrypted. Tap to learn more.
1/15/24, 3:01 PM - Alice: hey
1/15/24, 3:02 PM - Bob: This message was deleted
1/15/24, 3:03 PM - Bob: hi
1/15/24, 3:04 PM - Alice: sup"""

    messages = parse_whatsapp(text)

    assert [m.text for m in messages] == ["hey", "hi", "sup"]


def test_dialect_priority_prefers_label_delimited():
    """The timestamped reading wins over the generic one."""
    name, messages = detect_dialect(SCENARIO_TRANSCRIPT)
    generic = parse_generic(SCENARIO_TRANSCRIPT)

    assert name == "whatsapp"
    assert messages[0].sender == "Alice"
    # The generic rule splits on the first colon, inside the timestamp
    assert generic[0].sender == "1/15/24, 3"
    assert generic[0].sender != messages[0].sender


def test_imessage_dialect():
    text = """Me:
hey are you free
tonight?
From:
maybe later
1/15/24 bla
From: sure"""

    parser = TranscriptParser()
    messages = parser.parse_text(text)

    assert parser.last_dialect == "imessage"
    assert [(m.sender, m.text) for m in messages] == [
        ("Me", "hey are you free"),
        ("Me", "tonight?"),
        ("From", "maybe later"),
        ("From", "sure"),
    ]


def test_imessage_timestamped_lines():
    text = "1/15/24 3:00 PM - Alice: hi\n1/15/24 3:01 PM - Bob: yo"

    messages = parse_imessage(text)

    assert len(messages) == 2
    assert messages[1].sender == "Bob"
    assert messages[1].timestamp == "1/15/24 3:01 PM"


def test_generic_rejects_urls_and_long_names():
    long_name = "x" * 60
    text = f"Alice: hi\nBob: see https://example.com\n{long_name}: hello\nCarol: yo"

    messages = parse_generic(text)

    assert [m.sender for m in messages] == ["Alice", "Carol"]


def test_no_dialect_qualifies():
    name, messages = detect_dialect("just some text\nwith no senders")

    assert name is None
    assert messages == []


def test_two_messages_are_not_enough():
    name, _ = detect_dialect("Alice: hi\nBob: hey")
    assert name is None


def test_parse_text_requires_input():
    with pytest.raises(TypeError):
        TranscriptParser().parse_text(None)


def test_timestamp_parsing():
    """Test various timestamp formats."""
    assert parse_timestamp("1/15/24, 3:45 PM") == datetime(2024, 1, 15, 15, 45)
    assert parse_timestamp("[1/15/2024, 3:45:10 pm]") == datetime(2024, 1, 15, 15, 45, 10)
    assert parse_timestamp("25/12/23, 09:15") == datetime(2023, 12, 25, 9, 15)
    assert parse_timestamp("2024-01-15T15:45:00Z") == datetime(2024, 1, 15, 15, 45)

    bare = parse_timestamp("3:45 PM")
    assert (bare.hour, bare.minute) == (15, 45)


def test_unparseable_timestamps_are_none():
    assert parse_timestamp(None) is None
    assert parse_timestamp("") is None
    assert parse_timestamp("yesterday-ish") is None
    assert parse_timestamp(12345) is None


def test_parse_file(tmp_path):
    path = tmp_path / "chat.txt"
    path.write_text(SCENARIO_TRANSCRIPT, encoding="utf-8")

    messages = TranscriptParser().parse_file(str(path))

    assert len(messages) == 4


def test_parse_missing_file(tmp_path):
    with pytest.raises(ValueError):
        TranscriptParser().parse_file(str(tmp_path / "missing.txt"))


def test_validate_format(tmp_path):
    good = tmp_path / "good.txt"
    good.write_text(SCENARIO_TRANSCRIPT, encoding="utf-8")
    bad = tmp_path / "bad.txt"
    bad.write_text("hello\nworld", encoding="utf-8")

    valid, msg = validate_format(str(good))
    assert valid
    assert "whatsapp" in msg

    valid, _ = validate_format(str(bad))
    assert not valid


def test_parse_chat_export_returns_messages():
    messages = parse_chat_export(SCENARIO_TRANSCRIPT)

    assert len(messages) == 4
    assert messages[1].sender == "Bob"


def test_group_notices_are_skipped():
    text = """1/15/24, 3:00 PM - Alice: hey all
1/15/24, 3:01 PM - Alice added Dan
[1/15/24, 3:02:00 PM] Dan left
1/15/24, 3:03 PM - Bob: hi
1/15/24, 3:04 PM - Dan: yo"""

    messages = parse_whatsapp(text)

    assert [m.sender for m in messages] == ["Alice", "Bob", "Dan"]
    assert messages[0].text == "hey all"


def test_dated_sender_is_not_a_short_name():
    text = "Alice: hi\n1/15/24 - Carol: no time here\nBob: hey\nAlice: sup"

    messages = parse_whatsapp(text)

    assert [m.sender for m in messages] == ["Alice", "Bob", "Alice"]
