import pytest
from unittest.mock import Mock
from parsers.kv_parser import (
    KVParseError,
    Scanner,
    multiline_kv,
    raise_parse_error,
    report_and_abort,
)


def scan(raw):
    return Scanner(raw, raise_parse_error).read_kvs()


def test_simple_scan():
    assert scan("npmrc=ABCDEFabc") == [("npmrc", "ABCDEFabc")]


def test_multiline_scan():
    assert scan("npmrc=ABC\npackage-lock.json=...") == [
        ("npmrc", "ABC"),
        ("package-lock.json", "..."),
    ]


def test_quoted():
    raw = '"npmrc=registry=https://somewhere\n//more/places==\n"\nextra=1'
    assert scan(raw) == [
        ("npmrc", "registry=https://somewhere\n//more/places==\n"),
        ("extra", "1"),
    ]


def test_quoted_single():
    # Multiline strings must work as the only entry
    raw = '"npmrc=registry=https://somewhere\n//more/places==\n"'
    assert scan(raw) == [("npmrc", "registry=https://somewhere\n//more/places==\n")]


def test_quoted_multiline_value_followed_by_bare():
    assert scan('"k=line1\nline2"\nx=1') == [("k", "line1\nline2"), ("x", "1")]


@pytest.mark.parametrize("raw", ["", " ", "\n\n", " \t\r\n "])
def test_blank_input_is_empty(raw):
    on_error = Mock(side_effect=KVParseError)
    assert multiline_kv(raw, on_error) == []
    on_error.assert_not_called()


def test_bare_value_without_trailing_newline():
    assert multiline_kv("k=v", raise_parse_error) == [("k", "v")]


def test_bare_value_trailing_newline_is_consumed():
    assert scan("a=1\nb=2\n") == [("a", "1"), ("b", "2")]


def test_empty_key_and_value():
    assert scan("=\nk=") == [("", ""), ("k", "")]


def test_bare_value_keeps_equals_and_spaces():
    assert scan("url = a=b \n") == [("url ", " a=b ")]


def test_whitespace_between_entries_is_skipped():
    assert scan("\n\t  a=1\r\n\n   b=2") == [("a", "1\r"), ("b", "2")]


def test_duplicate_keys_are_kept_in_order():
    assert scan("a=1\nb=2\na=3") == [("a", "1"), ("b", "2"), ("a", "3")]


def test_quoted_value_unescapes_doubled_quotes():
    assert scan('"k=say ""hi"""') == [("k", 'say "hi"')]


def test_quoted_key_unescapes_doubled_quotes():
    assert scan('"a""b=c"') == [('a"b', "c")]


@pytest.mark.parametrize(
    "value",
    ['"', '""', 'a"b', '"leading', 'trailing"', 'multi\n"line"\n', "no quotes"],
)
def test_doubled_quotes_recover_original_value(value):
    raw = '"key=' + value.replace('"', '""') + '"'
    assert scan(raw) == [("key", value)]


def test_quoted_entry_followed_by_quoted_entry():
    assert scan('"a=1"\n"b=2"') == [("a", "1"), ("b", "2")]


def test_quoted_key_closed_before_equals_reads_value_after_quote():
    # Known odd path: the key ends at the quote and the value is read from
    # the following characters, without any '=' being consumed.
    assert scan('"abc"def"') == [("abc", "def")]


def test_quoted_key_closed_before_equals_without_value_quote():
    with pytest.raises(KVParseError, match="missing ending quote"):
        scan('"abc"\nx=1')


def test_bare_key_missing_equals():
    with pytest.raises(KVParseError, match="missing ="):
        scan("a=1\nnot-a-pair")


def test_quoted_key_missing_equals():
    with pytest.raises(KVParseError, match="missing ="):
        scan('"abc')


def test_quoted_key_only_escaped_quotes_is_missing_equals():
    with pytest.raises(KVParseError, match="missing ="):
        scan('"a""b')


def test_unterminated_quoted_value():
    with pytest.raises(KVParseError, match="missing ending quote"):
        scan('"k=value\nmore')


def test_quoted_value_ending_in_escaped_quote_is_unterminated():
    with pytest.raises(KVParseError, match="missing ending quote"):
        scan('"k=value""')


def test_quoted_entry_must_be_followed_by_newline():
    with pytest.raises(KVParseError, match=r"missing \\n after quoted line"):
        scan('"k=v" x=1')


def test_quoted_entry_followed_by_carriage_return_fails():
    with pytest.raises(KVParseError, match=r"missing \\n after quoted line"):
        scan('"k=v"\r\nx=1')


def test_error_handler_called_once_and_no_partial_result():
    on_error = Mock(side_effect=KVParseError("boom"))
    with pytest.raises(KVParseError):
        multiline_kv("a=1\nb=2\nbroken", on_error)
    on_error.assert_called_once_with("invalid key value string, missing =")


def test_handler_exception_propagates_unchanged():
    class Abort(Exception):
        pass

    def on_error(msg):
        raise Abort(msg)

    with pytest.raises(Abort, match="missing ending quote"):
        multiline_kv('"k=v', on_error)


def test_read_kv_returns_none_at_end():
    scanner = Scanner("a=1\n  ", raise_parse_error)
    assert scanner.read_kv() == ("a", "1")
    assert scanner.read_kv() is None
    assert scanner.offset == len(scanner.input)


def test_each_call_gets_fresh_state():
    assert multiline_kv("a=1", raise_parse_error) == [("a", "1")]
    assert multiline_kv("b=2", raise_parse_error) == [("b", "2")]


def test_non_ascii_text():
    assert scan('"clé=ünïcødé ""✓"""\nk=日本') == [("clé", 'ünïcødé "✓"'), ("k", "日本")]


def test_report_and_abort_logs_then_raises(caplog):
    with caplog.at_level("ERROR"):
        with pytest.raises(KVParseError, match="missing ="):
            multiline_kv("nope")
    assert "invalid key value string, missing =" in caplog.text
