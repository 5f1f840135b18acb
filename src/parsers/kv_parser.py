import logging
from typing import Callable, List, NoReturn, Optional, Tuple

logger = logging.getLogger(__name__)

ErrorHandler = Callable[[str], NoReturn]

WHITESPACE = " \t\n\r"


class KVParseError(ValueError):
    """Raised when a multiline key/value string is malformed."""


def raise_parse_error(msg: str) -> NoReturn:
    raise KVParseError(msg)


def report_and_abort(msg: str) -> NoReturn:
    """Log the failure, then abort the whole run."""
    logger.error(msg)
    raise KVParseError(msg)


def multiline_kv(
    input: str, on_error: ErrorHandler = report_and_abort
) -> List[Tuple[str, str]]:
    """Parse a blob of key=value entries into an ordered list of pairs.

    Entries are either bare (``key=value`` up to the end of the line) or
    quoted (``"key=value"``, may span lines, ``""`` is a literal quote).
    """
    if input.strip() == "":
        return []
    return Scanner(input, on_error).read_kvs()


class Scanner:
    def __init__(self, input: str, on_error: ErrorHandler):
        self.input = input
        self.on_error = on_error
        self.offset = 0
        self.results: List[Tuple[str, str]] = []

    def read_kvs(self) -> List[Tuple[str, str]]:
        kv = self.read_kv()
        while kv is not None:
            self.results.append(kv)
            kv = self.read_kv()
        logger.debug(f"Parsed {len(self.results)} key value pairs")
        return self.results

    def read_kv(self) -> Optional[Tuple[str, str]]:
        self._eat_spaces()
        if self.offset == len(self.input):
            return None

        if self.input[self.offset] == '"':
            self.offset += 1
            key = self._read_quoted_key()
            value = self._read_quoted_value()
            self._expect_newline()
            return key, value

        key = self._read_bare_key()
        value = self._read_bare_value()
        return key, value

    def _is_escaped_quote(self) -> bool:
        return self.input.startswith('""', self.offset)

    def _read_quoted_key(self) -> str:
        start = self.offset
        while self.offset < len(self.input):
            char = self.input[self.offset]
            if char == "=":
                key = self.input[start : self.offset]
                self.offset += 1
                return key.replace('""', '"')
            if char == '"':
                if not self._is_escaped_quote():
                    # Closing quote before any '='; the value is read from here
                    key = self.input[start : self.offset]
                    self.offset += 1
                    return key.replace('""', '"')
                self.offset += 1
            self.offset += 1
        self.on_error("invalid key value string, missing =")

    def _read_quoted_value(self) -> str:
        start = self.offset
        while self.offset < len(self.input):
            if self.input[self.offset] == '"':
                if not self._is_escaped_quote():
                    value = self.input[start : self.offset]
                    self.offset += 1
                    return value.replace('""', '"')
                self.offset += 1
            self.offset += 1
        self.on_error("invalid key value string, missing ending quote")

    def _expect_newline(self) -> None:
        if self.offset == len(self.input):
            return
        if self.input[self.offset] != "\n":
            self.on_error("invalid key value string, missing \\n after quoted line")
        self.offset += 1

    def _read_bare_key(self) -> str:
        end = self.input.find("=", self.offset)
        if end == -1:
            self.on_error("invalid key value string, missing =")
        key = self.input[self.offset : end]
        self.offset = end + 1
        return key

    def _read_bare_value(self) -> str:
        end = self.input.find("\n", self.offset)
        if end == -1:
            # No newline left, the value runs to the end of input
            value = self.input[self.offset :]
            self.offset = len(self.input)
            return value
        value = self.input[self.offset : end]
        self.offset = end + 1
        return value

    def _eat_spaces(self) -> None:
        while self.offset < len(self.input) and self.input[self.offset] in WHITESPACE:
            self.offset += 1
