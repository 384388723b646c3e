"""Brainfuck tokenizer.

The `pure` directory contains the brainfuck language itself (tokens, syntax tree, execution), with no knowledge of
files, sessions or the command-line.

Formally, a brainfuck source is any sequence of bytes, each of which is exactly one token:

```
<token> ::= ">"          ; "move right"
          | "<"          ; "move left"
          | "+"          ; "increment"
          | "-"          ; "decrement"
          | ","          ; "read byte"
          | "."          ; "write byte"
          | "["          ; "loop start"
          | "]"          ; "loop end"
          | <byte>       ; "comment": any other byte, including whitespace and newlines
```

Tokenization never fails and tokens do not know where they came from: positions are recovered by the parser from the
order of the token stream.

Source: https://esolangs.org/wiki/Brainfuck
"""

from brainfuck.lang.error import GenericException


class Token:
    """Superclass of every brainfuck token. Each token keeps the raw byte it was produced from, so that a token stream
    can be displayed (or turned back into source) exactly as it was read.
    """
    SYMBOL = None  # byte of the recognized symbol, None for comments

    def __init__(self, byte=None):
        self.byte = self.SYMBOL if byte is None else byte
        self._cls = type(self).__name__

    def __repr__(self):
        return f"{self._cls}()"

    def __str__(self):
        return chr(self.byte)

    def __eq__(self, other):
        return type(other) is type(self) and other.byte == self.byte

    def __hash__(self):
        return hash((self._cls, self.byte))


class MoveRight(Token):
    SYMBOL = ord(">")


class MoveLeft(Token):
    SYMBOL = ord("<")


class Increment(Token):
    SYMBOL = ord("+")


class Decrement(Token):
    SYMBOL = ord("-")


class ReadByte(Token):
    SYMBOL = ord(",")


class WriteByte(Token):
    SYMBOL = ord(".")


class LoopStart(Token):
    SYMBOL = ord("[")


class LoopEnd(Token):
    SYMBOL = ord("]")


class Comment(Token):
    """Any byte that is not one of the eight symbols."""

    def __init__(self, byte):
        super().__init__(byte)

    def __repr__(self):
        return f"{self._cls}({self.byte!r})"


SYMBOLS = {cls.SYMBOL: cls for cls in (MoveRight, MoveLeft, Increment, Decrement, ReadByte, WriteByte, LoopStart,
                                      LoopEnd)}
_TOKENS = [SYMBOLS[byte]() if byte in SYMBOLS else Comment(byte) for byte in range(256)]  # tokens are immutable


def tokenize(byte):
    """Returns the Token for a single byte (an int in 0..255). Every byte is a valid token."""
    if isinstance(byte, bool) or not isinstance(byte, int) or not 0 <= byte <= 255:
        raise GenericException("expected a byte, got '{}'", repr(byte), internal=True)
    return _TOKENS[byte]


def tokenize_source(source):
    """Returns the list of Tokens in source, which may be bytes or str (str is encoded as UTF-8)."""
    if isinstance(source, str):
        source = source.encode("utf-8")
    return [_TOKENS[byte] for byte in source]
