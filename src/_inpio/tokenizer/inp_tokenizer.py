import warnings
from enum import Enum, auto, unique

from _inpio.tokenizer.buffered_reader import (
    DEFAULT_BUFFER_SIZE,
    DEFAULT_MAX_EMPTY_READS,
    BufferedReader,
    Span,
)
from _inpio.tokenizer.errors import (
    EndOfInput,
    MalformedTokenError,
    UnattachedTextWarning,
)
from _inpio.tokenizer.token import Attribute, Token
from _inpio.tokenizer.token_kind import TokenKind

STAR = ord("*")
COMMA = ord(",")
SPACE = ord(" ")
NEWLINE = ord("\n")
BLANKS = frozenset(b" \t\r\n\f\v")


def parse_attributes(params):
    """
    Split the parameter part of a keyword line into attributes, ie.
    parse_attributes("type=C3D8, generate") returns
    [Attribute("type", "C3D8"), Attribute("generate")].
    """
    attributes = []
    for piece in params.split(","):
        key, _, value = piece.partition("=")
        key = key.strip()
        value = value.strip()
        if not key and not value:
            continue
        attributes.append(Attribute(key, value))
    return attributes


@unique
class _State(Enum):
    SCAN = auto()
    DISAMBIGUATE = auto()
    COMMENT = auto()
    END_KEYWORD = auto()
    KEYWORD = auto()
    READY = auto()
    TERMINAL = auto()


class Tokenizer:
    """
    Pull based tokenizer for inp files. Each call to advance() scans one token
    and token() gives its contents:

    >>> tokenizer = Tokenizer(io.BytesIO(b"*Node\\n1, 0.0, 0.0\\n"))
    >>> tokenizer.advance()
    <TokenKind.KEYWORD: 2>
    >>> tokenizer.token()
    Token(kind=<TokenKind.KEYWORD: 2>, name='Node', data='1, 0.0, 0.0\\n', attributes=[])
    >>> tokenizer.advance()
    <TokenKind.ERROR: 1>
    >>> tokenizer.err
    EndOfInput('End of input at byte 18')

    Once an error has occurred, advance() keeps returning TokenKind.ERROR
    with the same err. Iterating over the tokenizer yields the tokens, stops
    at end of input and raises any other error.

    While scanning, the token is only tracked as spans into the buffer of
    the reader, and the text is first decoded when token() is called.
    """

    def __init__(
        self,
        stream,
        buffer_size=DEFAULT_BUFFER_SIZE,
        encoding="utf-8",
        errors="surrogateescape",
        max_empty_reads=DEFAULT_MAX_EMPTY_READS,
    ):
        """
        :param stream: A byte stream (or text stream) containing inp data.
        :param buffer_size: Initial size of the read buffer.
        :param encoding: Encoding used to decode token text.
        :param errors: Error handler used when decoding token text. The
            default, "surrogateescape", keeps bytes that are not valid in the
            encoding, so str(token).encode(encoding, errors) gives back the
            source bytes.
        :param max_empty_reads: Number of successive reads returning None
            before tokenization fails with NoProgressError.
        """
        self.encoding = encoding
        self.errors = errors
        self._reader = BufferedReader(
            stream,
            buffer_size=buffer_size,
            encoding=encoding,
            errors=errors,
            max_empty_reads=max_empty_reads,
        )
        self._name = Span()
        self._data = Span()
        self._params = Span()
        self._reader.track(self._name, self._data, self._params)
        self._kind = TokenKind.ERROR
        self._err = None
        self._state = _State.SCAN
        self._token = None
        self._transitions = {
            _State.SCAN: self._scan,
            _State.DISAMBIGUATE: self._disambiguate,
            _State.COMMENT: self._comment,
            _State.END_KEYWORD: self._end_keyword,
            _State.KEYWORD: self._keyword,
        }

    @property
    def kind(self):
        """
        The kind of the current token.
        """
        return self._kind

    @property
    def err(self):
        """
        The error associated with the current ERROR token, typically
        EndOfInput. None if the current token is not an ERROR token.
        """
        if self._kind != TokenKind.ERROR:
            return None
        return self._err

    def __iter__(self):
        while self.advance() != TokenKind.ERROR:
            yield self.token()
        if not isinstance(self._err, EndOfInput):
            raise self._err

    def advance(self):
        """
        Scan the next token.

        :returns: The kind of the token scanned.
        """
        self._token = None
        if self._state == _State.TERMINAL:
            self._kind = TokenKind.ERROR
            return self._kind

        raw = self._reader.raw
        raw.start = raw.end
        for span in (self._name, self._data, self._params):
            span.reset(raw.end)

        self._state = _State.SCAN
        while self._state not in (_State.READY, _State.TERMINAL):
            self._state = self._transitions[self._state]()
        if self._state == _State.TERMINAL:
            self._kind = TokenKind.ERROR
        return self._kind

    def token(self):
        """
        :returns: The current token as a Token.
        """
        if self._token is None:
            self._token = self._materialize()
        return self._token

    def _materialize(self):
        if self._kind == TokenKind.ERROR:
            return Token(TokenKind.ERROR)
        token = Token(self._kind, data=self._text(self._data))
        if self._kind == TokenKind.COMMENT:
            return token
        token.name = self._text(self._name).strip()
        if self._kind == TokenKind.KEYWORD and len(self._params) > 0:
            token.attributes = parse_attributes(self._text(self._params))
        return token

    def _text(self, span):
        return self._reader.value(span).decode(self.encoding, self.errors)

    def _fail(self, err):
        self._err = err
        return _State.TERMINAL

    def _source_failed(self):
        read_err = self._reader.read_err
        return read_err is not None and not isinstance(read_err, EndOfInput)

    def _scan(self):
        """
        Skip ahead to the '*' starting the next token.
        """
        reader = self._reader
        skipped_at = None
        while True:
            c = reader.read_byte()
            if c is None:
                self._warn_skipped(skipped_at)
                return self._fail(reader.read_err)
            if c == STAR:
                break
            if skipped_at is None and c not in BLANKS:
                skipped_at = reader.tell() - 1
        self._warn_skipped(skipped_at)
        # The token starts at the '*', skipped text may be discarded
        reader.raw.start = reader.raw.end - 1
        for span in (self._name, self._data, self._params):
            span.reset(reader.raw.start)
        return _State.DISAMBIGUATE

    def _warn_skipped(self, position):
        if position is not None:
            warnings.warn(
                f"Skipped text outside of any keyword at byte {position}",
                UnattachedTextWarning,
            )

    def _disambiguate(self):
        """
        Decide the kind of token from the bytes following '*'.
        """
        reader = self._reader
        c = reader.read_byte()
        if c is None:
            if self._source_failed():
                return self._fail(reader.read_err)
            return self._fail(
                MalformedTokenError(
                    f"Reached end of input after '*' at byte {reader.tell() - 1}"
                )
            )
        if c == STAR:
            return _State.COMMENT
        if c in BLANKS or c == COMMA:
            return self._fail(
                MalformedTokenError(
                    f"Expected keyword name after '*' at byte {reader.tell() - 2}"
                    f" got {chr(c)!r}"
                )
            )
        if c in b"Ee":
            lookahead = []
            for _ in range(2):
                c = reader.read_byte()
                if c is None:
                    break
                lookahead.append(c)
            if lookahead == list(b"nd"):
                return _State.END_KEYWORD
            if self._source_failed():
                return self._fail(reader.read_err)
            # Put the lookahead back, the keyword name starts at the 'E'
            reader.unread(len(lookahead))
        return _State.KEYWORD

    def _read_line(self):
        """
        Consume up to and including the next line break (or end of input).
        """
        c = self._reader.read_byte()
        while c is not None and c != NEWLINE:
            c = self._reader.read_byte()
        return c

    def _skip_spaces(self):
        c = self._reader.read_byte()
        while c == SPACE:
            c = self._reader.read_byte()
        if c is not None:
            self._reader.unread()

    def _read_name(self, start):
        """
        Sets the name span to the text from start to the first ',' or line
        break, eg. "Rate Dependent" in "*Rate Dependent, type=POWER LAW".

        :returns: The terminating byte, COMMA or NEWLINE, which is consumed
            only if it is a comma. None at end of input.
        """
        reader = self._reader
        self._name.start = start
        c = reader.read_byte()
        while c is not None and c not in (COMMA, NEWLINE):
            c = reader.read_byte()
        if c is None:
            self._name.end = reader.raw.end
        elif c == COMMA:
            self._name.end = reader.raw.end - 1
        else:
            reader.unread()
            self._name.end = reader.raw.end
        return c

    def _comment(self):
        self._data.start = self._reader.raw.start
        self._read_line()
        self._data.end = self._reader.raw.end
        if self._source_failed():
            return self._fail(self._reader.read_err)
        self._kind = TokenKind.COMMENT
        return _State.READY

    def _end_keyword(self):
        self._data.start = self._reader.raw.start
        self._skip_spaces()
        if self._read_name(self._reader.raw.end) != NEWLINE:
            self._read_line()
        else:
            self._reader.read_byte()
        self._data.end = self._reader.raw.end
        if self._source_failed():
            return self._fail(self._reader.read_err)
        self._kind = TokenKind.END_KEYWORD
        return _State.READY

    def _keyword(self):
        reader = self._reader
        terminator = self._read_name(reader.raw.start + 1)
        if terminator == COMMA:
            self._skip_spaces()
            self._params.start = reader.raw.end
            terminator = self._read_line()
            self._params.end = reader.raw.end
            if terminator == NEWLINE:
                self._params.end -= 1
        elif terminator == NEWLINE:
            reader.read_byte()
        self._params.end = max(self._params.start, self._params.end)

        # Data lines run until a line starting with '*'
        self._data.start = reader.raw.end
        at_line_start = True
        c = reader.read_byte()
        while c is not None:
            if c == STAR and at_line_start:
                reader.unread()
                break
            at_line_start = c == NEWLINE
            c = reader.read_byte()
        self._data.end = reader.raw.end

        if self._source_failed():
            return self._fail(reader.read_err)
        self._kind = TokenKind.KEYWORD
        return _State.READY
