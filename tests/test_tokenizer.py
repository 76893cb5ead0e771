import io
import warnings

import pytest
from hypothesis import given

from _inpio.tokenizer import (
    Attribute,
    EndOfInput,
    MalformedTokenError,
    NoProgressError,
    Token,
    Tokenizer,
    TokenKind,
    UnattachedTextWarning,
)

from .generators.inp_file_contents import inp_file_contents
from .generators.streams import ChunkedStream, FailingStream, StalledStream


@pytest.fixture(params=["bytes", "strings", "chunked"])
def make_tokenizer(request):
    def make(contents):
        if request.param == "bytes":
            return Tokenizer(io.BytesIO(contents.encode("utf-8")))
        if request.param == "strings":
            return Tokenizer(io.StringIO(contents))
        return Tokenizer(
            ChunkedStream(contents.encode("utf-8"), chunk_size=1, stalls=1),
            buffer_size=1,
        )

    return make


def tokens_of(tokenizer):
    result = []
    while tokenizer.advance() != TokenKind.ERROR:
        result.append(tokenizer.token())
    return result


def test_comment(make_tokenizer):
    tokenizer = make_tokenizer("** foo bar\n")
    assert tokenizer.advance() == TokenKind.COMMENT
    assert tokenizer.token() == Token(TokenKind.COMMENT, data="** foo bar\n")
    assert tokenizer.err is None


def test_keyword_without_data(make_tokenizer):
    tokenizer = make_tokenizer("*Elastic, type=ISOTROPIC\n*Density\n")
    assert tokens_of(tokenizer) == [
        Token(
            TokenKind.KEYWORD,
            name="Elastic",
            attributes=[Attribute("type", "ISOTROPIC")],
        ),
        Token(TokenKind.KEYWORD, name="Density"),
    ]


def test_keyword_with_data(make_tokenizer):
    tokenizer = make_tokenizer(
        "*Node\n1, 0.0, 0.0\n2, 1.0, 0.0\n*Element, type=C3D8\n"
    )
    assert tokens_of(tokenizer) == [
        Token(TokenKind.KEYWORD, name="Node", data="1, 0.0, 0.0\n2, 1.0, 0.0\n"),
        Token(TokenKind.KEYWORD, name="Element", attributes=[Attribute("type", "C3D8")]),
    ]


def test_end_keyword(make_tokenizer):
    tokenizer = make_tokenizer("*End Part\n")
    assert tokenizer.advance() == TokenKind.END_KEYWORD
    assert tokenizer.token() == Token(
        TokenKind.END_KEYWORD, name="Part", data="*End Part\n"
    )


def test_lower_case_end_keyword(make_tokenizer):
    tokenizer = make_tokenizer("*end part\n")
    assert tokenizer.advance() == TokenKind.END_KEYWORD
    assert tokenizer.token().name == "part"


@pytest.mark.parametrize(
    "contents, name",
    [
        ("*Elastic\n", "Elastic"),
        ("*elastic\n", "elastic"),
        ("*END PART\n", "END PART"),
        ("*E\n", "E"),
        ("*E", "E"),
        ("*En", "En"),
    ],
)
def test_e_names_are_keywords(make_tokenizer, contents, name):
    tokenizer = make_tokenizer(contents)
    assert tokenizer.advance() == TokenKind.KEYWORD
    assert tokenizer.token().name == name
    assert tokenizer.advance() == TokenKind.ERROR
    assert isinstance(tokenizer.err, EndOfInput)


def test_keyword_name_with_spaces(make_tokenizer):
    tokenizer = make_tokenizer("*Rate Dependent, type=POWER LAW\n0.1, 2.0\n")
    tokenizer.advance()
    assert tokenizer.token() == Token(
        TokenKind.KEYWORD,
        name="Rate Dependent",
        data="0.1, 2.0\n",
        attributes=[Attribute("type", "POWER LAW")],
    )


@pytest.mark.parametrize(
    "header, expected",
    [
        (
            "*Instance, name=Euler-1, part=Euler",
            [Attribute("name", "Euler-1"), Attribute("part", "Euler")],
        ),
        (
            "*Nset, nset=Set-2_Vz, generate",
            [Attribute("nset", "Set-2_Vz"), Attribute("generate")],
        ),
        ("*Foo, a=1, a=2", [Attribute("a", "1"), Attribute("a", "2")]),
        ("*Foo,a=1,", [Attribute("a", "1")]),
        ("*Foo, ", []),
        ("*Foo", []),
        ("*Foo, key = value ", [Attribute("key", "value")]),
        ("*Foo, a=b=c", [Attribute("a", "b=c")]),
    ],
)
def test_attributes(make_tokenizer, header, expected):
    tokenizer = make_tokenizer(header + "\n")
    tokenizer.advance()
    assert tokenizer.token().attributes == expected


def test_star_inside_data_line(make_tokenizer):
    tokenizer = make_tokenizer("*Heading\nModel *one* of 2\n*Node\n")
    assert [t.name for t in tokens_of(tokenizer)] == ["Heading", "Node"]


def test_heading_data(make_tokenizer):
    tokenizer = make_tokenizer("*Heading\nModel *one* of 2\n")
    tokenizer.advance()
    assert tokenizer.token().data == "Model *one* of 2\n"


def test_crlf_line_breaks(make_tokenizer):
    tokenizer = make_tokenizer("*Elastic, type=ISOTROPIC\r\n210000., 0.3\r\n*Density\r\n")
    assert tokens_of(tokenizer) == [
        Token(
            TokenKind.KEYWORD,
            name="Elastic",
            data="210000., 0.3\r\n",
            attributes=[Attribute("type", "ISOTROPIC")],
        ),
        Token(TokenKind.KEYWORD, name="Density"),
    ]


def test_last_token_without_line_break(make_tokenizer):
    tokenizer = make_tokenizer("** comment\n*Node\n1, 0.0")
    assert tokens_of(tokenizer) == [
        Token(TokenKind.COMMENT, data="** comment\n"),
        Token(TokenKind.KEYWORD, name="Node", data="1, 0.0"),
    ]


def test_header_continuation_is_read_as_data(make_tokenizer):
    tokenizer = make_tokenizer("*Elastic, type=ISOTROPIC,\ndependencies=1\n")
    tokenizer.advance()
    token = tokenizer.token()
    assert token.attributes == [Attribute("type", "ISOTROPIC")]
    assert token.data == "dependencies=1\n"


def test_end_of_input_is_sticky(make_tokenizer):
    tokenizer = make_tokenizer("*Node\n")
    assert tokenizer.advance() == TokenKind.KEYWORD
    assert tokenizer.advance() == TokenKind.ERROR
    err = tokenizer.err
    assert isinstance(err, EndOfInput)
    for _ in range(3):
        assert tokenizer.advance() == TokenKind.ERROR
        assert tokenizer.err is err
        assert tokenizer.token() == Token(TokenKind.ERROR)


def test_empty_input(make_tokenizer):
    tokenizer = make_tokenizer("")
    assert tokenizer.advance() == TokenKind.ERROR
    assert isinstance(tokenizer.err, EndOfInput)
    assert str(tokenizer.token()) == ""


@pytest.mark.parametrize("contents", ["*", "*Node\n*", "*\n", "* Node\n", "*, a=1\n"])
def test_malformed_token_start(make_tokenizer, contents):
    tokenizer = make_tokenizer(contents)
    kinds = [tokenizer.advance() for _ in range(3)]
    assert kinds[-1] == TokenKind.ERROR
    assert isinstance(tokenizer.err, MalformedTokenError)
    assert not isinstance(tokenizer.err, EndOfInput)


def test_skipped_text_warns(make_tokenizer):
    tokenizer = make_tokenizer("** comment\n1, 2\n*Node\n")
    assert tokenizer.advance() == TokenKind.COMMENT
    with pytest.warns(UnattachedTextWarning, match="byte 11"):
        assert tokenizer.advance() == TokenKind.KEYWORD
    assert tokenizer.token().name == "Node"


def test_blank_lines_do_not_warn(make_tokenizer):
    tokenizer = make_tokenizer("\n  \n*Node\n")
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        assert tokenizer.advance() == TokenKind.KEYWORD


def test_repeated_token_calls_give_same_token(make_tokenizer):
    tokenizer = make_tokenizer("*Part, name=Beam\n")
    tokenizer.advance()
    assert tokenizer.token() is tokenizer.token()
    assert str(tokenizer.token()) == str(tokenizer.token())


def test_source_error_is_passed_through():
    error = OSError("disk on fire")
    tokenizer = Tokenizer(FailingStream(b"*Node\n1, 0.0\n", error))
    assert tokenizer.advance() == TokenKind.ERROR
    assert tokenizer.err is error
    assert tokenizer.advance() == TokenKind.ERROR
    assert tokenizer.err is error


def test_any_source_error_is_passed_through():
    error = ValueError("I/O operation on closed file")
    tokenizer = Tokenizer(FailingStream(b"** c\n*Node\n", error))
    assert tokenizer.advance() == TokenKind.COMMENT
    assert tokenizer.advance() == TokenKind.ERROR
    assert tokenizer.err is error
    assert tokenizer.advance() == TokenKind.ERROR
    assert tokenizer.err is error


def test_tokens_before_source_error_are_produced():
    error = OSError("disk on fire")
    tokenizer = Tokenizer(FailingStream(b"** comment\n*Node\n", error))
    assert tokenizer.advance() == TokenKind.COMMENT
    assert tokenizer.advance() == TokenKind.ERROR
    assert tokenizer.err is error


def test_iteration_raises_source_error():
    tokenizer = Tokenizer(FailingStream(b"** comment\n*Node\n", OSError("disk on fire")))
    tokens = iter(tokenizer)
    assert next(tokens).kind == TokenKind.COMMENT
    with pytest.raises(OSError, match="disk on fire"):
        next(tokens)


def test_no_progress():
    tokenizer = Tokenizer(StalledStream(), max_empty_reads=10)
    assert tokenizer.advance() == TokenKind.ERROR
    assert isinstance(tokenizer.err, NoProgressError)
    with pytest.raises(NoProgressError):
        list(tokenizer)


def test_iteration_stops_at_end_of_input():
    tokenizer = Tokenizer(io.BytesIO(b"*Part, name=Beam\n*End Part\n"))
    assert [t.kind for t in tokenizer] == [TokenKind.KEYWORD, TokenKind.END_KEYWORD]


def test_long_data_grows_buffer():
    data = "".join(f"{i}, {i}.0, 0.0, 0.0\n" for i in range(1, 2000))
    contents = f"** nodes\n*Node\n{data}*End Part\n"
    tokenizer = Tokenizer(io.BytesIO(contents.encode("ascii")), buffer_size=16)
    assert tokens_of(tokenizer) == [
        Token(TokenKind.COMMENT, data="** nodes\n"),
        Token(TokenKind.KEYWORD, name="Node", data=data),
        Token(TokenKind.END_KEYWORD, name="Part", data="*End Part\n"),
    ]


@given(inp_file_contents())
def test_tokenize_file(contents_and_tokens):
    contents, expected = contents_and_tokens
    tokenizer = Tokenizer(io.BytesIO(contents.encode("utf-8")))
    assert tokens_of(tokenizer) == expected
    assert isinstance(tokenizer.err, EndOfInput)


@given(inp_file_contents())
def test_rendering_reproduces_input(contents_and_tokens):
    contents, _ = contents_and_tokens
    tokens = list(Tokenizer(io.BytesIO(contents.encode("utf-8"))))
    assert "".join(str(t) for t in tokens) == contents


@given(inp_file_contents())
def test_independent_of_chunking(contents_and_tokens):
    contents, _ = contents_and_tokens
    encoded = contents.encode("utf-8")
    all_at_once = list(Tokenizer(io.BytesIO(encoded)))
    byte_by_byte = list(
        Tokenizer(ChunkedStream(encoded, chunk_size=1), buffer_size=1)
    )
    assert byte_by_byte == all_at_once


def test_bytes_invalid_in_encoding_are_kept():
    contents = "** Temperatur in °C\n*Node\n".encode("latin-1")
    tokens = list(Tokenizer(io.BytesIO(contents)))
    assert [t.kind for t in tokens] == [TokenKind.COMMENT, TokenKind.KEYWORD]
    rendered = "".join(str(t) for t in tokens)
    assert rendered.encode("utf-8", "surrogateescape") == contents


def test_decoding_errors_can_be_strict():
    contents = "** Temperatur in °C\n".encode("latin-1")
    tokenizer = Tokenizer(io.BytesIO(contents), errors="strict")
    assert tokenizer.advance() == TokenKind.COMMENT
    with pytest.raises(UnicodeDecodeError):
        tokenizer.token()


def test_other_encodings():
    contents = "** Temperatur in °C\n".encode("latin-1")
    tokenizer = Tokenizer(io.BytesIO(contents), encoding="latin-1")
    tokenizer.advance()
    assert tokenizer.token().data == "** Temperatur in °C\n"
