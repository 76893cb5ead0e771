"""
Tools for inspecting inp files and their tokens while debugging.
"""

import argparse
import sys

from _inpio.tokenizer.errors import EndOfInput
from _inpio.tokenizer.inp_tokenizer import Tokenizer
from _inpio.tokenizer.token_kind import TokenKind


def sequence_number(line):
    """
    The sequence number leading a data line, eg. 12 for '12, 0.0, 1.0' and
    for 'Part-1.12, 0.0' (an instance qualified id).

    :returns: The sequence number as an int or None if the line does not
        start with one.
    """
    first = line.strip(" ").split(",")[0]
    prefix, dot, number = first.rpartition(".")
    if dot and not prefix.strip().isdigit():
        first = number
    try:
        return int(first)
    except ValueError:
        return None


def truncate_data_lines(lines, limit=20):
    """
    Filter out data lines with a sequence number larger than limit, keeping
    keyword lines, comments and data lines without sequence numbers. Useful
    for shrinking a large model to something that can be read through.

    :param lines: Iterable of lines, eg. an open text file.
    :param limit: The largest sequence number kept.
    """
    for line in lines:
        number = sequence_number(line)
        if number is not None and number > limit:
            continue
        yield line


def escape_whitespace(text):
    """
    Make line breaks and spaces visible, ie. '*Node\\n' becomes '*Node↵\\n'
    and 'a b' becomes 'a␣b'.
    """
    return text.replace("\n", "↵\n").replace(" ", "␣")


def separator(i):
    return f"{'-' * 38} {i} {'-' * 38}\n"


def dump_tokens(tokenizer, out=None):
    """
    Write a numbered, whitespace escaped rendering of every token from the
    tokenizer to out, ending with the error which stopped tokenization.

    :param tokenizer: A Tokenizer which has not been advanced yet.
    :param out: A text stream, defaults to sys.stdout.
    :returns: The number of tokens written, not counting the final error.
    """
    if out is None:
        out = sys.stdout
    i = 0
    while tokenizer.advance() != TokenKind.ERROR:
        out.write(separator(i))
        text = escape_whitespace(str(tokenizer.token()))
        out.write(text)
        if not text.endswith("\n"):
            out.write("\n")
        i += 1
    out.write(separator(i))
    err = tokenizer.err
    if isinstance(err, EndOfInput):
        out.write(f"{TokenKind.ERROR.name}: end of input\n")
    else:
        out.write(f"{TokenKind.ERROR.name}: {err!r}\n")
    return i


def main(argv=None, stdin=None, stdout=None):
    """
    Command line entry, see python -m inpio --help.

    :returns: The exit code, 1 if tokenization stopped before end of input.
    """
    if stdin is None:
        stdin = sys.stdin
    if stdout is None:
        stdout = sys.stdout

    parser = argparse.ArgumentParser(
        prog="inpio", description="Debugging tools for inp files."
    )
    commands = parser.add_subparsers(dest="command", required=True)
    tokens = commands.add_parser(
        "tokens", help="Print the tokens of an inp file with whitespace made visible"
    )
    tokens.add_argument("file", nargs="?", default="-", help="Path, - for stdin")
    truncate = commands.add_parser(
        "truncate",
        help="Copy stdin to stdout without data lines numbered above a limit",
    )
    truncate.add_argument(
        "limit", nargs="?", type=int, default=20, help="Largest sequence number kept"
    )
    args = parser.parse_args(argv)

    if args.command == "truncate":
        stdout.writelines(truncate_data_lines(stdin, args.limit))
        return 0

    if args.file == "-":
        tokenizer = Tokenizer(getattr(stdin, "buffer", stdin))
        dump_tokens(tokenizer, stdout)
    else:
        with open(args.file, "rb") as stream:
            tokenizer = Tokenizer(stream)
            dump_tokens(tokenizer, stdout)
    return 0 if isinstance(tokenizer.err, EndOfInput) else 1
