import io
import pathlib
from contextlib import contextmanager

import _inpio.tokenizer as inptok


@contextmanager
def lazy_read(filelike, **tokenizer_args):
    """
    Context manager giving an iterator of the tokens in an inp file, ie.

    >>> with lazy_read("/my/file.inp") as tokens:
    ...     for token in tokens:
    ...         print(token.name)

    The file is read as the tokens are consumed.

    :param filelike: A path (str or pathlib.Path), the bytes contents of a
        file, or an open stream.
    :param tokenizer_args: Passed on to Tokenizer, eg. buffer_size.
    """
    stream = filelike
    did_open = False
    if isinstance(filelike, (str, pathlib.Path)):
        did_open = True
        stream = open(filelike, "rb")
    elif isinstance(filelike, (bytes, bytearray)):
        stream = io.BytesIO(filelike)

    try:
        yield iter(inptok.Tokenizer(stream, **tokenizer_args))
    finally:
        if did_open:
            stream.close()


def read(filelike, **tokenizer_args):
    """
    Reads an inp file and returns the list of its tokens,
    ie. tokens = read("/my/file.inp")

    >>> [t.name for t in read(b"*Part, name=Beam\\n*End Part\\n")]
    ['Part', 'Part']

    """
    with lazy_read(filelike, **tokenizer_args) as tokens:
        return list(tokens)
