class TokenizationError(Exception):
    """
    Base class for the errors a Tokenizer latches. Once latched, the error is
    returned by Tokenizer.err for every subsequent call to advance.
    """

    pass


class EndOfInput(TokenizationError):
    """
    The source is exhausted. This is the expected way for tokenization to
    end, not a failure.
    """

    pass


class NoProgressError(TokenizationError):
    """
    The source repeatedly returned no bytes without signalling end of input.
    """

    pass


class MalformedTokenError(TokenizationError):
    """
    A '*' was found which does not start a comment, end keyword or keyword,
    for instance '*' at the end of input or '*' followed by a line break.
    """

    pass


class UnattachedTextWarning(UserWarning):
    """
    Emitted when non-blank text is found outside of any token, ie. before the
    first keyword or after a comment line. Such text is skipped.
    """

    pass
