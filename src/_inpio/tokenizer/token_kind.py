from enum import Enum, auto, unique


@unique
class TokenKind(Enum):
    ERROR = auto()
    # '*Part, name=Part-1' and its data lines
    KEYWORD = auto()
    # '*End Part'
    END_KEYWORD = auto()
    # '** a comment'
    COMMENT = auto()

    @classmethod
    def line_kinds(cls):
        """
        The kinds whose token data is a single verbatim source line.
        """
        return (cls.COMMENT, cls.END_KEYWORD)
