from dataclasses import dataclass, field

from _inpio.tokenizer.token_kind import TokenKind


@dataclass
class Attribute:
    """
    A keyword parameter, ie. Attribute("type", "C3D8") for 'type=C3D8' and
    Attribute("generate") for the flag 'generate'.
    """

    key: str
    value: str = ""

    def __str__(self):
        if self.value:
            return f"{self.key}={self.value}"
        return self.key


@dataclass
class Token:
    """
    A token in an inp file. For KEYWORD tokens, name is the keyword name,
    attributes its parameters in declaration order and data the data lines
    following the keyword line. For COMMENT and END_KEYWORD tokens, data is
    the verbatim source line including line break.
    """

    kind: TokenKind
    name: str = ""
    data: str = ""
    attributes: list = field(default_factory=list)

    def param_string(self):
        """
        :returns: The parameters as they would appear in the keyword line,
            ie. ", type=C3D8, generate".
        """
        return "".join(f", {attr}" for attr in self.attributes)

    def data_lines(self):
        """
        :returns: The lines of the data, with line breaks.
        """
        return self.data.splitlines(keepends=True)

    def __str__(self):
        if self.kind in TokenKind.line_kinds():
            return self.data
        if self.kind == TokenKind.KEYWORD:
            return f"*{self.name}{self.param_string()}\n{self.data}"
        return ""
