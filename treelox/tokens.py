from collections import namedtuple


KEYWORDS = {
    "and",
    "break",
    "class",
    "const",
    "continue",
    "else",
    "false",
    "for",
    "foreach",
    "fun",
    "if",
    "in",
    "nil",
    "or",
    "print",
    "return",
    "super",
    "this",
    "true",
    "var",
    "while",
}


Location = namedtuple("Location", ["file", "line", "offset"])


class Token(namedtuple("Token", ["type", "lexeme", "literal", "location"])):
    __slots__ = ()

    @property
    def line(self):
        return self.location.line

    def __str__(self):
        return f"{self.type} {self.lexeme} {self.literal}"

    def __repr__(self):
        return f"{self.type}({self.lexeme!r})"
