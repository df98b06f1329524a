class Outcome:
    """How a statement finished: normally, by break or continue, or by return.

    Statement execution hands one of these back to its caller instead of
    unwinding the Python stack; loops consume BREAK and CONTINUE, function
    calls consume RETURN.
    """

    __slots__ = ("kind", "value")

    def __init__(self, kind, value=None):
        self.kind = kind
        self.value = value

    def __repr__(self):
        if self.kind == "RETURN":
            return f"Outcome(RETURN, {self.value!r})"
        return f"Outcome({self.kind})"


NORMAL = Outcome("NORMAL")
BREAK = Outcome("BREAK")
CONTINUE = Outcome("CONTINUE")


def returning(value):
    return Outcome("RETURN", value)
