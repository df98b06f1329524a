class ParseError(RuntimeError):
    pass


class LoxRuntimeError(RuntimeError):
    def __init__(self, token, message):
        super().__init__(message)
        self.token = token
        self.message = message


class NativeError(RuntimeError):
    """Raised by native functions, which have no token to blame.

    The interpreter turns it into a LoxRuntimeError located at the call site.
    """

    def __init__(self, message):
        super().__init__(message)
        self.message = message
