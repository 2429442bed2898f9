class WatError(Exception):
    """ Base class for all Wat hard failures"""
    pass

class WatSyntaxError(WatError):
    """ Raised when program text is malformed"""

class WatUnclosedQuote(WatSyntaxError):
    """ Raised when a string literal is still open at end of input"""

class WatUnclosedParenthesis(WatSyntaxError):
    """ Raised when the token stream ends before a matching ')'"""

class WatExpectedOpenParen(WatSyntaxError):
    """ Raised when a form does not start with '('"""

class WatUnboundSymbol(WatError):
    """ Raised when a symbol is used before it is bound"""

class WatUnknownOperator(WatError):
    """ Raised when the head of a form is not a core form or a closure"""

class WatRecursionDepthExceeded(WatError):
    """ Raised when nested evaluation goes deeper than the configured limit,
    or deeper than the Python stack allows"""

    def __init__(self, limit: int):
        super().__init__(f"Maximum evaluation depth exceeded ({limit})")
        self.limit = limit
