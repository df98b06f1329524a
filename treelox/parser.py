from .errors import ParseError
from .syntax import Expr, Stmt

MAX_ARGUMENTS = 255


class Parser:
    Error = ParseError

    def __init__(self, tokens, diagnostics):
        self.tokens = tokens
        self.diagnostics = diagnostics
        self.current = 0

    def parse(self):
        statements = []
        try:
            while not self.at_end():
                if (statement := self.declaration()) is not None:
                    statements.append(statement)
        except RecursionError:
            self.error(self.peek(), "Program nests too deeply.")
        return statements

    def declaration(self):
        try:
            if self.match("CLASS"):
                return self.class_declaration()
            if self.peek().type == "FUN" and self.peek_next().type == "IDENTIFIER":
                self.advance()
                return self.function("function")
            if self.match("VAR"):
                return self.var_declaration(is_const=False)
            if self.match("CONST"):
                return self.var_declaration(is_const=True)
            return self.statement()
        except Parser.Error:
            self.synchronize()
            return None

    def class_declaration(self):
        name = self.consume("IDENTIFIER", "Expected class name.")

        superclass = None
        if self.match("LESS"):
            superclass = Expr.Variable(self.consume(
                "IDENTIFIER", "Expected superclass name."))

        self.consume("LEFT_BRACE", "Expected '{' before class body.")

        methods = []
        while not self.at_end() and self.peek().type != "RIGHT_BRACE":
            methods.append(self.function("method"))

        self.consume("RIGHT_BRACE", "Expected '}' after class body.")
        return Stmt.Class(name, superclass, methods)

    def function(self, kind):
        name = None
        if kind == "method":
            name = self.match("MAGIC_IDENTIFIER")
        if name is None:
            name = self.consume("IDENTIFIER", f"Expected {kind} name.")

        if kind == "method" and self.match("LEFT_BRACE"):
            return Stmt.Function(name, [], self.block(), True)

        self.consume("LEFT_PAREN", f"Expected '(' after {kind} name.")
        params = self.parameters()
        self.consume("LEFT_BRACE", f"Expected '{'{'}' before {kind} body.")
        return Stmt.Function(name, params, self.block(), False)

    def parameters(self):
        params = []
        if self.peek().type != "RIGHT_PAREN":
            params.append(self.consume(
                "IDENTIFIER", "Expected parameter name."))
            while self.match("COMMA"):
                if len(params) >= MAX_ARGUMENTS:
                    self.error(
                        self.peek(), "Can't have more than 255 parameters.")
                params.append(self.consume(
                    "IDENTIFIER", "Expected parameter name."))

        self.consume("RIGHT_PAREN", "Expected ')' after parameters.")
        return params

    def statement(self):
        if keyword := self.match("FOR"):
            return self.for_statement(keyword)
        if keyword := self.match("FOREACH"):
            return self.foreach_statement(keyword)
        if self.match("IF"):
            return self.if_statement()
        if self.match("PRINT"):
            return self.print_statement()
        if self.match("LEFT_BRACE"):
            return Stmt.Block(self.block())
        if keyword := self.match("RETURN"):
            return self.return_statement(keyword)
        if keyword := self.match("BREAK"):
            self.consume("SEMICOLON", "Expected ';' after 'break'.")
            return Stmt.Break(keyword)
        if keyword := self.match("CONTINUE"):
            self.consume("SEMICOLON", "Expected ';' after 'continue'.")
            return Stmt.Continue(keyword)
        if keyword := self.match("WHILE"):
            return self.while_statement(keyword)
        return self.expression_statement()

    def block(self):
        statements = []
        while self.peek().type != "RIGHT_BRACE" and not self.at_end():
            if (statement := self.declaration()) is not None:
                statements.append(statement)
        self.consume("RIGHT_BRACE", "Expected '}' after block.")
        return statements

    def for_statement(self, keyword):
        self.consume("LEFT_PAREN", "Expected '(' after 'for'.")

        initializer = None
        if self.match("VAR"):
            initializer = self.var_declaration(is_const=False)
        elif not self.match("SEMICOLON"):
            initializer = self.expression_statement()

        condition = None
        if self.peek().type != "SEMICOLON":
            condition = self.expression()
        self.consume("SEMICOLON", "Expected ';' after loop condition.")

        increment = None
        if self.peek().type != "RIGHT_PAREN":
            increment = self.expression()

        self.consume("RIGHT_PAREN", "Expected ')' after for clauses.")
        body = self.statement()

        if condition is None:
            condition = Expr.Literal(True)
        loop = Stmt.While(keyword, condition, body, increment)
        if initializer is not None:
            return Stmt.Block([initializer, loop])
        return loop

    def foreach_statement(self, keyword):
        self.consume("LEFT_PAREN", "Expected '(' after 'foreach'.")
        self.consume("VAR", "Expected 'var' in foreach.")
        name = self.consume("IDENTIFIER", "Expected variable name.")
        self.consume("IN", "Expected 'in' after foreach variable.")
        iterable = self.expression()
        self.consume("RIGHT_PAREN", "Expected ')' after foreach clause.")
        body = self.statement()
        return Stmt.Foreach(keyword, name, iterable, body)

    def if_statement(self):
        self.consume("LEFT_PAREN", "Expected '(' after 'if'.")
        condition = self.expression()
        self.consume("RIGHT_PAREN", "Expected ')' after condition.")
        then_branch = self.statement()
        else_branch = None
        if self.match("ELSE"):
            else_branch = self.statement()
        return Stmt.If(condition, then_branch, else_branch)

    def expression_statement(self):
        expression = self.expression()
        self.consume("SEMICOLON", "Expected ';' after expression.")
        return Stmt.Expression(expression)

    def print_statement(self):
        expression = self.expression()
        self.consume("SEMICOLON", "Expected ';' after value.")
        return Stmt.Print(expression)

    def return_statement(self, keyword):
        value = None
        if self.peek().type != "SEMICOLON":
            value = self.expression()
        self.consume("SEMICOLON", "Expected ';' after return value.")
        return Stmt.Return(keyword, value)

    def var_declaration(self, is_const):
        name = self.consume("IDENTIFIER", "Expected variable name.")
        initializer = None
        if is_const:
            self.consume(
                "EQUAL", "Missing initializer in const variable declaration.")
            initializer = self.expression()
        elif self.match("EQUAL"):
            initializer = self.expression()
        self.consume("SEMICOLON", "Expected ';' after variable declaration.")
        return Stmt.Var(name, initializer, is_const)

    def while_statement(self, keyword):
        self.consume("LEFT_PAREN", "Expected '(' after 'while'.")
        condition = self.expression()
        self.consume("RIGHT_PAREN", "Expected ')' after condition.")
        body = self.statement()
        return Stmt.While(keyword, condition, body, None)

    def expression(self):
        return self.assignment()

    def assignment(self):
        expr = self.logic_or()
        if equals := self.match("EQUAL"):
            value = self.assignment()
            match expr:
                case Expr.Variable(name):
                    return Expr.Assign(name, value)
                case Expr.Get(obj, name):
                    return Expr.Set(obj, name, value)
                case Expr.IndexGet(obj, bracket, index):
                    return Expr.IndexSet(obj, bracket, index, value)
            self.error(equals, "Invalid assignment target.")
        return expr

    def logic_or(self):
        expr = self.logic_and()
        while operator := self.match("OR"):
            expr = Expr.Logical(expr, operator, self.logic_and())
        return expr

    def logic_and(self):
        expr = self.equality()
        while operator := self.match("AND"):
            expr = Expr.Logical(expr, operator, self.equality())
        return expr

    def equality(self):
        expr = self.comparison()
        while operator := self.match("BANG_EQUAL", "EQUAL_EQUAL"):
            expr = Expr.Binary(expr, operator, self.comparison())
        return expr

    def comparison(self):
        expr = self.term()
        while operator := self.match("GREATER", "GREATER_EQUAL", "LESS", "LESS_EQUAL"):
            expr = Expr.Binary(expr, operator, self.term())
        return expr

    def term(self):
        expr = self.factor()
        while operator := self.match("MINUS", "PLUS"):
            expr = Expr.Binary(expr, operator, self.factor())
        return expr

    def factor(self):
        expr = self.unary()
        while operator := self.match("SLASH", "STAR"):
            expr = Expr.Binary(expr, operator, self.unary())
        return expr

    def unary(self):
        if operator := self.match("BANG", "MINUS"):
            return Expr.Unary(operator, self.unary())
        return self.call()

    def call(self):
        expr = self.primary()
        while True:
            if self.match("LEFT_PAREN"):
                expr = self.finish_call(expr)
            elif self.match("DOT"):
                name = self.consume(
                    "IDENTIFIER", "Expected property name after '.'.")
                expr = Expr.Get(expr, name)
            elif self.match("LEFT_BRACKET"):
                index = self.expression()
                bracket = self.consume(
                    "RIGHT_BRACKET", "Expected ']' after index expression.")
                expr = Expr.IndexGet(expr, bracket, index)
            else:
                break
        return expr

    def finish_call(self, callee):
        arguments = []
        if self.peek().type != "RIGHT_PAREN":
            arguments.append(self.expression())
            while self.match("COMMA"):
                if len(arguments) >= MAX_ARGUMENTS:
                    self.error(
                        self.peek(), "Can't have more than 255 arguments.")
                arguments.append(self.expression())
        paren = self.consume("RIGHT_PAREN", "Expected ')' after arguments.")
        return Expr.Call(callee, paren, arguments)

    def primary(self):
        if self.match("FALSE"):
            return Expr.Literal(False)
        if self.match("TRUE"):
            return Expr.Literal(True)
        if self.match("NIL"):
            return Expr.Literal(None)
        if token := self.match("NUMBER", "STRING"):
            return Expr.Literal(token.literal)
        if self.match("LEFT_PAREN"):
            expr = self.expression()
            self.consume("RIGHT_PAREN", "Expected ')' after expression.")
            return Expr.Grouping(expr)
        if keyword := self.match("FUN"):
            self.consume("LEFT_PAREN", "Expected '(' after 'fun'.")
            params = self.parameters()
            self.consume("LEFT_BRACE", "Expected '{' before function body.")
            return Expr.Function(keyword, params, self.block())
        if keyword := self.match("SUPER"):
            self.consume("DOT", "Expected '.' after 'super'.")
            method = self.consume(
                "IDENTIFIER", "Expected superclass method name.")
            return Expr.Super(keyword, method)
        if keyword := self.match("THIS"):
            return Expr.This(keyword)
        if token := self.match("IDENTIFIER"):
            return Expr.Variable(token)
        raise self.error(self.peek(), "Expected expression.")

    def synchronize(self):
        while not self.at_end():
            match self.peek().type:
                case "SEMICOLON":
                    self.advance()
                    return
                case ("CLASS" | "FUN" | "VAR" | "CONST" | "FOR" | "FOREACH" | "IF"
                      | "WHILE" | "PRINT" | "RETURN" | "BREAK" | "CONTINUE"):
                    return
            self.advance()

    def consume(self, token_type, message):
        if token := self.match(token_type):
            return token
        raise self.error(self.peek(), message)

    def match(self, *token_types):
        if self.peek().type in token_types:
            return self.advance()
        return None

    def advance(self):
        token = self.peek()
        if not self.at_end():
            self.current += 1
        return token

    def at_end(self):
        return self.peek().type == "EOF"

    def peek(self):
        return self.tokens[self.current]

    def peek_next(self):
        if self.at_end():
            return self.peek()
        return self.tokens[self.current + 1]

    def error(self, token, message):
        self.diagnostics.error(token, message)
        return Parser.Error()
