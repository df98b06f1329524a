from .config import Options
from .syntax import Expr, Stmt, UnhandledNode

MAGIC_METHODS = {"$get": 1, "$set": 2}


class VarInfo:
    def __init__(self, token, defined=False, used=False):
        self.token = token
        self.defined = defined
        self.used = used


class Resolver:
    """Computes how many scopes separate each local reference from its binding.

    Only block, function, class and loop-variable scopes are tracked. A name
    that is not found in any of them is left out of the table and looked up
    in the globals at run time.
    """

    def __init__(self, diagnostics, options=None):
        self.diagnostics = diagnostics
        self.options = options or Options()
        self.scopes = []
        self.locals = {}
        self.current_function = "NONE"
        self.current_class = "NONE"
        self.loop_depth = 0

    def resolve(self, statements):
        for statement in statements:
            self.resolve_stmt(statement)
        return self.locals

    def resolve_stmt(self, stmt):
        match stmt:
            case Stmt.Block(statements):
                self.begin_scope()
                for statement in statements:
                    self.resolve_stmt(statement)
                self.end_scope()
            case Stmt.Break(keyword):
                if self.loop_depth == 0:
                    self.diagnostics.error(
                        keyword, "Can't use 'break' outside of a loop.")
            case Stmt.Class():
                self.resolve_class(stmt)
            case Stmt.Continue(keyword):
                if self.loop_depth == 0:
                    self.diagnostics.error(
                        keyword, "Can't use 'continue' outside of a loop.")
            case Stmt.Expression(expression) | Stmt.Print(expression):
                self.resolve_expr(expression)
            case Stmt.Foreach(_, name, iterable, body):
                self.resolve_expr(iterable)
                self.begin_scope()
                self.declare(name)
                self.define(name)
                self.resolve_loop_body(body)
                self.end_scope()
            case Stmt.Function(name):
                self.declare(name)
                self.define(name)
                self.resolve_function(stmt, "FUNCTION")
            case Stmt.If(condition, then_branch, else_branch):
                self.resolve_expr(condition)
                self.resolve_stmt(then_branch)
                if else_branch is not None:
                    self.resolve_stmt(else_branch)
            case Stmt.Return(keyword, value):
                if self.current_function == "NONE":
                    self.diagnostics.error(
                        keyword, "Can't return from top-level code.")
                if value is not None:
                    if self.current_function == "INITIALIZER":
                        self.diagnostics.error(
                            keyword, "Can't return a value from an initializer.")
                    self.resolve_expr(value)
            case Stmt.Var(name, initializer, _):
                self.declare(name)
                if initializer is not None:
                    self.resolve_expr(initializer)
                self.define(name)
            case Stmt.While(_, condition, body, increment):
                self.resolve_expr(condition)
                self.resolve_loop_body(body)
                if increment is not None:
                    self.resolve_expr(increment)
            case _:
                raise UnhandledNode(stmt)

    def resolve_class(self, stmt):
        enclosing_class = self.current_class
        self.current_class = "CLASS"

        self.declare(stmt.name)
        self.define(stmt.name)

        if stmt.superclass is not None:
            if stmt.name.lexeme == stmt.superclass.name.lexeme:
                self.diagnostics.error(
                    stmt.superclass.name, "A class can't inherit from itself.")
            self.current_class = "SUBCLASS"
            self.resolve_expr(stmt.superclass)
            self.begin_scope()
            self.scopes[-1]["super"] = VarInfo(stmt.superclass.name, True, True)

        self.begin_scope()
        self.scopes[-1]["this"] = VarInfo(stmt.name, True, True)
        for method in stmt.methods:
            self.check_magic_method(method)
            kind = "METHOD"
            if method.name.lexeme == "init":
                kind = "INITIALIZER"
            self.resolve_function(method, kind)
        self.end_scope()

        if stmt.superclass is not None:
            self.end_scope()

        self.current_class = enclosing_class

    def check_magic_method(self, method):
        if method.name.type != "MAGIC_IDENTIFIER":
            return
        name = method.name.lexeme
        if (arity := MAGIC_METHODS.get(name)) is None:
            self.diagnostics.error(method.name, f"Unknown magic method '{name}'.")
        elif method.is_getter or len(method.params) != arity:
            self.diagnostics.error(
                method.name, f"Magic method '{name}' must take {arity} parameter(s).")

    def resolve_expr(self, expr):
        match expr:
            case Expr.Assign(name, value):
                self.resolve_expr(value)
                self.resolve_local(expr, name)
            case Expr.Binary(left, _, right) | Expr.Logical(left, _, right):
                self.resolve_expr(left)
                self.resolve_expr(right)
            case Expr.Call(callee, _, arguments):
                self.resolve_expr(callee)
                for argument in arguments:
                    self.resolve_expr(argument)
            case Expr.Function():
                self.resolve_function(expr, "FUNCTION")
            case Expr.Get(obj, _):
                self.resolve_expr(obj)
            case Expr.Grouping(expression):
                self.resolve_expr(expression)
            case Expr.IndexGet(obj, _, index):
                self.resolve_expr(obj)
                self.resolve_expr(index)
            case Expr.IndexSet(obj, _, index, value):
                self.resolve_expr(value)
                self.resolve_expr(obj)
                self.resolve_expr(index)
            case Expr.Literal():
                pass
            case Expr.Set(obj, _, value):
                self.resolve_expr(value)
                self.resolve_expr(obj)
            case Expr.Super(keyword, _):
                if self.current_class == "NONE":
                    self.diagnostics.error(
                        keyword, "Can't use 'super' outside of a class.")
                elif self.current_class != "SUBCLASS":
                    self.diagnostics.error(
                        keyword, "Can't use 'super' in a class with no superclass.")
                self.resolve_local(expr, keyword)
            case Expr.This(keyword):
                if self.current_class == "NONE":
                    self.diagnostics.error(
                        keyword, "Can't use 'this' outside of a class.")
                    return
                self.resolve_local(expr, keyword)
            case Expr.Unary(_, right):
                self.resolve_expr(right)
            case Expr.Variable(name):
                if self.scopes and (info := self.scopes[-1].get(name.lexeme)) and not info.defined:
                    self.diagnostics.error(
                        name, "Can't read local variable in its own initializer.")
                self.resolve_local(expr, name)
            case _:
                raise UnhandledNode(expr)

    def resolve_loop_body(self, body):
        self.loop_depth += 1
        self.resolve_stmt(body)
        self.loop_depth -= 1

    def resolve_function(self, function, kind):
        enclosing_function = self.current_function
        enclosing_loop_depth = self.loop_depth
        self.current_function = kind
        self.loop_depth = 0

        self.begin_scope()
        for param in function.params:
            self.declare(param)
            self.define(param)
            self.scopes[-1][param.lexeme].used = True
        for stmt in function.body:
            self.resolve_stmt(stmt)
        self.end_scope()

        self.current_function = enclosing_function
        self.loop_depth = enclosing_loop_depth

    def begin_scope(self):
        self.scopes.append({})

    def end_scope(self):
        scope = self.scopes.pop()
        if not self.options.warn_unused:
            return
        for name, info in scope.items():
            if not info.used:
                self.diagnostics.warning(
                    info.token, f"Local variable '{name}' is never used.")

    def declare(self, name):
        if not self.scopes:
            return
        scope = self.scopes[-1]
        if name.lexeme in scope:
            self.diagnostics.error(
                name, "Already a variable with this name in this scope.")
        scope[name.lexeme] = VarInfo(name)

    def define(self, name):
        if not self.scopes:
            return
        self.scopes[-1][name.lexeme].defined = True

    def resolve_local(self, expr, name):
        for distance, scope in enumerate(reversed(self.scopes)):
            if info := scope.get(name.lexeme):
                info.used = True
                self.locals[expr] = distance
                return
