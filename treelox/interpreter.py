import math

from .config import Options
from .control import BREAK, CONTINUE, NORMAL, returning
from .environment import Environment
from .errors import LoxRuntimeError, NativeError
from .runtime import (
    NATIVES,
    LoxArray,
    LoxCallable,
    LoxClass,
    LoxFunction,
    LoxInstance,
    NativeFunction,
    stringify,
)
from .syntax import Expr, Stmt, UnhandledNode

ASSIGNMENTS = (Expr.Assign, Expr.Set, Expr.IndexSet)


class Interpreter:
    Error = LoxRuntimeError

    def __init__(self, diagnostics, options=None, write=print):
        self.diagnostics = diagnostics
        self.options = options or Options()
        self.write = write
        self.globals = Environment()
        self.environment = self.globals
        self.locals = {}

        for name, function in NATIVES.items():
            self.globals.define(name, NativeFunction(name, function))

    def resolve(self, locals):
        self.locals.update(locals)

    def interpret(self, statements):
        try:
            for statement in statements:
                match statement:
                    case Stmt.Expression(expression) if self.options.repl_echo:
                        value = self.evaluate(expression)
                        if not isinstance(expression, ASSIGNMENTS):
                            self.write(stringify(value))
                    case _:
                        self.execute(statement)
        except LoxRuntimeError as error:
            self.diagnostics.runtime_error(error)

    def evaluate(self, expr):
        match expr:
            case Expr.Assign(name, value_expr):
                value = self.evaluate(value_expr)
                if (distance := self.locals.get(expr)) is not None:
                    self.environment.assign_at(distance, name, value)
                else:
                    self.globals.assign(name, value)
                return value
            case Expr.Binary(left, operator, right):
                return self.binary(operator, self.evaluate(left), self.evaluate(right))
            case Expr.Call():
                return self.call(expr)
            case Expr.Function():
                return LoxFunction(expr, self.environment)
            case Expr.Get(obj_expr, name):
                obj = self.evaluate(obj_expr)
                if not isinstance(obj, LoxInstance):
                    raise Interpreter.Error(
                        name, "Only instances have properties.")
                return self.invoke_getter(obj.get(name))
            case Expr.Grouping(expression):
                return self.evaluate(expression)
            case Expr.IndexGet(obj_expr, bracket, index_expr):
                obj = self.evaluate(obj_expr)
                index = self.evaluate(index_expr)
                if not isinstance(obj, LoxInstance):
                    raise Interpreter.Error(bracket, "Value is not indexable.")
                return obj.get_index(self, bracket, index)
            case Expr.IndexSet(obj_expr, bracket, index_expr, value_expr):
                obj = self.evaluate(obj_expr)
                index = self.evaluate(index_expr)
                value = self.evaluate(value_expr)
                if not isinstance(obj, LoxInstance):
                    raise Interpreter.Error(bracket, "Value is not indexable.")
                return obj.set_index(self, bracket, index, value)
            case Expr.Literal(value):
                return value
            case Expr.Logical(left_expr, operator, right_expr):
                left = self.evaluate(left_expr)
                if operator.type == "OR":
                    if self.is_truthy(left):
                        return left
                elif not self.is_truthy(left):
                    return left
                return self.evaluate(right_expr)
            case Expr.Set(obj_expr, name, value_expr):
                obj = self.evaluate(obj_expr)
                if not isinstance(obj, LoxInstance):
                    raise Interpreter.Error(name, "Only instances have fields.")
                value = self.evaluate(value_expr)
                obj.set(name, value)
                return value
            case Expr.Super():
                return self.super_method(expr)
            case Expr.This(keyword):
                return self.lookup_variable(keyword, expr)
            case Expr.Unary(operator, right_expr):
                right = self.evaluate(right_expr)
                if operator.type == "BANG":
                    return not self.is_truthy(right)
                self.check_number_operands(operator, right)
                return -right
            case Expr.Variable(name):
                return self.lookup_variable(name, expr)
            case _:
                raise UnhandledNode(expr)

    def execute(self, stmt):
        match stmt:
            case Stmt.Block(statements):
                return self.execute_block(statements, Environment(self.environment))
            case Stmt.Break():
                return BREAK
            case Stmt.Class():
                self.execute_class(stmt)
            case Stmt.Continue():
                return CONTINUE
            case Stmt.Expression(expression):
                self.evaluate(expression)
            case Stmt.Foreach():
                return self.execute_foreach(stmt)
            case Stmt.Function(name):
                function = LoxFunction(stmt, self.environment)
                self.environment.define(name.lexeme, function)
            case Stmt.If(condition, then_branch, else_branch):
                if self.is_truthy(self.evaluate(condition)):
                    return self.execute(then_branch)
                if else_branch is not None:
                    return self.execute(else_branch)
            case Stmt.Print(expression):
                self.write(stringify(self.evaluate(expression)))
            case Stmt.Return(_, value_expr):
                value = None
                if value_expr is not None:
                    value = self.evaluate(value_expr)
                return returning(value)
            case Stmt.Var(name, initializer, is_const):
                value = None
                if initializer is not None:
                    value = self.evaluate(initializer)
                self.environment.define(name.lexeme, value, is_const)
            case Stmt.While():
                return self.execute_while(stmt)
            case _:
                raise UnhandledNode(stmt)
        return NORMAL

    def execute_block(self, statements, environment):
        previous = self.environment
        try:
            self.environment = environment
            for statement in statements:
                outcome = self.execute(statement)
                if outcome is not NORMAL:
                    return outcome
            return NORMAL
        finally:
            self.environment = previous

    def execute_class(self, stmt):
        superclass = None
        if stmt.superclass is not None:
            superclass = self.evaluate(stmt.superclass)
            if not isinstance(superclass, LoxClass):
                raise Interpreter.Error(
                    stmt.superclass.name, "Superclass must be a class.")

        self.environment.define(stmt.name.lexeme, None)

        closure = self.environment
        if superclass is not None:
            closure = Environment(self.environment)
            closure.define("super", superclass)

        methods = {
            method.name.lexeme: LoxFunction(
                method, closure, method.name.lexeme == "init")
            for method in stmt.methods}

        klass = LoxClass(stmt.name.lexeme, superclass, methods)
        self.environment.assign(stmt.name, klass)

    def execute_while(self, stmt):
        iterations = 0
        while self.is_truthy(self.evaluate(stmt.condition)):
            iterations += 1
            self.check_loop_budget(stmt.keyword, iterations)
            outcome = self.execute(stmt.body)
            if outcome is BREAK:
                break
            if outcome.kind == "RETURN":
                return outcome
            if stmt.increment is not None:
                self.evaluate(stmt.increment)
        return NORMAL

    def execute_foreach(self, stmt):
        sequence = self.evaluate(stmt.iterable)
        if not isinstance(sequence, LoxArray):
            raise Interpreter.Error(stmt.keyword, "Can only iterate over arrays.")

        index = 0
        while index < len(sequence.elements):
            self.check_loop_budget(stmt.keyword, index + 1)
            environment = Environment(self.environment)
            environment.define(stmt.name.lexeme, sequence.elements[index])
            outcome = self.execute_block([stmt.body], environment)
            if outcome is BREAK:
                break
            if outcome.kind == "RETURN":
                return outcome
            index += 1
        return NORMAL

    def check_loop_budget(self, keyword, iterations):
        limit = self.options.max_loop_iterations
        if limit is not None and iterations > limit:
            raise Interpreter.Error(
                keyword, f"Loop iteration limit of {limit} exceeded.")

    def call(self, expr):
        callee = self.evaluate(expr.callee)
        if not isinstance(callee, LoxCallable):
            raise Interpreter.Error(
                expr.paren, "Can only call functions and classes.")
        arguments = [self.evaluate(argument) for argument in expr.arguments]
        if len(arguments) != callee.arity():
            raise Interpreter.Error(
                expr.paren, f"Expected {callee.arity()} arguments but got {len(arguments)}.")
        try:
            return callee.call(self, arguments)
        except NativeError as error:
            raise Interpreter.Error(expr.paren, error.message) from error
        except RecursionError:
            raise Interpreter.Error(expr.paren, "Stack overflow.") from None

    def super_method(self, expr):
        distance = self.locals[expr]
        superclass = self.environment.get_at(distance, "super")
        instance = self.environment.get_at(distance - 1, "this")

        method = superclass.find_method(expr.method.lexeme)
        if method is None:
            raise Interpreter.Error(
                expr.method, f"Undefined property '{expr.method.lexeme}'.")
        return self.invoke_getter(method.bind(instance))

    def invoke_getter(self, value):
        if isinstance(value, LoxFunction) and value.is_getter:
            return value.call(self, [])
        return value

    def lookup_variable(self, name, expr):
        if (distance := self.locals.get(expr)) is not None:
            return self.environment.get_at(distance, name.lexeme)
        return self.globals.get(name)

    def binary(self, operator, left, right):
        match operator.type:
            case "BANG_EQUAL": return not self.is_equal(left, right)
            case "EQUAL_EQUAL": return self.is_equal(left, right)
            case "GREATER":
                self.check_number_operands(operator, left, right)
                return left > right
            case "GREATER_EQUAL":
                self.check_number_operands(operator, left, right)
                return left >= right
            case "LESS":
                self.check_number_operands(operator, left, right)
                return left < right
            case "LESS_EQUAL":
                self.check_number_operands(operator, left, right)
                return left <= right
            case "MINUS":
                self.check_number_operands(operator, left, right)
                return left - right
            case "PLUS":
                if isinstance(left, float) and isinstance(right, float):
                    return left + right
                if isinstance(left, str) and isinstance(right, str):
                    return left + right
                raise Interpreter.Error(
                    operator, "Operands of '+' must be two numbers or two strings.")
            case "SLASH":
                self.check_number_operands(operator, left, right)
                if right == 0.0:
                    return ieee_divide_by_zero(left, right)
                return left / right
            case "STAR":
                self.check_number_operands(operator, left, right)
                return left * right
            case _:
                raise Interpreter.Error(
                    operator, f"Unknown operator '{operator.lexeme}'.")

    def is_truthy(self, value):
        if value is None:
            return False
        if isinstance(value, bool):
            return value
        return True

    def is_equal(self, left, right):
        if left is None or right is None:
            return left is right
        if isinstance(left, bool) or isinstance(right, bool):
            return left is right
        if isinstance(left, (float, str)) and type(left) is type(right):
            return left == right
        return left is right

    def check_number_operands(self, operator, *operands):
        if all(isinstance(operand, float) for operand in operands):
            return
        if len(operands) == 1:
            raise Interpreter.Error(
                operator, f"Operand of '{operator.lexeme}' must be a number.")
        raise Interpreter.Error(
            operator, f"Operands of '{operator.lexeme}' must be numbers.")


def ieee_divide_by_zero(left, right):
    if left == 0.0 or math.isnan(left):
        return math.nan
    return math.copysign(math.inf, left) * math.copysign(1.0, right)
