"""Renders a syntax tree back to source text.

Only grouping parentheses present in the tree are printed, so the output of a
parsed program parses back into a tree with the same structure.
"""

from .syntax import Expr, Stmt, UnhandledNode


class AstPrinter:
    def __init__(self, indent="    "):
        self.indent = indent

    def print(self, statements):
        return "\n".join(self.stmt(statement, 0) for statement in statements)

    def stmt(self, stmt, depth):
        return self.indent * depth + self.inline_stmt(stmt, depth)

    def inline_stmt(self, stmt, depth):
        match stmt:
            case Stmt.Block(statements):
                return self.block(statements, depth)
            case Stmt.Break():
                return "break;"
            case Stmt.Class(name, superclass, methods):
                header = f"class {name.lexeme}"
                if superclass is not None:
                    header += f" < {superclass.name.lexeme}"
                if not methods:
                    return header + " {}"
                lines = [header + " {"]
                for method in methods:
                    lines.append(self.indent * (depth + 1) + self.function(method, depth + 1))
                lines.append(self.indent * depth + "}")
                return "\n".join(lines)
            case Stmt.Continue():
                return "continue;"
            case Stmt.Expression(expression):
                return self.expr(expression, depth) + ";"
            case Stmt.Foreach(_, name, iterable, body):
                return (f"foreach (var {name.lexeme} in {self.expr(iterable, depth)}) "
                        + self.inline_stmt(body, depth))
            case Stmt.Function():
                return "fun " + self.function(stmt, depth)
            case Stmt.If(condition, then_branch, else_branch):
                text = f"if ({self.expr(condition, depth)}) {self.inline_stmt(then_branch, depth)}"
                if else_branch is not None:
                    text += " else " + self.inline_stmt(else_branch, depth)
                return text
            case Stmt.Print(expression):
                return f"print {self.expr(expression, depth)};"
            case Stmt.Return(_, None):
                return "return;"
            case Stmt.Return(_, value):
                return f"return {self.expr(value, depth)};"
            case Stmt.Var(name, initializer, is_const):
                keyword = "const" if is_const else "var"
                if initializer is None:
                    return f"{keyword} {name.lexeme};"
                return f"{keyword} {name.lexeme} = {self.expr(initializer, depth)};"
            case Stmt.While(keyword, condition, body, increment):
                if keyword.type == "FOR":
                    step = "" if increment is None else " " + self.expr(increment, depth)
                    header = f"for (; {self.expr(condition, depth)};{step})"
                else:
                    header = f"while ({self.expr(condition, depth)})"
                return header + " " + self.inline_stmt(body, depth)
            case _:
                raise UnhandledNode(stmt)

    def block(self, statements, depth):
        if not statements:
            return "{}"
        lines = ["{"]
        lines.extend(self.stmt(statement, depth + 1) for statement in statements)
        lines.append(self.indent * depth + "}")
        return "\n".join(lines)

    def function(self, function, depth):
        if function.is_getter:
            return f"{function.name.lexeme} {self.block(function.body, depth)}"
        return f"{function.name.lexeme}({self.params(function.params)}) {self.block(function.body, depth)}"

    def params(self, params):
        return ", ".join(param.lexeme for param in params)

    def expr(self, expr, depth=0):
        match expr:
            case Expr.Assign(name, value):
                return f"{name.lexeme} = {self.expr(value, depth)}"
            case Expr.Binary(left, operator, right) | Expr.Logical(left, operator, right):
                return f"{self.expr(left, depth)} {operator.lexeme} {self.expr(right, depth)}"
            case Expr.Call(callee, _, arguments):
                args = ", ".join(self.expr(argument, depth) for argument in arguments)
                return f"{self.expr(callee, depth)}({args})"
            case Expr.Function(_, params, body):
                return f"fun ({self.params(params)}) {self.block(body, depth)}"
            case Expr.Get(obj, name):
                return f"{self.expr(obj, depth)}.{name.lexeme}"
            case Expr.Grouping(expression):
                return f"({self.expr(expression, depth)})"
            case Expr.IndexGet(obj, _, index):
                return f"{self.expr(obj, depth)}[{self.expr(index, depth)}]"
            case Expr.IndexSet(obj, _, index, value):
                return f"{self.expr(obj, depth)}[{self.expr(index, depth)}] = {self.expr(value, depth)}"
            case Expr.Literal(value):
                return literal(value)
            case Expr.Set(obj, name, value):
                return f"{self.expr(obj, depth)}.{name.lexeme} = {self.expr(value, depth)}"
            case Expr.Super(_, method):
                return f"super.{method.lexeme}"
            case Expr.This():
                return "this"
            case Expr.Unary(operator, right):
                return f"{operator.lexeme}{self.expr(right, depth)}"
            case Expr.Variable(name):
                return name.lexeme
            case _:
                raise UnhandledNode(expr)


def literal(value):
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        text = repr(value)
        if "e" in text:
            # The scanner has no exponent form.
            text = f"{value:.20f}".rstrip("0")
        return text
    return f"\"{value}\""
