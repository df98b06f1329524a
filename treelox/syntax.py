"""Syntax tree node families.

Nodes are generated by make_syntax_tree_node and attached to their base class,
so an expression is built as ``Expr.Binary(left, operator, right)`` and taken
apart with ``case Expr.Binary(left, operator, right):``. The set of variants is
closed: every consumer matches all of them and raises on anything else.

Nodes compare and hash by identity, which is what lets the resolver key its
distance table on expression nodes.
"""


def make_syntax_tree_node(base_class, name, *attrs):
    def __init__(self, *values):
        if len(values) != len(attrs):
            message = f"{name}.__init__() take {len(attrs)} positional arguments but {len(values)} were given"
            raise TypeError(message)

        for attr, value in zip(attrs, values):
            setattr(self, attr, value)

    def __repr__(self):
        fields = ", ".join(repr(getattr(self, attr)) for attr in attrs)
        return f"{name}({fields})"

    subclass = type(
        name, (base_class,),
        {"__init__": __init__, "__repr__": __repr__,
         "__match_args__": attrs, "__slots__": attrs})

    setattr(base_class, name, subclass)
    base_class.VARIANTS += (subclass,)


class Expr:
    __slots__ = ()
    VARIANTS = ()


class Stmt:
    __slots__ = ()
    VARIANTS = ()


class UnhandledNode(TypeError):
    def __init__(self, node):
        super().__init__(f"Unhandled syntax tree node {type(node).__name__}.")
        self.node = node


# Expr subclasses
make_syntax_tree_node(Expr, "Assign", "name", "value")
make_syntax_tree_node(Expr, "Binary", "left", "operator", "right")
make_syntax_tree_node(Expr, "Call", "callee", "paren", "arguments")
make_syntax_tree_node(Expr, "Function", "keyword", "params", "body")
make_syntax_tree_node(Expr, "Get", "object", "name")
make_syntax_tree_node(Expr, "Grouping", "expression")
make_syntax_tree_node(Expr, "IndexGet", "object", "bracket", "index")
make_syntax_tree_node(Expr, "IndexSet", "object", "bracket", "index", "value")
make_syntax_tree_node(Expr, "Literal", "value")
make_syntax_tree_node(Expr, "Logical", "left", "operator", "right")
make_syntax_tree_node(Expr, "Set", "object", "name", "value")
make_syntax_tree_node(Expr, "Super", "keyword", "method")
make_syntax_tree_node(Expr, "This", "keyword")
make_syntax_tree_node(Expr, "Unary", "operator", "right")
make_syntax_tree_node(Expr, "Variable", "name")

# Stmt subclasses
make_syntax_tree_node(Stmt, "Block", "statements")
make_syntax_tree_node(Stmt, "Break", "keyword")
make_syntax_tree_node(Stmt, "Class", "name", "superclass", "methods")
make_syntax_tree_node(Stmt, "Continue", "keyword")
make_syntax_tree_node(Stmt, "Expression", "expression")
make_syntax_tree_node(Stmt, "Foreach", "keyword", "name", "iterable", "body")
make_syntax_tree_node(Stmt, "Function", "name", "params", "body", "is_getter")
make_syntax_tree_node(Stmt, "If", "condition", "then_branch", "else_branch")
make_syntax_tree_node(Stmt, "Print", "expression")
make_syntax_tree_node(Stmt, "Return", "keyword", "value")
make_syntax_tree_node(Stmt, "Var", "name", "initializer", "is_const")
make_syntax_tree_node(Stmt, "While", "keyword", "condition", "body", "increment")
