from .errors import LoxRuntimeError


class Box:
    __slots__ = ("value", "is_const")

    def __init__(self, value, is_const=False):
        self.value = value
        self.is_const = is_const


class Environment:
    def __init__(self, enclosing=None):
        self.values = {}
        self.enclosing = enclosing

    def define(self, name, value, is_const=False):
        self.values[name] = Box(value, is_const)

    def assign(self, name, value):
        environment = self
        while environment is not None:
            if box := environment.values.get(name.lexeme):
                set_box(box, name, value)
                return
            environment = environment.enclosing
        raise LoxRuntimeError(
            name, f"Undefined variable '{name.lexeme}'.")

    def get(self, name):
        environment = self
        while environment is not None:
            if box := environment.values.get(name.lexeme):
                return box.value
            environment = environment.enclosing
        raise LoxRuntimeError(
            name, f"Undefined variable '{name.lexeme}'.")

    def assign_at(self, distance, name, value):
        set_box(self.ancestor(distance).values[name.lexeme], name, value)
        return value

    def get_at(self, distance, name):
        return self.ancestor(distance).values[name].value

    def ancestor(self, distance):
        environment = self
        for i in range(distance):
            environment = environment.enclosing
        return environment


def set_box(box, name, value):
    if box.is_const:
        raise LoxRuntimeError(
            name, f"Can't assign to const variable '{name.lexeme}'.")
    box.value = value
