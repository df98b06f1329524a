import inspect
import math
import time
from decimal import Decimal
from functools import partial

from .environment import Environment
from .errors import LoxRuntimeError, NativeError
from .syntax import Stmt


def stringify(value):
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return stringify_number(value)
    return str(value)


def stringify_number(value):
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    text = repr(value)
    if value.is_integer() and abs(value) < 1e21:
        # Shortest round-trip digits, padded with zeros past the precision.
        return str(int(Decimal(text)))
    # Positional notation down to 1e-6, exponents without a padded zero.
    if "e-" in text and abs(value) >= 1e-6:
        return format(Decimal(text), "f")
    return text.replace("e-0", "e-")


class LoxCallable:
    is_getter = False

    def arity(self):
        raise NotImplementedError()

    def call(self, interpreter, arguments):
        raise NotImplementedError()


class LoxFunction(LoxCallable):
    def __init__(self, declaration, closure, is_initializer=False):
        self.declaration = declaration
        self.closure = closure
        self.is_initializer = is_initializer

    @property
    def is_getter(self):
        return isinstance(self.declaration, Stmt.Function) and self.declaration.is_getter

    def arity(self):
        return len(self.declaration.params)

    def bind(self, instance):
        environment = Environment(self.closure)
        environment.define("this", instance)
        return LoxFunction(self.declaration, environment, self.is_initializer)

    def call(self, interpreter, arguments):
        environment = Environment(self.closure)
        for param, argument in zip(self.declaration.params, arguments):
            environment.define(param.lexeme, argument)

        outcome = interpreter.execute_block(self.declaration.body, environment)

        if self.is_initializer:
            return self.closure.get_at(0, "this")
        if outcome.kind == "RETURN":
            return outcome.value
        return None

    def __str__(self):
        if not isinstance(self.declaration, Stmt.Function):
            return "<fn>"
        kind = "getter" if self.is_getter else "fn"
        return f"<{kind} {self.declaration.name.lexeme}>"


class NativeFunction(LoxCallable):
    def __init__(self, name, function):
        self.name = name
        self.function = function
        self._arity = len(inspect.signature(function).parameters)

    def arity(self):
        return self._arity

    def bind(self, receiver):
        return NativeFunction(self.name, partial(self.function, receiver))

    def call(self, interpreter, arguments):
        return self.function(*arguments)

    def __str__(self):
        return "<native fn>"


class LoxClass(LoxCallable):
    def __init__(self, name, superclass, methods):
        self.name = name
        self.superclass = superclass
        self.methods = methods

    def arity(self):
        if initializer := self.find_method("init"):
            return initializer.arity()
        return 0

    def call(self, interpreter, arguments):
        instance = LoxInstance(self)
        if initializer := self.find_method("init"):
            initializer.bind(instance).call(interpreter, arguments)
        return instance

    def find_method(self, name):
        if method := self.methods.get(name):
            return method
        if self.superclass is not None:
            return self.superclass.find_method(name)
        return None

    def __str__(self):
        return self.name


class LoxInstance:
    def __init__(self, klass):
        self.klass = klass
        self.fields = {}

    def get(self, name):
        if name.lexeme in self.fields:
            return self.fields[name.lexeme]
        if method := self.klass.find_method(name.lexeme):
            return method.bind(self)
        raise LoxRuntimeError(
            name, f"Undefined property '{name.lexeme}'.")

    def set(self, name, value):
        self.fields[name.lexeme] = value

    def get_index(self, interpreter, bracket, index):
        if method := self.klass.find_method("$get"):
            return method.bind(self).call(interpreter, [index])
        raise LoxRuntimeError(bracket, "Value is not indexable.")

    def set_index(self, interpreter, bracket, index, value):
        if method := self.klass.find_method("$set"):
            method.bind(self).call(interpreter, [index, value])
            return value
        raise LoxRuntimeError(
            bracket, "Value does not support index assignment.")

    def __str__(self):
        return f"{self.klass.name} instance"


class LoxArray(LoxInstance):
    def __init__(self, elements=None):
        super().__init__(ARRAY_CLASS)
        self.elements = [] if elements is None else elements

    def get_index(self, interpreter, bracket, index):
        return self.elements[self.checked_index(bracket, index)]

    def set_index(self, interpreter, bracket, index, value):
        self.elements[self.checked_index(bracket, index)] = value
        return value

    def checked_index(self, bracket, index):
        if not isinstance(index, float):
            raise LoxRuntimeError(bracket, "Array index must be a number.")
        if not index.is_integer():
            raise LoxRuntimeError(bracket, "Array index must be an integer.")
        if not 0 <= index < len(self.elements):
            raise LoxRuntimeError(bracket, "Index out of range.")
        return int(index)

    def __str__(self):
        return f"Array({len(self.elements)})"


# Array methods receive the array as their first argument; bind() supplies it.
def array_len(array):
    return float(len(array.elements))


def array_pop(array):
    if not array.elements:
        raise NativeError("Can't pop from an empty array.")
    return array.elements.pop()


def array_push(array, value):
    array.elements.append(value)


def array_to_string(array):
    text = ", ".join(stringify(element) for element in array.elements[:10])
    if len(array.elements) > 10:
        return f"[{text}...]"
    return f"[{text}]"


ARRAY_CLASS = LoxClass("Array", None, {
    "len": NativeFunction("len", array_len),
    "pop": NativeFunction("pop", array_pop),
    "push": NativeFunction("push", array_push),
    "toString": NativeFunction("toString", array_to_string),
})


def clock():
    return time.time()


def string(value):
    return stringify(value)


def array(size):
    if not isinstance(size, float) or not size.is_integer() or size < 0:
        raise NativeError("Array size must be a non-negative integer.")
    return LoxArray([None] * int(size))


NATIVES = {
    "clock": clock,
    "string": string,
    "array": array,
}
