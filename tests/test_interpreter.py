"""Evaluator tests, run through the full pipeline."""

import pytest


def test_block_shadowing(run):
    assert run("var a=1; { var a=2; print a; } print a;").output == ["2", "1"]


def test_counter_closure(run):
    result = run("""
fun make() {
    var n = 0;
    fun inc() { n = n + 1; return n; }
    return inc;
}
var c = make();
print c();
print c();
""")
    assert result.output == ["1", "2"]


def test_closures_share_their_defining_scope(run):
    result = run("""
fun pair() {
    var value = 0;
    fun get() { return value; }
    fun set(v) { value = v; }
    var both = array(2);
    both[0] = get;
    both[1] = set;
    return both;
}
var p = pair();
p[1](42);
print p[0]();
""")
    assert result.output == ["42"]


def test_closure_binds_lexically_not_dynamically(run):
    result = run("""
var a = "global";
{
    fun show() { print a; }
    show();
    var a = "block";
    show();
}
""")
    assert result.output == ["global", "global"]


def test_super_is_lexical(run):
    result = run("""
class A { f() { return 1; } }
class B < A { f() { return super.f() + 1; } }
print B().f();
""")
    assert result.output == ["2"]


def test_inherited_method_calling_super_uses_its_own_superclass(run):
    result = run("""
class A { name() { return "A"; } }
class B < A {
    name() { return "B"; }
    describe() { return super.name(); }
}
class C < B { name() { return "C"; } }
print C().describe();
print C().name();
""")
    assert result.output == ["A", "C"]


def test_initializer_returns_the_instance(run):
    result = run("""
class P {
    init(x) { this.x = x; return; }
}
var p = P(3);
print p.x;
print p.init(4) == p;
print p.x;
""")
    assert result.output == ["3", "true", "4"]


def test_getters_run_on_access(run):
    result = run("""
class Circle {
    init(r) { this.r = r; }
    area { return 3 * this.r * this.r; }
}
class Ring < Circle {
    area { return super.area - 1; }
}
print Circle(2).area;
print Ring(1).area;
""")
    assert result.output == ["12", "2"]


def test_magic_index_methods(run):
    result = run("""
class Offset {
    $get(i) { return i + 10; }
    $set(i, v) { print "set " + string(i) + " to " + v; }
}
var o = Offset();
print o[5];
print o[1] = "x";
""")
    assert result.output == ["15", "set 1 to x", "x"]


def test_arrays(run):
    result = run("""
var a = array(2);
print a[0];
a[0] = 1;
a[1] = "two";
a.push(true);
print a.len();
print a.toString();
print a.pop();
print a.len();
print a;
""")
    assert result.output == ["nil", "3", "[1, two, true]", "true", "2", "Array(2)"]


def test_array_to_string_truncates(run):
    result = run("""
var a = array(12);
for (var i = 0; i < a.len(); i = i + 1) a[i] = i;
print a.toString();
""")
    assert result.output == ["[0, 1, 2, 3, 4, 5, 6, 7, 8, 9...]"]


def test_logical_operators_short_circuit(run):
    result = run("""
fun boom() { print "evaluated"; return true; }
print nil and boom();
print "left" or boom();
print false or "right";
print 1 and 2;
""")
    assert result.output == ["nil", "left", "right", "2"]


def test_truthiness(run):
    result = run("""
if (0) print "zero";
if ("") print "empty";
if (nil) print "nil"; else print "not nil";
print !false;
""")
    assert result.output == ["zero", "empty", "not nil", "true"]


def test_equality_never_raises(run):
    result = run("""
class A {}
var a = A();
print nil == nil;
print nil == false;
print 1 == true;
print 0 == false;
print "1" == 1;
print "ab" == "a" + "b";
print a == a;
print a == A();
print clock == clock;
""")
    assert result.output == [
        "true", "false", "false", "false", "false", "true", "true", "false", "true",
    ]


def test_number_formatting(run):
    result = run("print 5; print 2.5; print 10 / 4; print -0.5; print 1 + 2;")
    assert result.output == ["5", "2.5", "2.5", "-0.5", "3"]


def test_division_by_zero_follows_ieee(run):
    result = run("print 1 / 0; print -1 / 0; print 0 / 0; print 1 / -0; print 1 / 0 - 1 / 0;")
    assert result.output == ["Infinity", "-Infinity", "NaN", "-Infinity", "NaN"]
    assert result.errors == []


def test_large_integers_print_positionally(run):
    result = run("print 10000000000000000; print 123456789012345678901; print 1000000000000000000000;")
    assert result.output == ["10000000000000000", "123456789012345680000", "1e+21"]


def test_string_concatenation(run):
    assert run('print "a" + "b";').output == ["ab"]


def test_value_rendering(run):
    result = run("""
fun f() {}
class K { g { return 1; } }
print f;
print K;
print K();
print fun () {};
print clock;
print string(nil);
""")
    assert result.output == [
        "<fn f>", "K", "K instance", "<fn>", "<native fn>", "nil",
    ]


def test_break_and_continue(run):
    result = run("""
var i = 0;
while (true) {
    i = i + 1;
    if (i == 2) continue;
    if (i > 4) break;
    print i;
}
""")
    assert result.output == ["1", "3", "4"]


def test_continue_in_for_loop_runs_increment(run):
    result = run("""
for (var i = 0; i < 5; i = i + 1) {
    if (i == 1 or i == 3) continue;
    print i;
}
""")
    assert result.output == ["0", "2", "4"]


def test_return_from_inside_loops(run):
    result = run("""
fun find(xs, target) {
    foreach (var x in xs) {
        var i = 0;
        while (true) {
            if (x == target) return "found " + string(x);
            i = i + 1;
            if (i > 2) break;
        }
    }
    return "missing";
}
var xs = array(3);
xs[0] = 1; xs[1] = 2; xs[2] = 3;
print find(xs, 2);
print find(xs, 9);
""")
    assert result.output == ["found 2", "missing"]


def test_foreach_with_break_and_continue(run):
    result = run("""
var a = array(5);
for (var i = 0; i < 5; i = i + 1) a[i] = i * 2;
foreach (var x in a) {
    if (x == 2) continue;
    if (x == 6) break;
    print x;
}
""")
    assert result.output == ["0", "4"]


def test_function_literals(run):
    result = run("""
var sum = (fun (a, b) { return a + b; })(1, 2);
print sum;
var twice = fun (f) { return fun (x) { return f(f(x)); }; };
print twice(fun (x) { return x * 3; })(2);
""")
    assert result.output == ["3", "18"]


def test_recursion(run):
    result = run("""
fun fib(n) { if (n <= 2) return 1; return fib(n - 2) + fib(n - 1); }
print fib(15);
""")
    assert result.output == ["610"]


def test_class_can_reference_itself(run):
    result = run("""
class Node {
    init(next) { this.next = next; }
    make() { return Node(this); }
}
print Node(nil).make().next.next;
""")
    assert result.output == ["nil"]


def test_fields_shadow_methods(run):
    result = run("""
class A { f() { return "method"; } }
var a = A();
print a.f();
a.f = "field";
print a.f;
""")
    assert result.output == ["method", "field"]


def test_repl_echo_is_opt_in(run):
    source = "var a = 1; a; a = 2; a + 1; print a;"
    assert run(source).output == ["2"]
    assert run(source, repl_echo=True).output == ["1", "3", "2"]


@pytest.mark.parametrize("source, message", [
    ("const x = 5; x = 6;", "Can't assign to const variable 'x'. [line 1]"),
    ("{ const x = 5; fun f() { x = 1; } f(); }",
     "Can't assign to const variable 'x'. [line 1]"),
    ("var arr = array(2); arr[5] = \"x\";", "Index out of range. [line 1]"),
    ("var arr = array(2); print arr[-1];", "Index out of range. [line 1]"),
    ("var arr = array(2); print arr[\"0\"];", "Array index must be a number. [line 1]"),
    ("var arr = array(2); print arr[0.5];", "Array index must be an integer. [line 1]"),
    ("print undefined;", "Undefined variable 'undefined'. [line 1]"),
    ("undefined = 1;", "Undefined variable 'undefined'. [line 1]"),
    ("print 1 + \"a\";", "Operands of '+' must be two numbers or two strings. [line 1]"),
    ("print 1 < \"a\";", "Operands of '<' must be numbers. [line 1]"),
    ("print -\"a\";", "Operand of '-' must be a number. [line 1]"),
    ("\"not a function\"();", "Can only call functions and classes. [line 1]"),
    ("fun f(a) {} f(1, 2);", "Expected 1 arguments but got 2. [line 1]"),
    ("class A { init(a, b) {} } A();", "Expected 2 arguments but got 0. [line 1]"),
    ("print 1.x;", "Only instances have properties. [line 1]"),
    ("var s = \"s\"; s.x = 1;", "Only instances have fields. [line 1]"),
    ("class A {} print A().missing;", "Undefined property 'missing'. [line 1]"),
    ("var NotAClass = 1; class B < NotAClass {}", "Superclass must be a class. [line 1]"),
    ("class A {} print A()[0];", "Value is not indexable. [line 1]"),
    ("class A {} A()[0] = 1;", "Value does not support index assignment. [line 1]"),
    ("print 1[0];", "Value is not indexable. [line 1]"),
    ("foreach (var x in 3) print x;", "Can only iterate over arrays. [line 1]"),
    ("print array(-1);", "Array size must be a non-negative integer. [line 1]"),
    ("var a = array(0); a.pop();", "Can't pop from an empty array. [line 1]"),
    ("class A { f() { return 1; } } class B < A { f() { return super.g(); } } B().f();",
     "Undefined property 'g'. [line 1]"),
])
def test_runtime_errors(run, source, message):
    result = run(source)
    assert result.errors == [message]
    assert result.lox.diagnostics.had_runtime_error
    assert not result.lox.diagnostics.had_error


def test_runtime_error_halts_after_earlier_side_effects(run):
    result = run("""
print "before";
print nil + 1;
print "after";
""")
    assert result.output == ["before"]
    assert result.errors == ["Operands of '+' must be two numbers or two strings. [line 3]"]


def test_runaway_recursion_is_a_runtime_error(run):
    result = run("fun f() { return f(); } f();")
    assert result.errors == ["Stack overflow. [line 1]"]


def test_recursion_a_thousand_calls_deep(run):
    result = run("""
fun count(n) { if (n == 0) return 0; return 1 + count(n - 1); }
print count(1000);
""")
    assert result.output == ["1000"]
    assert result.errors == []


def test_loop_budget_is_off_by_default(run):
    result = run("var i = 0; while (i < 5000) i = i + 1; print i;")
    assert result.output == ["5000"]


def test_loop_budget_aborts_runaway_loops(run):
    result = run("var i = 0; while (true) { i = i + 1; } print i;", max_loop_iterations=100)
    assert result.output == []
    assert result.errors == ["Loop iteration limit of 100 exceeded. [line 1]"]
    assert run("var i = 0; while (i < 100) i = i + 1; print i;",
               max_loop_iterations=100).output == ["100"]


def test_globals_persist_between_runs(run):
    result = run("var greeting = \"hi\";")
    result.lox.run("print greeting;")
    assert result.output == ["hi"]
