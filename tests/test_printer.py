"""Printer tests: printed programs parse back to the same tree."""

from treelox.printer import AstPrinter

PROGRAM = """
var a = 1;
const b = "two";
var c;
fun add(x, y) { return x + y; }
class Shape {
    init(size) { this.size = size; }
    area { return this.size * this.size; }
    $get(i) { return i; }
    $set(i, v) { this.last = v; }
}
class Square < Shape {
    area { return super.area + 0.25; }
    scale(k) { this.size = this.size * k; return this; }
}
{
    var s = Square(2);
    s.scale(1.5).size = -(a + 2) * 3;
    s[0] = s[1];
    print s.area;
}
for (var i = 0; i < 3; i = i + 1) { if (i == 1) continue; print i; }
for (; a < 2;) a = a + 1;
for (;;) break;
while (!(a >= 10) and true or nil) a = a + 1;
foreach (var x in array(2)) print x;
if (a != 1) print "ne"; else if (a == 1) print "eq";
var f = fun (n) { return fun () { return n; }; };
print f(3)();
fun nothing() { return; }
"""


def test_round_trip_preserves_structure(parse, diagnostics):
    original = parse(PROGRAM)
    assert not diagnostics.had_error, diagnostics.errors

    printed = AstPrinter().print(original)
    reparsed = parse(printed)
    assert not diagnostics.had_error, diagnostics.errors
    assert repr(reparsed) == repr(original)


def test_printing_is_idempotent(parse):
    printer = AstPrinter()
    once = printer.print(parse(PROGRAM))
    assert printer.print(parse(once)) == once


def test_block_layout(parse):
    printed = AstPrinter().print(parse("fun f(a) { if (a) { print a; } }"))
    assert printed == (
        "fun f(a) {\n"
        "    if (a) {\n"
        "        print a;\n"
        "    }\n"
        "}"
    )


def test_literals(parse):
    printed = AstPrinter().print(parse('print 0.0000001; print 12; print nil; print "s";'))
    assert printed.splitlines() == [
        "print 0.0000001;", "print 12;", "print nil;", 'print "s";',
    ]
