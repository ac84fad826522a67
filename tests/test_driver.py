"""
Tests for the top-level driver loop and the backend contract.

Focus is on the interaction between parsing and operator registration:
a declared operator is visible only after the backend accepts it, and
only from the next top-level form on.
"""

import unittest
import sys
import os

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from kaleidoscope.backend import RecordingBackend, create_recording_backend
from kaleidoscope.driver import Driver
from kaleidoscope.parser import (
    Parser, OperatorTable, Variable, Unary, Binary, Call, NumberLiteral,
    Prototype, FunctionDefinition, UnexpectedTokenError, InvalidPrecedenceError,
    NestingTooDeepError,
)


def _run(source, **kwargs):
    driver = Driver.from_string(source, **kwargs)
    driver.run()
    return driver


class TestDriver(unittest.TestCase):

    def test_declared_operator_usable_in_next_form(self):
        driver = _run("def binary| 5 (x y) x\na|b|c")
        forms = driver.backend.forms
        self.assertEqual(len(forms), 2)
        self.assertEqual(
            forms[1].body,
            Binary("|", Binary("|", Variable("a"), Variable("b")), Variable("c")),
        )
        self.assertEqual(driver.parser.operators.get("|"), 5)

    def test_declared_precedence_is_respected(self):
        driver = _run("def binary^ 50 (x y) x; a*b^c")
        self.assertEqual(
            driver.backend.forms[1].body,
            Binary("*", Variable("a"), Binary("^", Variable("b"), Variable("c"))),
        )

    def test_redefining_builtin_precedence(self):
        driver = _run("def binary+ 50 (x y) x; a*b+c")
        self.assertEqual(
            driver.backend.forms[1].body,
            Binary("*", Variable("a"), Binary("+", Variable("b"), Variable("c"))),
        )

    def test_rejected_definition_does_not_register(self):
        table = OperatorTable()
        parser = Parser.from_string("def binary| 5 (x y) x; a|b", operators=table)
        backend = RecordingBackend(
            table, reject=lambda form: isinstance(form, FunctionDefinition) and form.name == "binary|"
        )
        Driver(parser, backend).run()

        self.assertNotIn("|", table)
        # 'a' ends at the unknown '|', which then starts a new form as a prefix operator
        self.assertEqual([form.body for form in backend.forms],
                         [Variable("a"), Unary("|", Variable("b"))])

    def test_unary_definition_does_not_touch_table(self):
        driver = _run("def unary!(v) 0; !1")
        self.assertNotIn("!", driver.parser.operators)
        self.assertEqual(driver.backend.forms[1].body, Unary("!", NumberLiteral(1.0)))

    def test_semicolons_are_skipped(self):
        driver = _run(";;; 1;;")
        self.assertEqual(driver.accepted, 1)
        self.assertEqual(driver.skipped, 0)

    def test_extern_and_call(self):
        driver = _run("extern sin(x); sin(1)")
        forms = driver.backend.forms
        self.assertEqual(forms[0], Prototype("sin", ("x",)))
        self.assertEqual(forms[1].body, Call("sin", (NumberLiteral(1.0),)))

    def test_recovery_skips_exactly_one_token(self):
        driver = _run("def foo(x (y) x")
        errors = driver.parser.errors
        self.assertEqual(len(errors), 1)
        self.assertIsInstance(errors[0], UnexpectedTokenError)
        self.assertEqual(driver.skipped, 1)
        # resumed at 'y', right after the skipped '('
        self.assertEqual(driver.backend.forms[0].body, Variable("y"))

    def test_recovery_continues_with_later_forms(self):
        driver = _run("def binary| 0 (x y) x; def ok(a) a; ok(2)")
        self.assertIsInstance(driver.parser.errors[0], InvalidPrecedenceError)
        names = [form.name for form in driver.backend.forms]
        self.assertIn("ok", names)
        self.assertEqual(driver.backend.forms[-1].body, Call("ok", (NumberLiteral(2.0),)))

    def test_incomplete_form_at_end_of_input(self):
        driver = _run("def foo(x)")
        self.assertEqual(driver.backend.forms, [])
        self.assertEqual(driver.parser.errors, [])
        self.assertTrue(driver.parser.at_end)

    def test_run_returns_accepted_count(self):
        driver = Driver.from_string("def f(x) x; extern g(); f(1); g()")
        self.assertEqual(driver.run(), 4)

    def test_empty_input(self):
        self.assertEqual(Driver.from_string("  # nothing here\n").run(), 0)

    def test_mismatched_tables_warn(self):
        parser = Parser.from_string("1")
        with self.assertLogs("kaleidoscope.driver", level="WARNING"):
            Driver(parser, create_recording_backend())

    def test_deep_nesting_does_not_end_the_session(self):
        driver = _run("-" * 3000 + "x; 2")
        self.assertTrue(driver.parser.errors)
        self.assertTrue(all(isinstance(e, NestingTooDeepError) for e in driver.parser.errors))
        self.assertGreaterEqual(driver.skipped, 1)
        self.assertEqual(driver.backend.forms[-1].body, NumberLiteral(2.0))

    def test_deep_parentheses_do_not_end_the_session(self):
        driver = Driver.from_string("(" * 1500 + "1" + ")" * 1500 + "; 2")
        driver.run()
        self.assertTrue(driver.parser.at_end)
        self.assertIsInstance(driver.parser.errors[0], NestingTooDeepError)

    def test_on_accept_sees_each_accepted_form(self):
        seen = []
        parser = Parser.from_string("extern sin(x); ; def f(a) a; )")
        backend = RecordingBackend(parser.operators)
        Driver(parser, backend, on_accept=seen.append).run()
        self.assertEqual(seen, backend.forms)
        self.assertEqual([form.name for form in seen[:2]], ["sin", "f"])

    def test_sessions_are_isolated(self):
        first = _run("def binary| 5 (x y) x")
        second = _run("a|b")
        self.assertIn("|", first.parser.operators)
        self.assertNotIn("|", second.parser.operators)
        self.assertEqual(second.backend.forms[0].body, Variable("a"))


class TestBackend(unittest.TestCase):

    def test_install_operator_logs_registration(self):
        backend = create_recording_backend()
        function = FunctionDefinition(Prototype("binary%", ("a", "b"), True, 40), Variable("a"))
        with self.assertLogs("kaleidoscope.backend", level="INFO") as logs:
            self.assertTrue(backend.accept_function(function))
        self.assertEqual(backend.operators.get("%"), 40)
        self.assertIn("'%'", logs.output[0])

    def test_plain_function_is_not_an_operator(self):
        backend = create_recording_backend()
        before = dict(backend.operators.items())
        backend.accept_function(FunctionDefinition(Prototype("foo", ("a", "b")), Variable("a")))
        self.assertEqual(dict(backend.operators.items()), before)

    def test_rejected_extern(self):
        backend = RecordingBackend(OperatorTable(), reject=lambda form: True)
        self.assertFalse(backend.accept_extern(Prototype("sin", ("x",))))
        self.assertEqual(backend.forms, [])


if __name__ == '__main__':
    unittest.main()
