"""
Process-wide flag set tests (module-level shortcuts).

Conventions
- Test method names follow CamelCase per project convention.
- Each test swaps envflag.process.commandline for a fresh, isolated set.
"""
import io
import os
import unittest
from datetime import timedelta
from types import SimpleNamespace
from unittest import TestCase

import envflag
from envflag import process
from envflag.faults import ErrorHandling, UndefinedFlagError
from envflag.flags import FlagSet


class ProcessTestCase(TestCase):

    def setUp(self):
        self.saved = process.commandline
        self.environ = {}
        self.output = io.StringIO()
        process.commandline = FlagSet("tool", ErrorHandling.RAISE, output=self.output, environ=self.environ)

    def tearDown(self):
        process.commandline = self.saved


class TestShortcuts(ProcessTestCase):

    def testDefaultSetExitsOnError(self):
        self.assertIs(self.saved.error_handling, ErrorHandling.EXIT)

    def testConstructorsUseProcessSet(self):
        port = envflag.integer("port", 8080, "listen port")
        self.assertIs(process.commandline.lookup("port").value, port)
        self.assertIs(envflag.lookup("port").value, port)

    def testSetEnvPrefix(self):
        self.environ["APP_PORT"] = "9090"
        envflag.set_env_prefix("APP")
        self.assertEqual(envflag.integer("port", 8080, "").value, 9090)

    def testSetEnvPrefixRequiresString(self):
        with self.assertRaises(TypeError):
            envflag.set_env_prefix(None)

    def testParseAndVerbs(self):
        debug = envflag.boolean("debug", False, "")
        timeout = envflag.duration("timeout", timedelta(seconds=1), "")
        envflag.parse(["-debug", "-timeout=2s", "run"])
        self.assertTrue(envflag.parsed())
        self.assertIs(debug.value, True)
        self.assertEqual(timeout.value, timedelta(seconds=2))
        self.assertEqual(envflag.args(), ["run"])
        self.assertEqual(envflag.narg(), 1)
        self.assertEqual(envflag.arg(0), "run")
        self.assertEqual(envflag.nflag(), 2)
        self.assertEqual(envflag.get_verbs(), [])

    def testVerbsLeadTheCommandLine(self):
        envflag.string("env", "", "")
        envflag.parse(["deploy", "now", "-env=prod"])
        self.assertEqual(envflag.get_verbs(), ["deploy", "now"])

    def testVarConstructors(self):
        config = SimpleNamespace()
        envflag.string_var(config, "log-level", "info", "")
        envflag.parse(["-log-level", "debug"])
        self.assertEqual(config.log_level, "debug")

    def testFuncFlags(self):
        seen = []
        envflag.func("tag", "", seen.append)
        envflag.bool_func("trace", "", seen.append)
        envflag.parse(["-tag=a", "-trace"])
        self.assertEqual(seen, ["a", "true"])

    def testSetFlag(self):
        port = envflag.integer("port", 8080, "")
        envflag.set_flag("port", "1")
        self.assertEqual(port.value, 1)
        with self.assertRaises(UndefinedFlagError):
            envflag.set_flag("nope", "1")

    def testVisit(self):
        envflag.integer("port", 8080, "")
        envflag.boolean("debug", False, "")
        envflag.set_flag("port", "1")
        visited, every = [], []
        envflag.visit(lambda flag: visited.append(flag.name))
        envflag.visit_all(lambda flag: every.append(flag.name))
        self.assertEqual(visited, ["port"])
        self.assertEqual(every, ["debug", "port"])

    def testUsage(self):
        envflag.integer("port", 8080, "listen port")
        envflag.usage()
        self.assertEqual(
            self.output.getvalue().expandtabs(),
            "Usage of tool:\n  -port int\n        listen port (default 8080)\n",
        )

    def testCustomUsage(self):
        calls = []
        process.commandline.usage = lambda: calls.append(True)
        envflag.usage()
        self.assertEqual(calls, [True])

    def testOutput(self):
        self.assertIs(envflag.output(), self.output)
        other = io.StringIO()
        envflag.set_output(other)
        self.assertIs(envflag.output(), other)
        envflag.print_defaults()
        self.assertEqual(other.getvalue(), "")

    def testLateRegistrationPointsAtCaller(self):
        envflag.parse([])
        with self.assertWarns(envflag.LateRegistrationWarning) as caught:
            envflag.integer("port", 1, "")
        self.assertEqual(os.path.abspath(caught.filename), os.path.abspath(__file__))

    def testShortcutsKeepNames(self):
        self.assertEqual(envflag.integer.__name__, "integer")
        self.assertEqual(envflag.string_var.__name__, "string_var")


if __name__ == "__main__":
    unittest.main()
