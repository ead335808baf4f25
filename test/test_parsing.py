"""
Parsing engine behavioral tests.

Scope
- Concrete scenarios: plain options, optional absence, empty input, subcommand
  selection, dangling switches and malformed values.
- Scan policies: last match wins, repeated flags, defaults, help anywhere, the
  parent scanning the full token list, positionals.
- Outcome plumbing: the sink receives each stop signal once; tokens are
  snapshotted.

Conventions
- Test method names follow CamelCase per project convention.
- Stop signals are collected with a list-backed sink instead of printed.
"""
import unittest
from unittest import TestCase

from argshape import *


class ParsingTestCase(TestCase):

    def setUp(self):
        self.signals = []

    def command(self, *arguments, **options):
        return Command(*arguments, sink=self.signals.append, **options)


class ScenarioTest(ParsingTestCase):

    def testWidthAndHeight(self):
        command = self.command("image", "render", [option("width", "u32"), option("height", "u32")])
        result = command.parse(["--width", "100", "--height", "200"])
        self.assertEqual(result.args, {"width": 100, "height": 200})
        self.assertIsNone(result.subcommand)
        self.assertEqual(self.signals, [])

    def testOptionalAbsent(self):
        command = self.command("image", "render", [option("width", "u32"), option("height", "?u32")])
        result = command.parse(["--width", "100"])
        self.assertEqual(result.args.width, 100)
        self.assertIsNone(result.args.height)

    def testEmptyTokensRequestHelp(self):
        command = self.command("image", "render", [option("height", "?u32")])
        signal = command.parse([])
        self.assertIsInstance(signal, HelpRequested)
        self.assertIs(signal.command, command)
        self.assertEqual(signal.status, 0)
        self.assertEqual(self.signals, [signal])

    def testSubcommandSelection(self):
        start = Command("start", "start", [flag("quiet")])
        command = self.command("image", "render", [option("width", "?u32")], [start])
        result = command.parse(["start", "--quiet"])
        self.assertEqual(result.subcommand.name, "start")
        self.assertTrue(result.subcommand.result.args.quiet)
        self.assertIsNone(result.args.width)

    def testDanglingSwitch(self):
        command = self.command("image", "render", [option("scene", "string")])
        signal = command.parse(["--scene"])
        self.assertIsInstance(signal, MissingRequired)
        self.assertEqual(signal.parameter, "scene")
        self.assertEqual(signal.options["code"], FaultCode.MISSING_VALUE)
        self.assertEqual(str(signal), "missing value for argument: scene")

    def testMalformedValue(self):
        command = self.command("image", "render", [option("width", "u32")])
        match command.parse(["--width", "notanumber"]):
            case InvalidValue("width", "notanumber") as signal:
                self.assertIsInstance(signal.error, ValueError)
                self.assertEqual(signal.options["code"], FaultCode.INVALID_VALUE)
                self.assertIn("second token", str(signal))
            case outcome:
                self.fail(f"unexpected outcome {outcome!r}")


class PolicyTest(ParsingTestCase):

    def setUp(self):
        super().setUp()
        self.image = self.command("image", "render", [
            option("width", "u32", short=True, default="640"),
            option("scene", "?string"),
            flag("quiet", short=True),
        ])

    def testLastMatchWins(self):
        result = self.image.parse(["--width", "1", "-w", "2", "--width", "3"])
        self.assertEqual(result.args.width, 3)

    def testFlags(self):
        self.assertTrue(self.image.parse(["--quiet"]).args.quiet)
        self.assertTrue(self.image.parse(["--quiet", "-q", "--quiet"]).args.quiet)
        self.assertFalse(self.image.parse(["--scene", "a"]).args.quiet)

    def testDefaultLiteral(self):
        self.assertEqual(self.image.parse(["--quiet"]).args.width, 640)

    def testShortFormComparesInitialOnly(self):
        self.assertEqual(self.image.parse(["-wide", "7"]).args.width, 7)

    def testHelpAnywhere(self):
        for tokens in (
            ["--help"],
            ["-h"],
            ["--width", "100", "--scene", "a", "-h"],
            ["--width", "100", "--help", "--scene", "a"],
            ["--width", "notanumber", "--help"],
        ):
            with self.subTest(tokens=tokens):
                self.assertIsInstance(self.image.parse(tokens), HelpRequested)

    def testMissingRequired(self):
        command = self.command("image", "render", [option("scene", "string"), flag("quiet")])
        signal = command.parse(["--quiet"])
        self.assertIsInstance(signal, MissingRequired)
        self.assertEqual(signal.parameter, "scene")
        self.assertEqual(signal.options["code"], FaultCode.MISSING_REQUIRED)
        self.assertEqual(str(signal), "missing required argument: scene")

    def testParametersScanIndependently(self):
        # a value token may still match another parameter
        result = self.image.parse(["--scene", "--quiet"])
        self.assertEqual(result.args.scene, "--quiet")
        self.assertTrue(result.args.quiet)

    def testSchemaIsReusable(self):
        first = self.image.parse(["--width", "5"])
        second = self.image.parse(["--width", "5"])
        self.assertEqual(first, second)
        self.assertIsNot(first, second)


class SubcommandTest(ParsingTestCase):

    def setUp(self):
        super().setUp()
        self.start = Command("start", "start the scene", [flag("quiet"), option("frames", "u32", default="1")])
        self.root = self.command("image", "render", [option("scene", "?string")], [self.start])

    def testParentScansTheFullTokenList(self):
        result = self.root.parse(["start", "--scene", "a.txt"])
        self.assertEqual(result.args.scene, "a.txt")
        self.assertFalse(result.subcommand.result.args.quiet)

    def testBareSubcommandRequestsItsHelp(self):
        signal = self.root.parse(["start"])
        self.assertIsInstance(signal, HelpRequested)
        self.assertIs(signal.command, self.start)

    def testSubcommandHelp(self):
        signal = self.root.parse(["start", "--quiet", "--help"])
        self.assertIsInstance(signal, HelpRequested)
        self.assertIs(signal.command, self.start)

    def testChildFaultsPropagate(self):
        signal = self.root.parse(["start", "--frames", "many"])
        self.assertIsInstance(signal, InvalidValue)
        self.assertIs(signal.command, self.start)
        self.assertEqual(signal.token, "many")
        self.assertEqual(len(self.signals), 1)

    def testSubcommandOnlyMatchesFirstToken(self):
        result = self.root.parse(["--scene", "start"])
        self.assertIsNone(result.subcommand)
        self.assertEqual(result.args.scene, "start")

    def testNestedSubcommands(self):
        now = Command("now", "right away", [flag("force")])
        stop = Command("stop", "stop the scene", [flag("quiet")], [now])
        root = self.command("image", "render", [], [stop])
        result = root.parse(["stop", "now", "--force"])
        self.assertEqual(result.subcommand.name, "stop")
        self.assertEqual(result.subcommand.result.subcommand.name, "now")
        self.assertTrue(result.subcommand.result.subcommand.result.args.force)


class PositionalTest(ParsingTestCase):

    def setUp(self):
        super().setUp()
        self.copy = self.command("copy", "copy a file", [
            flag("force"),
            option("mode", "?string"),
            positional("source"),
            positional("target", "?string"),
        ])

    def testDeclarationOrder(self):
        result = self.copy.parse(["a.txt", "--force", "b.txt"])
        self.assertEqual(result.args.source, "a.txt")
        self.assertEqual(result.args.target, "b.txt")
        self.assertTrue(result.args.force)

    def testSwitchValuesAreNotPositionals(self):
        result = self.copy.parse(["--mode", "fast", "a.txt"])
        self.assertEqual(result.args.mode, "fast")
        self.assertEqual(result.args.source, "a.txt")
        self.assertIsNone(result.args.target)

    def testLoneDashIsAValue(self):
        self.assertEqual(self.copy.parse(["-"]).args.source, "-")

    def testUnknownSwitchesAreSkipped(self):
        self.assertEqual(self.copy.parse(["--verbose", "a.txt"]).args.source, "a.txt")

    def testSurplusTokensAreIgnored(self):
        self.assertEqual(self.copy.parse(["a", "b", "c"]).args.target, "b")

    def testMissingPositional(self):
        signal = self.copy.parse(["--force"])
        self.assertIsInstance(signal, MissingRequired)
        self.assertEqual(signal.parameter, "source")

    def testPositionalCoercion(self):
        command = self.command("repeat", "repeat", [positional("count", "u8")])
        signal = command.parse(["300"])
        self.assertIsInstance(signal, InvalidValue)
        self.assertEqual(signal.parameter, "count")
        self.assertEqual(command.parse(["3"]).args.count, 3)

    def testNotFilledWhenSubcommandSelected(self):
        start = Command("start", "start", [flag("quiet")])
        root = self.command("image", "render", [positional("output", "?string")], [start])
        self.assertIsNone(root.parse(["start", "--quiet"]).args.output)


class OutcomeTest(ParsingTestCase):

    def setUp(self):
        super().setUp()
        self.image = self.command("image", "render", [option("name", "?string")])

    def testSnapshotIndependence(self):
        tokens = ["--name", "first"]
        result = self.image.parse(tokens)
        tokens[1] = "second"
        tokens.clear()
        self.assertEqual(result.args.name, "first")

    def testAcceptsAnyIterable(self):
        self.assertEqual(self.image.parse(iter(("--name", "x"))).args.name, "x")
        self.assertEqual(self.image.parse(("--name", "y")).args.name, "y")

    def testRejectsNonStringTokens(self):
        with self.assertRaises(TypeError):
            self.image.parse("--name x")
        with self.assertRaises(TypeError):
            self.image.parse(["--name", 1])
        with self.assertRaises(TypeError):
            self.image.parse(None)

    def testSinkOverride(self):
        collected = []
        signal = self.image.parse([], sink=collected.append)
        self.assertEqual(collected, [signal])
        self.assertEqual(self.signals, [])

    def testSinkNotCalledOnSuccess(self):
        self.image.parse(["--name", "x"])
        self.assertEqual(self.signals, [])

    def testSilentSink(self):
        self.assertIsInstance(self.image.parse([], sink=silent), HelpRequested)
        self.assertEqual(self.signals, [])


if __name__ == "__main__":
    unittest.main()
