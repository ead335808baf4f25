"""
Parameter schema tests (construction, validation, matching).

Conventions
- Test method names follow CamelCase per project convention.
"""
import unittest
from unittest import TestCase

from rich.text import Text

from argshape import Parameter, option, flag, positional, SchemaError
from argshape.values import u32, boolean, optional, string


class ParameterConstructionTest(TestCase):

    def testDefaults(self):
        parameter = Parameter("scene")
        self.assertEqual(parameter.name, "scene")
        self.assertIs(parameter.type, string)
        self.assertTrue(parameter.long)
        self.assertFalse(parameter.short)
        self.assertIsNone(parameter.help)
        self.assertIsNone(parameter.default)

    def testTypeResolution(self):
        self.assertIs(Parameter("width", "u32").type, u32)
        self.assertEqual(Parameter("height", "?u32").type, optional(u32))
        self.assertTrue(Parameter("height", "?u32").optional)

    def testHelpAcceptsRichText(self):
        help = Text("the width", "bold")
        self.assertIs(Parameter("width", help=help).help, help)
        self.assertEqual(Parameter("width", help="  the width ").help, "the width")

    def testReadOnly(self):
        parameter = Parameter("width")
        with self.assertRaises(AttributeError):
            parameter.name = "height"

    def testRepr(self):
        self.assertTrue(repr(Parameter("width", "u32")).startswith("parameter(name='width', type=u32"))


class ParameterValidationTest(TestCase):

    def testNames(self):
        with self.assertRaises(TypeError):
            Parameter(1)
        for name in ("", "  ", "9lives", "-width", "dry--run", "dry run"):
            with self.subTest(name=name), self.assertRaises(SchemaError):
                Parameter(name)
        self.assertEqual(Parameter("dry-run").name, "dry-run")

    def testUnknownType(self):
        with self.assertRaises(SchemaError):
            Parameter("width", "void")

    def testBooleanCannotHaveDefault(self):
        with self.assertRaises(SchemaError):
            Parameter("quiet", "bool", default="true")
        with self.assertRaises(SchemaError):
            flag("quiet", default="true")

    def testBooleanCannotBePositional(self):
        with self.assertRaises(SchemaError):
            Parameter("quiet", "bool", long=False)

    def testDefaultMustCoerce(self):
        with self.assertRaises(SchemaError):
            Parameter("width", "u32", default="wide")
        with self.assertRaises(TypeError):
            Parameter("width", "u32", default=640)
        self.assertEqual(Parameter("width", "u32", default="640").default, "640")

    def testHelpTokensAreReserved(self):
        with self.assertRaises(SchemaError):
            Parameter("help")
        with self.assertRaises(SchemaError):
            Parameter("height", short=True)
        self.assertEqual(Parameter("height").switches, ("--height",))

    def testHelpText(self):
        with self.assertRaises(SchemaError):
            Parameter("width", help="   ")
        with self.assertRaises(TypeError):
            Parameter("width", help=None)


class ParameterMatchingTest(TestCase):

    def setUp(self):
        self.width = Parameter("width", "u32", short=True)

    def testLongForm(self):
        self.assertTrue(self.width.matches("--width"))
        self.assertFalse(self.width.matches("--wid"))
        self.assertFalse(self.width.matches("--Width"))
        self.assertFalse(self.width.matches("width"))

    def testShortFormComparesFirstTwoCharacters(self):
        self.assertTrue(self.width.matches("-w"))
        self.assertTrue(self.width.matches("-wide"))
        self.assertFalse(self.width.matches("-"))
        self.assertFalse(self.width.matches("-x"))

    def testShortDisabled(self):
        self.assertFalse(Parameter("width").matches("-w"))

    def testLongDisabled(self):
        parameter = Parameter("width", long=False, short=True)
        self.assertFalse(parameter.matches("--width"))
        self.assertEqual(parameter.switches, ("-w",))

    def testSwitches(self):
        self.assertEqual(self.width.switches, ("--width", "-w"))
        self.assertEqual(self.width.initial, "w")


class FactoryTest(TestCase):

    def testOption(self):
        scene = option("scene", "?string", short=True, help="scene file")
        self.assertTrue(scene.long and scene.short)
        self.assertFalse(scene.positional)

    def testFlag(self):
        quiet = flag("quiet", short=True)
        self.assertIs(quiet.type, boolean)
        self.assertTrue(quiet.flag)
        self.assertIsNone(quiet.default)

    def testPositional(self):
        source = positional("source", "u32", default="1")
        self.assertTrue(source.positional)
        self.assertEqual(source.switches, ())
        self.assertFalse(source.matches("--source"))
        with self.assertRaises(SchemaError):
            positional("source", short=True)
        self.assertTrue(positional("source", long=False).positional)


if __name__ == "__main__":
    unittest.main()
