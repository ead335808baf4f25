"""
Help renderer tests: the exact plain layout and its rich counterpart.
"""
import unittest
from unittest import TestCase

from rich.text import Text

from argshape import Command, option, flag, helps


class RenderTest(TestCase):

    def setUp(self):
        self.image = Command("image", "render images", [
            option("width", "u32", help="the width of the image"),
            flag("quiet"),
        ])

    def testExactLayout(self):
        self.assertEqual(
            self.image.render(),
            "image\n"
            "render images\n"
            "USAGE:\n"
            "  --width\tthe width of the image\n"
            "  --quiet\t\n",
        )

    def testWithoutAboutOrParameters(self):
        self.assertEqual(helps.render(Command("image")), "image\n\nUSAGE:\n")

    def testRichHelpText(self):
        command = Command("image", Text("render images", "bold"), [option("width", help=Text("the width"))])
        self.assertEqual(command.render(), "image\nrender images\nUSAGE:\n  --width\tthe width\n")

    def testFormatMatchesRender(self):
        text = helps.format(self.image)
        self.assertIsInstance(text, Text)
        self.assertEqual(text.plain, self.image.render())
        self.assertEqual(text.spans, [])

    def testColorfulFormatIsStyled(self):
        text = helps.format(self.image, colorful=True)
        self.assertEqual(text.plain, self.image.render())
        self.assertNotEqual(text.spans, [])


if __name__ == "__main__":
    unittest.main()
