# python
"""
Helper module behavioral tests (help and version text).

Scope
- Validate the layout of the help message: header, usage line, blocks.
- Validate that rendering is stable across calls and independent of colors.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import io
import unittest
from unittest import TestCase

from clapp import ArgumentParser
from clapp.helper import render_help


def sample(**metadata):
    parser = ArgumentParser(
        "Sample Application",
        "1.0.0",
        "Some really useful cli program.",
        prog="prog",
        **metadata,
    )
    parser.add_help()
    parser.option("-c", "--cfg", metavar="json config file", required=True, descr="Sets the config file.")
    parser.option("-s", flag=True, descr="Silent mode")
    parser.option("-m", "--mode", choices=["fast", "slow"], default="fast")
    parser.positional("INPUT_FILE", required=True, descr="File to read.")
    return parser


class TestHelp(TestCase):

    def testLayout(self):
        self.assertEqual(sample().help(), "\n".join((
            "Sample Application 1.0.0",
            "Some really useful cli program.",
            "",
            "usage: prog [-h] -c <json config file> [-s] [-m {fast,slow}] INPUT_FILE",
            "",
            "positionals:",
            "  INPUT_FILE",
            "      File to read.",
            "      (required)",
            "",
            "options:",
            "  -h, --help",
            "      Print this help message.",
            "  -c, --cfg <json config file>",
            "      Sets the config file.",
            "      (required)",
            "  -s",
            "      Silent mode",
            "  -m, --mode {fast,slow}",
            "      (default: 'fast')",
            "",
        )))

    def testStableAcrossCalls(self):
        parser = sample()
        self.assertEqual(parser.help(), parser.help())

    def testColorsDoNotChangeText(self):
        self.assertEqual(sample().help(), sample(colorful=False).help())
        self.assertEqual(render_help(sample(colorful=False)).spans, [])

    def testMinimalParser(self):
        parser = ArgumentParser(prog="tool")
        parser.option("-a")
        self.assertEqual(parser.help(), "usage: tool [-a <value>]\n\noptions:\n  -a <value>\n")

    def testPrintHelpToFile(self):
        output = io.StringIO()
        sample().print_help(file=output)
        self.assertIn("usage: prog", output.getvalue())
        self.assertIn("Sets the config file.", output.getvalue())


class TestVersion(TestCase):

    def testVersionText(self):
        self.assertEqual(sample().version_text(), "Sample Application 1.0.0\n")

    def testUnversioned(self):
        self.assertEqual(ArgumentParser(prog="tool").version_text(), "tool (unversioned)\n")

    def testPrintVersionToFile(self):
        output = io.StringIO()
        sample().print_version(file=output)
        self.assertEqual(output.getvalue(), "Sample Application 1.0.0\n")


if __name__ == "__main__":
    unittest.main()
