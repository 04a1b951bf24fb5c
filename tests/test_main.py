from pathlib import Path
from tempfile import TemporaryDirectory

import unittest

from click.testing import CliRunner

from pycin.__main__ import main
from pycin.__version__ import __version__
from pycin.errors import ConfigError
from pycin.main import TokenError, InputError


class TokensCommandTest(unittest.TestCase):
    def setUp(self):
        self.runner = CliRunner()

    def invoke(self, args, input):
        return self.runner.invoke(main, args, input=input)

    def test_integers(self):
        result = self.invoke(["tokens", "-t", "int"], "1 2\n  3")

        self.assertEqual(result.exit_code, 0)
        self.assertEqual(result.output, "1\n2\n3\n")

    def test_default_type(self):
        result = self.invoke(["tokens"], "héllo   wörld\n")

        self.assertEqual(result.exit_code, 0)
        self.assertEqual(result.output, "héllo\nwörld\n")

    def test_not_read_char_by_char(self):
        result = self.invoke(["tokens", "-t", "int"], "1GARBAGE\n")

        self.assertEqual(result.exit_code, 1)
        self.assertIsInstance(result.exception, TokenError)
        self.assertEqual(result.output, "")

    def test_error_after_valid_tokens(self):
        result = self.invoke(["tokens", "-t", "int"], "1 2 x 4")

        self.assertEqual(result.exit_code, 1)
        self.assertIsInstance(result.exception, TokenError)
        self.assertIn("token 3", str(result.exception))
        self.assertEqual(result.output, "1\n2\n")

    def test_malformed_byte_between_tokens(self):
        result = self.invoke(["tokens", "-t", "int"], b"1 \x80 2")

        self.assertEqual(result.exit_code, 1)
        self.assertIsInstance(result.exception, TokenError)
        self.assertIn("token 2", str(result.exception))
        self.assertIn("UTF-8", str(result.exception))
        self.assertEqual(result.output, "1\n")

    def test_define(self):
        result = self.invoke(["tokens", "-d", "type=float", "-b", "1"],
                             "1.5 2")

        self.assertEqual(result.exit_code, 0)
        self.assertEqual(result.output, "1.5\n2.0\n")

    def test_invalid_define(self):
        result = self.invoke(["tokens", "-d", "bufsize=0"], "1")

        self.assertEqual(result.exit_code, 1)
        self.assertIsInstance(result.exception, ConfigError)

    def test_skip(self):
        result = self.invoke(["tokens", "-t", "int", "-s", "1"],
                             "n m\n4 5\n")

        self.assertEqual(result.output, "4\n5\n")

    def test_config_file(self):
        with TemporaryDirectory() as tmpdir:
            path = Path(tmpdir, "config.py")
            path.write_text("type = 'int'\nskip = 1\n")

            result = self.invoke(["tokens", "-c", str(path)], "header\n4 5")
            self.assertEqual(result.output, "4\n5\n")

            result = self.invoke(["tokens", "-c", str(path), "-t", "bool"],
                                 "header\ntrue false")
            self.assertEqual(result.output, "True\nFalse\n")

    def test_input_file(self):
        with TemporaryDirectory() as tmpdir:
            path = Path(tmpdir, "input.txt")
            path.write_bytes(b"7 8 9")

            result = self.invoke(["tokens", "-t", "int", str(path)], None)

        self.assertEqual(result.exit_code, 0)
        self.assertEqual(result.output, "7\n8\n9\n")


class LinesCommandTest(unittest.TestCase):
    def test_lines(self):
        runner = CliRunner()
        result = runner.invoke(main, ["lines", "--skip", "1"],
                               input="header\na b\n\nc")

        self.assertEqual(result.exit_code, 0)
        self.assertEqual(result.output, "a b\n\nc\n")


class CharsCommandTest(unittest.TestCase):
    def test_chars(self):
        runner = CliRunner()
        result = runner.invoke(main, ["chars"], input="a€\n")

        self.assertEqual(result.exit_code, 0)
        self.assertEqual(result.output, "U+0061 a\nU+20AC €\nU+000A \\n\n")

    def test_malformed_input(self):
        runner = CliRunner()
        result = runner.invoke(main, ["chars"], input=b"a\x80b")

        self.assertEqual(result.exit_code, 1)
        self.assertIsInstance(result.exception, InputError)
        self.assertEqual(result.output, "U+0061 a\n")


class VersionTest(unittest.TestCase):
    def test_version(self):
        result = CliRunner().invoke(main, ["--version"])

        self.assertEqual(result.exit_code, 0)
        self.assertIn(__version__, result.output)
