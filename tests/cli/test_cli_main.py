import sys
import unittest
from contextlib import redirect_stdout
from io import StringIO
from unittest.mock import patch

from structlog.testing import capture_logs

from dson.cli import main

class CliMainTest(unittest.TestCase):
    def test_init(self):
        # basically making sure importing works
        cli = main.CliManager()
        self.assertEqual(set(cli.command_list), {'encode', 'inspect'})

        f = StringIO()
        with capture_logs():
            with redirect_stdout(f):
                cli.help()
        output = f.getvalue().strip().splitlines()

        self.assertIn('Available subcommands:', output[0])
        self.assertTrue(any('encode' in line for line in output))
        self.assertTrue(any('inspect' in line for line in output))

    def test_unknown_command(self):
        cli = main.CliManager()
        f = StringIO()
        with redirect_stdout(f), patch.object(sys, 'argv', ['dson-cli', 'decode']):
            self.assertEqual(cli.execute_from_command_line(), -1)
        self.assertIn('Unknown command: "decode"', f.getvalue())

    def test_logging_args_are_removed(self):
        from dson.cli.util import LoggingOutput, process_logging_args

        argv = ['dson-cli encode', '--debug', 'in.json', '--json-logs', 'out.dson']
        output, options = process_logging_args(argv)
        self.assertEqual(output, LoggingOutput.JSON)
        self.assertTrue(options.debug)
        self.assertEqual(argv, ['dson-cli encode', 'in.json', 'out.dson'])

        argv = ['dson-cli inspect', 'doc.dson']
        output, options = process_logging_args(argv)
        self.assertEqual(output, LoggingOutput.PRETTY)
        self.assertFalse(options.debug)
        self.assertEqual(argv, ['dson-cli inspect', 'doc.dson'])

if __name__ == '__main__':
    unittest.main()
