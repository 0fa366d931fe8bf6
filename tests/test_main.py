"""Tests for the command-line entry point."""
import io
import os
import shutil
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from decimal import Decimal
from unittest import mock

from uangku.main import format_amount, main


class TestFormatAmount(unittest.TestCase):
    """Test amount display formatting."""
    
    def test_formats(self):
        self.assertEqual(format_amount(Decimal("50000")), "Rp 50.000")
        self.assertEqual(format_amount(Decimal("0")), "Rp 0")
        self.assertEqual(format_amount(Decimal("1234567.5")), "Rp 1.234.567,50")
        self.assertEqual(format_amount(Decimal("-50000")), "Rp -50.000")


class TestCli(unittest.TestCase):
    """Test commands that do not reach the model."""
    
    def setUp(self):
        """Set up test fixtures."""
        self.test_dir = tempfile.mkdtemp()
        self.env = mock.patch.dict(os.environ, {"UANGKU_HOME": self.test_dir}, clear=True)
        self.env.start()
    
    def tearDown(self):
        """Clean up test fixtures."""
        self.env.stop()
        shutil.rmtree(self.test_dir, ignore_errors=True)
    
    def run_cli(self, *argv):
        output = io.StringIO()
        with redirect_stdout(output):
            main(list(argv))
        return output.getvalue()
    
    def run_cli_error(self, *argv):
        errors = io.StringIO()
        with redirect_stderr(errors), self.assertRaises(SystemExit) as ctx:
            self.run_cli(*argv)
        return ctx.exception.code, errors.getvalue()
    
    def test_local_commands_do_not_need_key(self):
        """list, summary, remove and reset run without GEMINI_API_KEY."""
        self.assertIn("No transactions yet.", self.run_cli("list"))
        self.assertIn("No transaction with id 1", self.run_cli("remove", "1"))
    
    def test_model_commands_need_key(self):
        """add and insights stop at configuration validation without a key."""
        for argv in (("add", "--text", "Makan di McD 50rb"), ("insights",)):
            with self.subTest(command=argv[0]):
                code, errors = self.run_cli_error(*argv)
                
                self.assertEqual(code, 1)
                self.assertIn("API key", errors)
    
    def test_invalid_config_file_exits(self):
        """A bad timeout in config.json is reported and exits 1."""
        with open(os.path.join(self.test_dir, "config.json"), "w", encoding="utf-8") as f:
            f.write('{"timeout_seconds": "abc"}')
        
        code, errors = self.run_cli_error("summary")
        
        self.assertEqual(code, 1)
        self.assertIn("timeout_seconds", errors)
    
    def test_summary_on_empty_ledger(self):
        output = self.run_cli("summary")
        
        self.assertIn("Balance: Rp 0", output)
        self.assertIn("No expense data yet.", output)
    
    def test_reset(self):
        self.assertIn("Cleared 0 transactions", self.run_cli("reset"))


if __name__ == "__main__":
    unittest.main()
