"""
Tests for the entry point and logging setup.
"""

import json
import logging
import sys
import unittest
from unittest.mock import patch
import tempfile
from pathlib import Path

# Add the project root to sys.path to allow importing the package
sys.path.insert(0, str(Path(__file__).parent.parent))

from batch_transcriber import cli
from batch_transcriber.config import ConfigError, TranscriberConfig
from batch_transcriber.logging_config import setup_logging
from batch_transcriber.transcriber.progress import log_progress


class TestMain(unittest.TestCase):

    @patch("batch_transcriber.cli.setup_logging")
    @patch("batch_transcriber.cli.load_config", side_effect=ConfigError("ASSEMBLYAI_API_KEY is not set"))
    def test_config_error_exits_nonzero(self, _mock_load, _mock_logging):
        with patch("batch_transcriber.cli.process_media_files") as mock_process:
            self.assertEqual(cli.main(), 1)
            mock_process.assert_not_called()

    @patch("batch_transcriber.cli.setup_logging")
    @patch("batch_transcriber.cli.process_media_files")
    @patch("batch_transcriber.cli.load_config")
    def test_run_exits_zero(self, mock_load, mock_process, mock_logging):
        config = TranscriberConfig(api_key="abcd1234", log_level="DEBUG")
        mock_load.return_value = config

        self.assertEqual(cli.main(), 0)

        mock_logging.assert_called_once_with(log_level="DEBUG")
        mock_process.assert_called_once_with(config)


class TestLogging(unittest.TestCase):

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.root = logging.getLogger()
        self.saved_handlers = list(self.root.handlers)
        self.saved_level = self.root.level

    def tearDown(self):
        for handler in list(self.root.handlers):
            handler.close()
        self.root.handlers = self.saved_handlers
        self.root.setLevel(self.saved_level)
        self.temp_dir.cleanup()

    def test_json_file_log(self):
        log_file = Path(self.temp_dir.name) / "run.log"

        setup_logging(log_level="debug", log_file=log_file)
        logging.getLogger("batch_transcriber.test").info("hello")
        for handler in self.root.handlers:
            handler.flush()

        self.assertEqual(self.root.level, logging.DEBUG)
        self.assertEqual(len(self.root.handlers), 2)
        record = json.loads(log_file.read_text(encoding="utf-8").splitlines()[-1])
        self.assertEqual(record["lvl"], "INFO")
        self.assertEqual(record["src"], "batch_transcriber.test")
        self.assertEqual(record["msg"], "hello")

    def test_log_progress(self):
        with self.assertLogs("batch_transcriber.transcriber.progress", level="DEBUG") as captured:
            log_progress({"step": "split", "pct": 10, "msg": "Splitting into 3 chunks"})
            log_progress({"step": "error", "pct": None, "msg": None})

        self.assertIn("10.0% split: Splitting into 3 chunks", captured.output[0])
        self.assertIn("error:", captured.output[1])

    def test_console_only(self):
        setup_logging(log_level="WARNING", log_file=None)

        self.assertEqual(len(self.root.handlers), 1)
        self.assertEqual(self.root.level, logging.WARNING)


if __name__ == "__main__":
    unittest.main()
