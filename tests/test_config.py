"""
Tests for environment-based configuration.
"""

import sys
import unittest
from pathlib import Path

# Add the project root to sys.path to allow importing the package
sys.path.insert(0, str(Path(__file__).parent.parent))

from batch_transcriber.config import ConfigError, load_config


class TestLoadConfig(unittest.TestCase):

    def test_defaults(self):
        config = load_config({"ASSEMBLYAI_API_KEY": "key"})

        self.assertEqual(config.api_key, "key")
        self.assertEqual(config.chunk_duration, 300)
        self.assertEqual(config.parallel_requests, 3)
        self.assertEqual(config.language_code, "ru")
        self.assertEqual(config.media_dir, Path("media"))
        self.assertEqual(config.temp_dir, Path("temp"))
        self.assertEqual(config.log_level, "INFO")

    def test_overrides(self):
        config = load_config({
            "ASSEMBLYAI_API_KEY": "key",
            "CHUNK_DURATION_SEC": "120",
            "PARALLEL_REQUESTS": "5",
            "LANGUAGE_CODE": "en",
            "MEDIA_DIR": "/data/in",
            "TEMP_DIR": "/data/tmp",
            "POLL_INTERVAL_SEC": "0.5",
            "LOG_LEVEL": "debug",
        })

        self.assertEqual(config.chunk_duration, 120)
        self.assertEqual(config.parallel_requests, 5)
        self.assertEqual(config.language_code, "en")
        self.assertEqual(config.media_dir, Path("/data/in"))
        self.assertEqual(config.temp_dir, Path("/data/tmp"))
        self.assertEqual(config.poll_interval, 0.5)
        self.assertEqual(config.log_level, "DEBUG")

    def test_missing_api_key(self):
        with self.assertRaisesRegex(ConfigError, "ASSEMBLYAI_API_KEY"):
            load_config({})
        with self.assertRaises(ConfigError):
            load_config({"ASSEMBLYAI_API_KEY": "   "})

    def test_invalid_numbers(self):
        with self.assertRaisesRegex(ConfigError, "CHUNK_DURATION_SEC"):
            load_config({"ASSEMBLYAI_API_KEY": "key", "CHUNK_DURATION_SEC": "five"})
        with self.assertRaisesRegex(ConfigError, "PARALLEL_REQUESTS"):
            load_config({"ASSEMBLYAI_API_KEY": "key", "PARALLEL_REQUESTS": "0"})

    def test_blank_values_use_defaults(self):
        config = load_config({"ASSEMBLYAI_API_KEY": "key", "CHUNK_DURATION_SEC": ""})

        self.assertEqual(config.chunk_duration, 300)


if __name__ == "__main__":
    unittest.main()
