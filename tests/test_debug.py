import logging
import os
import tempfile
import unittest

from pentago.debug import DebugLevel, DebugManager


class TestDebugManager(unittest.TestCase):
    def setUp(self):
        self.manager = DebugManager("pentago.test")

    def tearDown(self):
        self.manager.configure(log_file="")

    def test_level_filtering(self):
        self.manager.configure(level=DebugLevel.INFO)
        self.assertTrue(self.manager._should_log(DebugLevel.ERROR))
        self.assertTrue(self.manager._should_log(DebugLevel.INFO))
        self.assertFalse(self.manager._should_log(DebugLevel.DEBUG))

    def test_component_filtering(self):
        self.manager.configure(level=DebugLevel.TRACE, components=["game"])
        self.assertTrue(self.manager._should_log(DebugLevel.DEBUG, "game"))
        self.assertFalse(self.manager._should_log(DebugLevel.DEBUG, "board"))

    def test_disabled(self):
        self.manager.configure(enabled=False)
        self.assertFalse(self.manager._should_log(DebugLevel.ERROR))

    def test_set_from_string(self):
        self.manager.set_from_string("debug")
        self.assertEqual(self.manager.level, DebugLevel.DEBUG)
        self.manager.set_from_string("nonsense")
        self.assertEqual(self.manager.level, DebugLevel.DEBUG)

    def test_log_file_receives_messages(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "pentago.log")
            self.manager.configure(level=DebugLevel.INFO, log_file=path)
            self.manager.info("hello", "game")
            self.manager.configure(log_file="")
            with open(path) as f:
                self.assertIn("[game] hello", f.read())

    def test_timer(self):
        self.manager.start_timer("work")
        elapsed = self.manager.end_timer("work")
        self.assertGreaterEqual(elapsed, 0.0)
        self.assertIsNone(self.manager.end_timer("work"))

    def test_none_level_silences_logger(self):
        self.manager.configure(level=DebugLevel.NONE)
        self.assertFalse(self.manager._should_log(DebugLevel.ERROR))
        self.assertGreater(logging.getLogger("pentago.test").level, logging.CRITICAL)


if __name__ == '__main__':
    unittest.main(verbosity=2)
