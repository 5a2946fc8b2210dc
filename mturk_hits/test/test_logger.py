import logging
import os
import tempfile
import unittest
from unittest import mock

from mturk_hits import logger


class TestLogger(unittest.TestCase):

    def test_namespace(self):
        self.assertEqual(logger.setup_logger('mturk_hits.hit').name,
                         'mturk_hits.hit')
        self.assertEqual(logger.setup_logger('scratch').name,
                         'mturk_hits.scratch')

    def test_handlers_are_not_duplicated(self):
        log = logger.setup_logger('twice')
        log = logger.setup_logger('twice')
        self.assertEqual(len(log.handlers), 1)


class TestRootLogger(unittest.TestCase):

    def setUp(self):
        self.root = logging.getLogger()
        self.level = self.root.level
        self.tmp = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.root.setLevel(self.level)
        self.tmp.cleanup()

    def _log_through(self, handler, path):
        try:
            logger.setup_logger('file_test').info('hello file')
            logging.getLogger('elsewhere').warning('not ours')
            handler.flush()
            with open(path) as f:
                return f.read()
        finally:
            self.root.removeHandler(handler)
            handler.close()

    def test_no_file(self):
        with mock.patch('mturk_hits.conf.LOG_LOCATION', None):
            self.assertIsNone(logger.config_root_logger())

    def test_file_handler(self):
        path = os.path.join(self.tmp.name, 'mturk.log')
        with mock.patch('mturk_hits.conf.LOG_LOCATION', None):
            handler = logger.config_root_logger(path)
        contents = self._log_through(handler, path)
        self.assertIn('hello file', contents)
        self.assertNotIn('not ours', contents)

    def test_file_from_environment(self):
        path = os.path.join(self.tmp.name, 'from_env.log')
        with mock.patch('mturk_hits.conf.LOG_LOCATION', path):
            handler = logger.config_root_logger()
        self.assertIsNotNone(handler)
        self.assertEqual(handler.baseFilename, path)
        self.assertIn('hello file', self._log_through(handler, path))

    def test_explicit_file_wins(self):
        path = os.path.join(self.tmp.name, 'explicit.log')
        other = os.path.join(self.tmp.name, 'from_env.log')
        with mock.patch('mturk_hits.conf.LOG_LOCATION', other):
            handler = logger.config_root_logger(path)
        self._log_through(handler, path)
        self.assertFalse(os.path.exists(other))


if __name__ == '__main__':
    unittest.main()
