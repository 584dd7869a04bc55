"""
test_job.py: Unit tests for the local job substrate.
"""

import functools
import io
import logging
import random
import tempfile
import unittest

import slive.fs as fs
import slive.job as job
from slive.config import ConfigError, ConfigExtractor
from slive.log import configure_logging
from slive.report import ReportWriter
from slive.selector import WeightSelector
from slive.worker import Termination

class InlineJobTest(unittest.TestCase):
    OPTIONS = {
        'duration': 30,
        'workers': 3,
        'seed': 7,
        'operations': {'mkdir': {'max_count': 4}, 'ls': {'max_count': 2}},
    }

    def test_run(self):
        j = job.Job(self.OPTIONS, fs.MemoryFileSystem, processes=0)
        outputs = j.run()
        merged = dict((out.key, out.value) for out in outputs)
        self.assertEqual(merged['l:worker*op_count'], 18)
        self.assertEqual(merged['l:mkdir*successes'], 12)
        self.assertEqual(j.terminations, {0: Termination.EXHAUSTED,
                                          1: Termination.EXHAUSTED,
                                          2: Termination.EXHAUSTED})
        text = io.StringIO()
        ReportWriter(outputs).write(text)
        self.assertIn('Operation "mkdir"', text.getvalue())

    def test_local_backend(self):
        options = dict(self.OPTIONS, workers=2,
                       operations={'create': {'max_count': 3}, 'read': {'max_count': 3}},
                       write_size='1k', read_size='4k', block_size='1k')
        with tempfile.TemporaryDirectory() as tmp:
            factory = functools.partial(fs.LocalFileSystem, tmp)
            outputs = job.Job(options, factory, processes=0).run()
        merged = dict((out.key, out.value) for out in outputs)
        self.assertEqual(merged['l:create*successes'], 6)
        self.assertEqual(merged['l:create*bytes_written'], 6 * 1024)
        self.assertEqual(merged['l:worker*op_count'], 12)
        self.assertNotIn('l:read*chunks_unverified', [k for k, v in merged.items() if v > 0])

    def test_worker_seeds(self):
        j = job.Job(dict(self.OPTIONS, seed='7'), fs.MemoryFileSystem, processes=0)
        self.assertEqual([options['seed'] for _, options, _ in j.tasks()], [7, 8, 9])
        unseeded = dict(self.OPTIONS)
        del unseeded['seed']
        j = job.Job(unseeded, fs.MemoryFileSystem, processes=0)
        self.assertEqual(['seed' in options for _, options, _ in j.tasks()], [False] * 3)

    def test_workers_diverge(self):
        options = dict(self.OPTIONS, workers=2,
                       operations={'create': {'max_count': 10}, 'mkdir': {'max_count': 10}})
        kinds = []
        for _, worker_options, _ in job.Job(options, fs.MemoryFileSystem, processes=0).tasks():
            config = ConfigExtractor(worker_options).extract()
            selector = WeightSelector(config, random.Random(config.random_seed))
            kinds.append([selector.select(0, 1000).kind for _ in range(20)])
        self.assertNotEqual(kinds[0], kinds[1])

    def test_bad_options(self):
        with self.assertRaises(ConfigError):
            job.Job({'operations': {'fsck': {}}}, fs.MemoryFileSystem)


class ProcessJobTest(unittest.TestCase):
    def test_pool(self):
        options = {'duration': 30, 'workers': 2, 'operations': {'mkdir': {'max_count': 3}}}
        j = job.Job(options, fs.MemoryFileSystem, processes=2)
        merged = dict((out.key, out.value) for out in j.run())
        self.assertEqual(merged['l:worker*op_count'], 6)
        self.assertEqual(sorted(j.terminations), [0, 1])


class LoggingTest(unittest.TestCase):
    def tearDown(self):
        logging.getLogger().handlers.clear()
        logging.getLogger('slive.worker').setLevel(logging.NOTSET)

    def test_configure(self):
        stream = io.StringIO()
        root = configure_logging(logging.INFO, quiet=['slive.worker'], stream=stream)
        self.assertEqual(len(root.handlers), 1)
        logging.getLogger('slive.job').info("visible")
        logging.getLogger('slive.worker').info("hidden")
        self.assertIn("visible", stream.getvalue())
        self.assertNotIn("hidden", stream.getvalue())
