"""
test_operations.py: Unit tests for individual operations.
"""

import random
import unittest

import slive.fs as fs
import slive.report as report
from slive.config import ConfigExtractor
from slive.operation import Kind
from slive.operations.factory import OperationFactory
from slive.operations.replication import SetReplicationOp
from slive.operations.sleep import SleepOp

FILE = '/test/slive/data/sl_dir_0/sl_file_0'
DIR = '/test/slive/data/sl_dir_0'

def by_measurement(outputs):
    return dict((out.measurement, out.value) for out in outputs)


class OperationTestCase(unittest.TestCase):
    # One file in one directory, so every operation hits the same path
    OPTIONS = {
        'files': 1,
        'dir_size': 1,
        'write_size': '100,100',
        'append_size': '50,50',
        'read_size': '1m',
        'block_size': '1k',
        'replication': '2,2',
        'replication_poll': 1,
        'replication_timeout': 1000,
    }

    def setUp(self):
        self.config = ConfigExtractor(self.OPTIONS).extract()
        self.rnd = random.Random(99)
        self.factory = OperationFactory(self.config, self.rnd)
        self.fs = fs.MemoryFileSystem()

    def run_op(self, kind):
        op = self.factory.get(kind)
        self.assertEqual(op.kind, kind)
        outputs = op.run(self.fs)
        for out in outputs:
            self.assertEqual(out.op_type, kind.value)
        return by_measurement(outputs)


class FileOperationTest(OperationTestCase):
    def test_create_read(self):
        result = self.run_op(Kind.CREATE)
        self.assertEqual(result[report.SUCCESSES], 1)
        self.assertEqual(result[report.FILES_CREATED], 1)
        self.assertEqual(result[report.BYTES_WRITTEN], 100)
        self.assertIn(report.OK_TIME_TAKEN, result)
        self.assertEqual(self.fs.get_replication(FILE), 2)

        result = self.run_op(Kind.READ)
        self.assertEqual(result[report.SUCCESSES], 1)
        self.assertEqual(result[report.BYTES_READ], 100)
        self.assertEqual(result[report.CHUNKS_VERIFIED], 1)
        self.assertEqual(result[report.CHUNKS_UNVERIFIED], 0)

    def test_append(self):
        self.run_op(Kind.CREATE)
        result = self.run_op(Kind.APPEND)
        self.assertEqual(result[report.BYTES_WRITTEN], 50)
        result = self.run_op(Kind.READ)
        self.assertEqual(result[report.BYTES_READ], 150)
        self.assertEqual(result[report.CHUNKS_VERIFIED], 2)

    def test_not_found(self):
        for kind in [Kind.READ, Kind.APPEND, Kind.DELETE, Kind.RENAME, Kind.LS]:
            result = self.run_op(kind)
            self.assertEqual(result[report.FAILURES], 1)
            self.assertEqual(result[report.NOT_FOUND], 1)
            self.assertNotIn(report.SUCCESSES, result)

    def test_delete(self):
        self.run_op(Kind.CREATE)
        result = self.run_op(Kind.DELETE)
        self.assertEqual(result[report.SUCCESSES], 1)
        self.assertFalse(self.fs.exists(FILE))

    def test_rename_onto_itself(self):
        # Source and destination are the same single file
        self.run_op(Kind.CREATE)
        result = self.run_op(Kind.RENAME)
        self.assertEqual(result[report.FAILURES], 1)
        self.assertTrue(self.fs.exists(FILE))

    def test_mkdir_ls(self):
        result = self.run_op(Kind.MKDIR)
        self.assertEqual(result[report.DIRS_CREATED], 1)
        self.assertTrue(self.fs.exists(DIR))
        self.run_op(Kind.CREATE)
        result = self.run_op(Kind.LS)
        self.assertEqual(result[report.DIR_ENTRIES], 1)

    def test_corrupt_file(self):
        self.fs.create(FILE, b'not a segment at all', 1, 1024)
        with self.assertRaises(fs.DataVerificationError):
            self.factory.get(Kind.READ).run(self.fs)

    def test_storage_error_propagates(self):
        class BrokenFileSystem(fs.MemoryFileSystem):
            def create(self, path, data, replication, block_size):
                raise fs.StorageError("disk on fire")
        with self.assertRaises(fs.StorageError):
            self.factory.get(Kind.CREATE).run(BrokenFileSystem())


class SetReplicationTest(OperationTestCase):
    def test_wait(self):
        lagging = fs.MemoryFileSystem(replication_lag=3)
        lagging.create(FILE, b'', 1, 1024)
        sleeps = []
        op = SetReplicationOp(self.config, self.rnd, sleep=sleeps.append)
        result = by_measurement(op.run(lagging))
        self.assertEqual(result[report.SUCCESSES], 1)
        self.assertEqual(lagging.get_replication(FILE), 2)
        self.assertEqual(sleeps, [0.001, 0.001])

    def test_timeout(self):
        class StuckFileSystem(fs.MemoryFileSystem):
            def get_replication(self, path):
                return 1
        stuck = StuckFileSystem()
        stuck.create(FILE, b'', 1, 1024)
        config = ConfigExtractor(dict(self.OPTIONS, replication_timeout=5)).extract()
        op = SetReplicationOp(config, self.rnd)
        with self.assertRaises(fs.StorageError):
            op.run(stuck)

    def test_missing(self):
        result = self.run_op(Kind.SET_REPLICATION)
        self.assertEqual(result[report.NOT_FOUND], 1)


class SleepTest(unittest.TestCase):
    def test_range(self):
        config = ConfigExtractor({'sleep': '3,8'}).extract()
        sleeps = []
        op = SleepOp(config, random.Random(4), sleep=sleeps.append)
        for _ in range(100):
            result = by_measurement(op.run(None))
            self.assertEqual(result[report.SUCCESSES], 1)
        self.assertEqual(len(sleeps), 100)
        for seconds in sleeps:
            self.assertTrue(0.003 <= seconds <= 0.008)
        self.assertEqual(set(round(s * 1000) for s in sleeps), {3, 4, 5, 6, 7, 8})

    def test_measured(self):
        config = ConfigExtractor({'sleep': '20,30'}).extract()
        op = SleepOp(config, random.Random(4))
        result = by_measurement(op.run(None))
        self.assertGreaterEqual(result[report.OK_TIME_TAKEN], 19)

    def test_requires_range(self):
        with self.assertRaises(ValueError):
            SleepOp(ConfigExtractor({}).extract(), random.Random())
