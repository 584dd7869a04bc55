"""
replication.py: Change a file's replication factor and wait for it to settle.
"""

import logging
import time

import slive.timer as timer
import slive.report as report
from slive.fs import StorageError
from slive.operations.fileops import FileOperation
from slive.operation import Kind

logger = logging.getLogger(__name__)

class SetReplicationOp(FileOperation):
    def __init__(self, config, rnd, sleep=time.sleep):
        super().__init__(Kind.SET_REPLICATION, config, rnd)
        self._sleep = sleep

    def _wait_for_replicas(self, fs, path, replicas):
        """
        Poll ``path`` until the service reports ``replicas``, giving up
        after ``replication_timeout_ms``.
        """
        poll = self._config.replication_poll_ms
        start = timer.now()
        while fs.get_replication(path) != replicas:
            if timer.elapsed(start) >= self._config.replication_timeout_ms:
                raise StorageError("Timed out waiting for {} replicas on path {}".format(
                    replicas, path))
            self._sleep(poll / 1000.0)
        logger.debug("%s reached %d replicas after %d ms", path, replicas, timer.elapsed(start))

    def _run(self, fs):
        path = self._finder.file()
        replicas = self._config.replication.get(self._rnd)
        if not fs.set_replication(path, replicas):
            return [self.output(report.FAILURES, 1)]
        self._wait_for_replicas(fs, path, replicas)
        return [self.output(report.SUCCESSES, 1)]
