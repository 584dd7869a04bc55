"""
fileops.py: Operations that create, modify, read or list files and directories.
"""

import slive.report as report
from slive.data import DataWriter, DataVerifier
from slive.operation import Operation, Kind
from slive.paths import PathFinder

class FileOperation(Operation):
    """
    Operation that picks its targets from the configured namespace.
    """
    def __init__(self, kind, config, rnd):
        super().__init__(kind, config, rnd)
        self._finder = PathFinder(config.base_dir, config.file_count,
                                  config.dir_size, rnd)


class CreateOp(FileOperation):
    def __init__(self, config, rnd):
        super().__init__(Kind.CREATE, config, rnd)
        self._writer = DataWriter(rnd)

    def _run(self, fs):
        path = self._finder.file()
        size = self._config.write_size.get(self._rnd)
        replication = self._config.replication.get(self._rnd)
        block_size = self._config.block_size.get(self._rnd)
        written = fs.create(path, self._writer.segment(size), replication, block_size)
        return [self.output(report.SUCCESSES, 1),
                self.output(report.FILES_CREATED, 1),
                self.output(report.BYTES_WRITTEN, written)]


class AppendOp(FileOperation):
    def __init__(self, config, rnd):
        super().__init__(Kind.APPEND, config, rnd)
        self._writer = DataWriter(rnd)

    def _run(self, fs):
        path = self._finder.file()
        size = self._config.append_size.get(self._rnd)
        written = fs.append(path, self._writer.segment(size))
        return [self.output(report.SUCCESSES, 1),
                self.output(report.BYTES_WRITTEN, written)]


class DeleteOp(FileOperation):
    def __init__(self, config, rnd):
        super().__init__(Kind.DELETE, config, rnd)

    def _run(self, fs):
        if fs.delete(self._finder.file()):
            return [self.output(report.SUCCESSES, 1)]
        return [self.output(report.FAILURES, 1)]


class RenameOp(FileOperation):
    def __init__(self, config, rnd):
        super().__init__(Kind.RENAME, config, rnd)

    def _run(self, fs):
        src = self._finder.file()
        dst = self._finder.file()
        if fs.rename(src, dst):
            return [self.output(report.SUCCESSES, 1)]
        return [self.output(report.FAILURES, 1)]


class ReadOp(FileOperation):
    def __init__(self, config, rnd):
        super().__init__(Kind.READ, config, rnd)
        self._verifier = DataVerifier()

    def _run(self, fs):
        path = self._finder.file()
        length = self._config.read_size.get(self._rnd)
        result = self._verifier.verify(fs.read(path, length))
        return [self.output(report.SUCCESSES, 1),
                self.output(report.BYTES_READ, result.bytes_read),
                self.output(report.CHUNKS_VERIFIED, result.chunks_verified),
                self.output(report.CHUNKS_UNVERIFIED, result.chunks_unverified)]


class LsOp(FileOperation):
    def __init__(self, config, rnd):
        super().__init__(Kind.LS, config, rnd)

    def _run(self, fs):
        entries = fs.listdir(self._finder.directory())
        return [self.output(report.SUCCESSES, 1),
                self.output(report.DIR_ENTRIES, len(entries))]


class MkdirOp(FileOperation):
    def __init__(self, config, rnd):
        super().__init__(Kind.MKDIR, config, rnd)

    def _run(self, fs):
        if fs.mkdirs(self._finder.directory()):
            return [self.output(report.SUCCESSES, 1),
                    self.output(report.DIRS_CREATED, 1)]
        return [self.output(report.FAILURES, 1)]
