"""
fs.py: Storage interface the load driver runs against, and two backends.

Paths are POSIX style and absolute ("/test/slive/data/sl_dir_0/sl_file_1").
"""

import os
import posixpath
import shutil

from sortedcontainers import SortedDict

class StorageError(Exception):
    """
    Any failure reported by the storage service.
    """
    pass


class PathNotFoundError(StorageError):
    def __init__(self, path):
        super().__init__("No such file or directory: {}".format(path))
        self.path = path


class DataVerificationError(StorageError):
    pass


class FileSystem(object):
    """
    Abstract class. Defines the storage operations an ``Operation`` can use.
    Missing paths are reported with ``PathNotFoundError``.
    """
    def create(self, path, data, replication, block_size):
        """
        Create (or overwrite) ``path`` holding ``data``.
        Parent directories are created as needed.
        """
        raise NotImplementedError

    def append(self, path, data):
        raise NotImplementedError

    def read(self, path, length=None):
        """
        Return up to ``length`` bytes from the start of ``path``
        (the whole file if ``length`` is None).
        """
        raise NotImplementedError

    def delete(self, path):
        raise NotImplementedError

    def rename(self, src, dst):
        """
        Returns False if ``dst`` already exists.
        """
        raise NotImplementedError

    def set_replication(self, path, factor):
        raise NotImplementedError

    def get_replication(self, path):
        """
        Replication factor the service currently reports for ``path``.
        """
        raise NotImplementedError

    def listdir(self, path):
        raise NotImplementedError

    def mkdirs(self, path):
        raise NotImplementedError

    def exists(self, path):
        raise NotImplementedError


class LocalFileSystem(FileSystem):
    """
    Backend on a local directory tree rooted at ``root``. A local disk
    has no replicas, so replication factors are only remembered and
    converge immediately.
    """
    def __init__(self, root):
        self._root = os.path.abspath(root)
        self._replication = {}
        os.makedirs(self._root, exist_ok=True)

    def _local(self, path):
        return os.path.join(self._root, path.lstrip('/'))

    def _check(self, path):
        if not os.path.exists(self._local(path)):
            raise PathNotFoundError(path)

    def create(self, path, data, replication, block_size):
        local = self._local(path)
        try:
            os.makedirs(os.path.dirname(local), exist_ok=True)
            with open(local, 'wb') as f:
                f.write(data)
        except OSError as e:
            raise StorageError("Unable to create {}: {}".format(path, e)) from e
        self._replication[path] = replication
        return len(data)

    def append(self, path, data):
        self._check(path)
        try:
            with open(self._local(path), 'ab') as f:
                f.write(data)
        except OSError as e:
            raise StorageError("Unable to append to {}: {}".format(path, e)) from e
        return len(data)

    def read(self, path, length=None):
        self._check(path)
        try:
            with open(self._local(path), 'rb') as f:
                return f.read() if length is None else f.read(length)
        except OSError as e:
            raise StorageError("Unable to read {}: {}".format(path, e)) from e

    def delete(self, path):
        self._check(path)
        local = self._local(path)
        try:
            if os.path.isdir(local):
                shutil.rmtree(local)
            else:
                os.remove(local)
        except OSError as e:
            raise StorageError("Unable to delete {}: {}".format(path, e)) from e
        self._replication.pop(path, None)
        return True

    def rename(self, src, dst):
        self._check(src)
        if self.exists(dst):
            return False
        local_dst = self._local(dst)
        try:
            os.makedirs(os.path.dirname(local_dst), exist_ok=True)
            os.rename(self._local(src), local_dst)
        except OSError as e:
            raise StorageError("Unable to rename {} to {}: {}".format(src, dst, e)) from e
        if src in self._replication:
            self._replication[dst] = self._replication.pop(src)
        return True

    def set_replication(self, path, factor):
        self._check(path)
        self._replication[path] = factor
        return True

    def get_replication(self, path):
        self._check(path)
        return self._replication.get(path, 1)

    def listdir(self, path):
        local = self._local(path)
        if not os.path.isdir(local):
            raise PathNotFoundError(path)
        return sorted(os.listdir(local))

    def mkdirs(self, path):
        try:
            os.makedirs(self._local(path), exist_ok=True)
        except OSError as e:
            raise StorageError("Unable to create directory {}: {}".format(path, e)) from e
        return True

    def exists(self, path):
        return os.path.exists(self._local(path))


class MemoryFileSystem(FileSystem):
    """
    In-memory backend. ``replication_lag`` is the number of
    ``get_replication`` polls a path keeps reporting its old factor
    after ``set_replication``.
    """
    class Entry(object):
        def __init__(self, is_dir, data=b"", replication=0, block_size=0):
            self.is_dir = is_dir
            self.data = bytearray(data)
            self.replication = replication
            self.target_replication = replication
            self.pending_polls = 0
            self.block_size = block_size

    def __init__(self, replication_lag=0):
        self._entries = SortedDict()
        self._entries['/'] = self.Entry(is_dir=True)
        self._replication_lag = replication_lag

    def _file(self, path):
        entry = self._entries.get(path)
        if entry is None or entry.is_dir:
            raise PathNotFoundError(path)
        return entry

    def _children(self, path):
        prefix = path.rstrip('/') + '/'
        for key in self._entries.irange(minimum=prefix, inclusive=(False, True)):
            if not key.startswith(prefix):
                break
            yield key

    def create(self, path, data, replication, block_size):
        entry = self._entries.get(path)
        if entry is not None and entry.is_dir:
            raise StorageError("Unable to create {}: is a directory".format(path))
        self.mkdirs(posixpath.dirname(path))
        self._entries[path] = self.Entry(False, data, replication, block_size)
        return len(data)

    def append(self, path, data):
        self._file(path).data.extend(data)
        return len(data)

    def read(self, path, length=None):
        data = self._file(path).data
        return bytes(data if length is None else data[:length])

    def delete(self, path):
        if path not in self._entries:
            raise PathNotFoundError(path)
        for child in list(self._children(path)):
            del self._entries[child]
        del self._entries[path]
        return True

    def rename(self, src, dst):
        if src not in self._entries:
            raise PathNotFoundError(src)
        if dst in self._entries:
            return False
        self.mkdirs(posixpath.dirname(dst))
        for child in list(self._children(src)):
            self._entries[dst + child[len(src):]] = self._entries.pop(child)
        self._entries[dst] = self._entries.pop(src)
        return True

    def set_replication(self, path, factor):
        entry = self._file(path)
        entry.target_replication = factor
        entry.pending_polls = self._replication_lag
        if entry.pending_polls == 0:
            entry.replication = factor
        return True

    def get_replication(self, path):
        entry = self._file(path)
        if entry.pending_polls > 0:
            entry.pending_polls -= 1
            if entry.pending_polls == 0:
                entry.replication = entry.target_replication
        return entry.replication

    def listdir(self, path):
        entry = self._entries.get(path)
        if entry is None or not entry.is_dir:
            raise PathNotFoundError(path)
        prefix = path.rstrip('/') + '/'
        return [key[len(prefix):] for key in self._children(path)
                if '/' not in key[len(prefix):]]

    def mkdirs(self, path):
        if not path.startswith('/'):
            raise StorageError("Path must be absolute: {}".format(path))
        missing = []
        while path not in self._entries:
            missing.append(path)
            path = posixpath.dirname(path)
        if not self._entries[path].is_dir:
            raise StorageError("Unable to create directory: {} is a file".format(path))
        for dir_path in missing:
            self._entries[dir_path] = self.Entry(is_dir=True)
        return True

    def exists(self, path):
        return path in self._entries
