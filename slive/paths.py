"""
paths.py: Random file and directory names within a bounded namespace.
"""

import posixpath

import slive.param as param

class PathFinder(object):
    """
    Files are numbered ``0 .. files - 1`` and laid out ``dir_size`` per
    directory under ``<base_dir>/data``. Different workers pick from the
    same namespace, so a path chosen here may or may not exist.
    """
    def __init__(self, base_dir, files, dir_size, rnd):
        assert files > 0 and dir_size > 0
        self._data_dir = posixpath.join(base_dir, param.DATA_DIR)
        self._files = files
        self._dir_size = dir_size
        self._rnd = rnd

    def _dir_path(self, dir_num):
        return posixpath.join(self._data_dir, param.DIR_PREFIX + str(dir_num))

    def file(self):
        num = self._rnd.randrange(self._files)
        return posixpath.join(self._dir_path(num // self._dir_size),
                              param.FILE_PREFIX + str(num))

    def directory(self):
        dirs = (self._files + self._dir_size - 1) // self._dir_size
        return self._dir_path(self._rnd.randrange(dirs))
