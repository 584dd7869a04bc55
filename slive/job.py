"""
job.py: Local job substrate. Runs independent workers in separate
processes and reduces what they emit.
"""

import logging
import multiprocessing

import progressbar

from slive.config import ConfigExtractor
from slive.reducer import Reducer
from slive.worker import Worker, ListCollector

logger = logging.getLogger(__name__)

DUMMY_KEY = "slive"
DUMMY_VALUE = "slive"

def run_worker(task):
    """
    Body of one worker process. ``task`` is (index, options, fs_factory);
    the filesystem handle is built inside the process.
    """
    index, options, fs_factory = task
    worker = Worker.configure(options, fs_factory())
    collector = ListCollector()
    termination = worker.run("{}-{}".format(DUMMY_KEY, index), DUMMY_VALUE, collector)
    return index, termination, collector.pairs


class Job(object):
    """
    ``fs_factory`` must be picklable when ``processes`` is not 0, since
    it is shipped to the worker processes. ``processes=0`` runs every
    worker in the calling process, one after the other.
    """
    def __init__(self, options, fs_factory, processes=None, progress=False):
        self._options = dict(options)
        self._fs_factory = fs_factory
        self._processes = processes
        self._progress = progress
        self.terminations = {}
        # Fail fast on bad options before any process is started
        self._config = ConfigExtractor(self._options).extract()

    @property
    def config(self):
        return self._config

    def tasks(self):
        """
        One (index, options, fs_factory) task per worker. Worker i runs
        with the configured seed plus i.
        """
        tasks = []
        for i in range(self._config.workers):
            options = self._options
            if self._config.random_seed is not None:
                options = dict(options, seed=self._config.random_seed + i)
            tasks.append((i, options, self._fs_factory))
        return tasks

    def _results(self, tasks):
        if self._processes == 0:
            for task in tasks:
                yield run_worker(task)
            return
        processes = self._processes or min(len(tasks), multiprocessing.cpu_count())
        with multiprocessing.Pool(processes) as pool:
            for result in pool.imap_unordered(run_worker, tasks):
                yield result

    def run(self):
        """
        Run ``workers`` workers and return the merged outputs.
        """
        n_workers = self._config.workers
        tasks = self.tasks()
        logger.info("Starting %d workers", n_workers)
        if self._progress:
            progress = progressbar.ProgressBar(max_value=n_workers).start()

        reducer = Reducer()
        for done, (index, termination, pairs) in enumerate(self._results(tasks), 1):
            self.terminations[index] = termination
            reducer.add_all(pairs)
            logger.info("Worker %d finished (%s), %d outputs", index,
                        termination.name.lower(), len(pairs))
            if self._progress:
                progress.update(done)

        if self._progress:
            progress.finish()
        return reducer.outputs()
