"""
Execution contexts
==================

An ``ExecutionContext`` creates source datasets and runs per-partition tasks.
The reduction and prover code only talk to ``Dataset``; the context decides
where the tasks run.

  - LocalContext:    tasks run in the calling process, one after another
  - ParallelContext: tasks run on a joblib worker pool (loky processes by default)

Usage:
    >>> ctx = ParallelContext(n_jobs=4)
    >>> ctx.range(100, 8).map(lambda i: i * i).reduce(lambda a, b: a + b)
    328350
"""

import functools
import logging

from joblib import Parallel, delayed

from dizk.dataset.dataset import SourceDataset

logger = logging.getLogger(__name__)


def split_evenly(records, num_partitions):
    """Splits ``records`` into ``num_partitions`` contiguous chunks whose sizes differ by at most one."""
    records = list(records)
    size, extra = divmod(len(records), num_partitions)
    out, start = [], 0
    for p in range(num_partitions):
        end = start + size + (1 if p < extra else 0)
        out.append(records[start:end])
        start = end
    return out


def _fill_pair(value, index):
    return (index, value)


class ExecutionContext:
    default_parallelism = 1

    def run_tasks(self, fn, partitions):
        """Applies ``fn`` to every partition and returns the outputs in partition order."""
        raise NotImplementedError

    def _resolve(self, num_partitions):
        return max(1, num_partitions or self.default_parallelism)

    def parallelize(self, records, num_partitions=None):
        return SourceDataset(self, split_evenly(records, self._resolve(num_partitions)))

    def range(self, n, num_partitions=None):
        """Dataset of the integers ``0 .. n-1``; partitions are ``range`` objects."""
        num_partitions = self._resolve(num_partitions)
        size, extra = divmod(n, num_partitions)
        parts, start = [], 0
        for p in range(num_partitions):
            end = start + size + (1 if p < extra else 0)
            parts.append(range(start, end))
            start = end
        return SourceDataset(self, parts)

    def fill(self, size, value, num_partitions=None):
        """Dataset of pairs ``(i, value)`` for ``0 <= i < size``."""
        return self.range(size, num_partitions).map(functools.partial(_fill_pair, value))


class LocalContext(ExecutionContext):

    def __init__(self, default_parallelism=4):
        self.default_parallelism = default_parallelism

    def __repr__(self):
        return f"LocalContext(default_parallelism={self.default_parallelism})"

    def run_tasks(self, fn, partitions):
        return [fn(p) for p in partitions]


class ParallelContext(ExecutionContext):
    """Runs tasks on a joblib pool. Task functions and records are shipped with cloudpickle."""

    def __init__(self, n_jobs=-1, backend="loky", default_parallelism=None):
        self.n_jobs = n_jobs
        self.backend = backend
        self.default_parallelism = default_parallelism or (n_jobs if n_jobs > 0 else 8)

    def __repr__(self):
        return f"ParallelContext(n_jobs={self.n_jobs}, backend={self.backend!r})"

    def run_tasks(self, fn, partitions):
        partitions = list(partitions)
        if not partitions:
            return []
        logger.debug("running %d tasks on %s", len(partitions), self)
        return Parallel(n_jobs=self.n_jobs, backend=self.backend)(
            delayed(fn)(p) for p in partitions
        )
