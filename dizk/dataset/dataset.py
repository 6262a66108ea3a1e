"""
Partitioned datasets
====================

A ``Dataset`` is a lazily evaluated collection of records split into a fixed
number of partitions. Keyed operations expect records of the form
``(key, value)`` with integer (or tuple-of-integer) keys.

**Lineage**:
  Every transformation returns a new node that remembers its parent(s) and
  the per-partition function to apply. Nothing runs until an action
  (``collect``, ``count``, ``reduce``, ``fold``) asks for the partitions.
  A lost or unpersisted result is simply recomputed from its lineage.

**Narrow vs. wide**:
  ``map`` / ``filter`` / ``map_values`` / ``flat_map`` / ``map_partitions``
  are narrow: chains of them are fused into one task per partition.
  ``reduce_by_key`` / ``group_by_key`` / ``join`` / ``subtract_by_key`` are
  wide: records are hash-partitioned on their key and regrouped.

**Determinism**:
  Integer keys hash to themselves and buckets are concatenated in partition
  order, so a pipeline evaluated twice yields identical results.

Usage:
    >>> ctx = LocalContext()
    >>> pairs = ctx.parallelize([(i % 4, i) for i in range(16)], 8)
    >>> sorted(pairs.reduce_by_key(lambda a, b: a + b).collect())
    [(0, 24), (1, 28), (2, 32), (3, 36)]
"""

import functools
from enum import Enum
from itertools import chain


class StorageLevel(Enum):
    """Caching hint for ``Dataset.persist``. Persisted partitions are held in memory."""
    NONE = "none"
    MEMORY_ONLY = "memory_only"
    MEMORY_ONLY_SER = "memory_only_ser"
    MEMORY_AND_DISK = "memory_and_disk"
    MEMORY_AND_DISK_SER = "memory_and_disk_ser"
    DISK_ONLY = "disk_only"


def partition_for(key, num_partitions):
    return hash(key) % num_partitions


# ─────────────────────────────────────────────────────────────────────
# Per-partition task functions (module level so worker processes can import them)
# ─────────────────────────────────────────────────────────────────────

def _compose(first, second, records):
    return second(first(records))


def _map_records(fn, records):
    return [fn(record) for record in records]


def _map_values(fn, records):
    return [(key, fn(value)) for key, value in records]


def _flat_map_records(fn, records):
    return [out for record in records for out in fn(record)]


def _filter_records(fn, records):
    return [record for record in records if fn(record)]


def _map_partition(fn, records):
    return list(fn(records))


def _bucketize(num_partitions, records):
    buckets = [[] for _ in range(num_partitions)]
    for record in records:
        buckets[partition_for(record[0], num_partitions)].append(record)
    return buckets


def _bucketize_tagged(num_partitions, tag, records):
    buckets = [[] for _ in range(num_partitions)]
    for record in records:
        buckets[partition_for(record[0], num_partitions)].append((tag, record))
    return buckets


def _combine_by_key(fn, records):
    combined = {}
    for key, value in records:
        if key in combined:
            combined[key] = fn(combined[key], value)
        else:
            combined[key] = value
    return list(combined.items())


def _group_by_key(records):
    groups = {}
    for key, value in records:
        groups.setdefault(key, []).append(value)
    return list(groups.items())


def _split_tagged(records):
    left, right = {}, {}
    for tag, (key, value) in records:
        (left if tag == 0 else right).setdefault(key, []).append(value)
    return left, right


def _join_tagged(records):
    left, right = _split_tagged(records)
    out = []
    for key, left_values in left.items():
        right_values = right.get(key)
        if right_values is None:
            continue
        for lv in left_values:
            for rv in right_values:
                out.append((key, (lv, rv)))
    return out


def _subtract_tagged(records):
    left, right = _split_tagged(records)
    return [(key, value) for key, values in left.items() if key not in right for value in values]


def _count(records):
    return [sum(1 for _ in records)]


def _reduce_partition(fn, records):
    it = iter(records)
    try:
        acc = next(it)
    except StopIteration:
        return []
    for record in it:
        acc = fn(acc, record)
    return [acc]


def _fold_partition(zero, fn, records):
    acc = zero
    for record in records:
        acc = fn(acc, record)
    return [acc]


# ─────────────────────────────────────────────────────────────────────
# Dataset nodes
# ─────────────────────────────────────────────────────────────────────

class Dataset:
    """Base lineage node. Subclasses implement ``_compute_partitions``."""

    def __init__(self, context, num_partitions):
        self.context = context
        self.num_partitions = num_partitions
        self.storage_level = StorageLevel.NONE
        self._cache = None

    def __repr__(self):
        return f"{type(self).__name__}(partitions={self.num_partitions}, storage={self.storage_level.value})"

    def _compute_partitions(self):
        raise NotImplementedError

    def partitions(self):
        """Materializes this dataset as a list of partitions (lists of records)."""
        if self._cache is not None:
            return self._cache
        parts = self._compute_partitions()
        if self.storage_level is not StorageLevel.NONE:
            self._cache = parts
        return parts

    def _run(self, fn):
        """Runs ``fn`` once per partition of this dataset and returns the per-partition outputs."""
        return self.context.run_tasks(fn, self.partitions())

    # ── caching ──

    def persist(self, storage_level=StorageLevel.MEMORY_ONLY):
        self.storage_level = storage_level
        return self

    def unpersist(self):
        self.storage_level = StorageLevel.NONE
        self._cache = None
        return self

    def is_cached(self):
        return self._cache is not None

    # ── narrow transformations ──

    def map_partitions(self, fn):
        return MapPartitionsDataset(self, functools.partial(_map_partition, fn))

    def map(self, fn):
        return MapPartitionsDataset(self, functools.partial(_map_records, fn))

    def map_to_pair(self, fn):
        """Re-keys records: ``fn`` maps a record to a new ``(key, value)`` pair."""
        return self.map(fn)

    def map_values(self, fn):
        return MapPartitionsDataset(self, functools.partial(_map_values, fn))

    def flat_map(self, fn):
        return MapPartitionsDataset(self, functools.partial(_flat_map_records, fn))

    def filter(self, fn):
        return MapPartitionsDataset(self, functools.partial(_filter_records, fn))

    def keys(self):
        return self.map(_first)

    def values(self):
        return self.map(_second)

    def union(self, other):
        """Concatenates partitions. Keys may repeat; combine with ``reduce_by_key`` afterwards."""
        return UnionDataset(self, other)

    # ── wide transformations ──

    def reduce_by_key(self, fn, num_partitions=None):
        """Merges values sharing a key with an associative, commutative ``fn``."""
        combined = MapPartitionsDataset(self, functools.partial(_combine_by_key, fn))
        return ShuffledDataset(
            [combined],
            functools.partial(_combine_by_key, fn),
            num_partitions or self.num_partitions,
        )

    def group_by_key(self, num_partitions=None):
        return ShuffledDataset([self], _group_by_key, num_partitions or self.num_partitions)

    def join(self, other, num_partitions=None):
        """Inner equi-join on key: ``(k, v)`` and ``(k, w)`` give ``(k, (v, w))``."""
        return ShuffledDataset(
            [self, other],
            _join_tagged,
            num_partitions or max(self.num_partitions, other.num_partitions),
        )

    def subtract_by_key(self, other, num_partitions=None):
        """Records of this dataset whose key does not occur in ``other``."""
        return ShuffledDataset(
            [self, other],
            _subtract_tagged,
            num_partitions or self.num_partitions,
        )

    # ── actions ──

    def collect(self):
        return list(chain.from_iterable(self.partitions()))

    def collect_as_map(self):
        return dict(self.collect())

    def count(self):
        return sum(chain.from_iterable(self._run(_count)))

    def reduce(self, fn):
        partials = list(chain.from_iterable(self._run(functools.partial(_reduce_partition, fn))))
        if not partials:
            raise ValueError("reduce of an empty dataset")
        return functools.reduce(fn, partials)

    def fold(self, zero, fn):
        partials = chain.from_iterable(self._run(functools.partial(_fold_partition, zero, fn)))
        return functools.reduce(fn, partials, zero)


def _first(record):
    return record[0]


def _second(record):
    return record[1]


class SourceDataset(Dataset):
    """Partitions held on the controller (``parallelize``, ``range``)."""

    def __init__(self, context, partitions):
        super().__init__(context, len(partitions))
        self._source = partitions

    def _compute_partitions(self):
        return self._source


class MapPartitionsDataset(Dataset):

    def __init__(self, parent, fn):
        super().__init__(parent.context, parent.num_partitions)
        self.parent = parent
        self.fn = fn

    def _compute_partitions(self):
        return self.parent._run(self.fn)

    def _run(self, fn):
        if self._cache is not None or self.storage_level is not StorageLevel.NONE:
            return super()._run(fn)
        # fuse with the parent chain: one task per partition
        return self.parent._run(functools.partial(_compose, self.fn, fn))


class UnionDataset(Dataset):

    def __init__(self, left, right):
        super().__init__(left.context, left.num_partitions + right.num_partitions)
        self.left = left
        self.right = right

    def _compute_partitions(self):
        return list(self.left.partitions()) + list(self.right.partitions())

    def _run(self, fn):
        if self._cache is not None or self.storage_level is not StorageLevel.NONE:
            return super()._run(fn)
        return list(self.left._run(fn)) + list(self.right._run(fn))


class ShuffledDataset(Dataset):
    """Hash-partitions its parents' records by key, then applies ``aggregate`` per target partition."""

    def __init__(self, parents, aggregate, num_partitions):
        super().__init__(parents[0].context, num_partitions)
        self.parents = parents
        self.aggregate = aggregate

    def _gather(self):
        n = self.num_partitions
        if len(self.parents) == 1:
            bucketed = self.parents[0]._run(functools.partial(_bucketize, n))
        else:
            bucketed = []
            for tag, parent in enumerate(self.parents):
                bucketed.extend(parent._run(functools.partial(_bucketize_tagged, n, tag)))
        return [list(chain.from_iterable(buckets[j] for buckets in bucketed)) for j in range(n)]

    def _compute_partitions(self):
        return self.context.run_tasks(self.aggregate, self._gather())

    def _run(self, fn):
        if self._cache is not None or self.storage_level is not StorageLevel.NONE:
            return super()._run(fn)
        return self.context.run_tasks(functools.partial(_compose, self.aggregate, fn), self._gather())
