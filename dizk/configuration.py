"""
실행 설정(Configuration)
========================

파티션 수, 캐시 힌트, 디버그/런타임 플래그, 난수원, 실행 컨텍스트를 하나로 묶어
모든 진입점(reduce_instance, reduce_witness, prove, setup)에 명시적으로 전달한다.
전역 상태는 없다.

사용 예시:
    >>> config = Configuration(num_partitions=4, context=LocalContext(), debug_flag=True)
    >>> config.begin_log("Lagrange coefficients")
    >>> ...
    >>> config.end_log("Lagrange coefficients")   # 경과 시간이 INFO 로그로 남는다
"""

import logging
import os
import random
import secrets
import time
from dataclasses import dataclass, field

from dizk.dataset.context import LocalContext, ParallelContext
from dizk.dataset.dataset import StorageLevel

logger = logging.getLogger(__name__)


@dataclass
class Configuration:
    num_executors: int = 1
    num_cores: int = 1
    num_memory: int = 1
    num_partitions: int = 2
    storage_level: StorageLevel = StorageLevel.MEMORY_AND_DISK_SER
    debug_flag: bool = False
    runtime_flag: bool = False
    seed: int = None
    context: object = None
    runtimes: dict = field(default_factory=dict)

    def __post_init__(self):
        if self.context is None:
            self.context = LocalContext(default_parallelism=self.num_partitions)
        self._log_starts = {}
        self._runtime_starts = {}
        self._rng = None if self.seed is None else random.Random(self.seed)

    @classmethod
    def for_cluster(cls, local=False, num_executors=16, num_cores=2, num_memory=16,
                    num_partitions=64):
        """CLI 기본 설정. local이면 단일 프로세스, 아니면 joblib 워커 풀."""
        if local:
            context = LocalContext(default_parallelism=num_partitions)
        else:
            n_jobs = min(num_executors * num_cores, os.cpu_count() or 1)
            context = ParallelContext(n_jobs=n_jobs, default_parallelism=num_partitions)
        return cls(
            num_executors=num_executors,
            num_cores=num_cores,
            num_memory=num_memory,
            num_partitions=num_partitions,
            storage_level=StorageLevel.MEMORY_AND_DISK_SER,
            context=context,
        )

    def random_source(self):
        """증명자/셋업이 쓰는 난수원. seed가 없으면 OS 난수(secrets.SystemRandom).

        seed가 있으면 호출마다 같은 random.Random 인스턴스를 돌려준다 (스트림이 이어진다).
        """
        if self._rng is None:
            return secrets.SystemRandom()
        return self._rng

    # ─────────────────────────────────────────────────────────────────
    # 로그 / 런타임 측정
    # ─────────────────────────────────────────────────────────────────

    def begin_log(self, message):
        self._log_starts[message] = time.perf_counter()
        logger.info("Start: %s", message)

    def end_log(self, message):
        start = self._log_starts.pop(message, None)
        if start is None:
            logger.info("End: %s", message)
        else:
            logger.info("End: %s [%.3fs]", message, time.perf_counter() - start)

    def begin_runtime(self, name):
        if self.runtime_flag:
            self._runtime_starts[name] = time.perf_counter()

    def end_runtime(self, name):
        if self.runtime_flag and name in self._runtime_starts:
            self.runtimes[name] = time.perf_counter() - self._runtime_starts.pop(name)
