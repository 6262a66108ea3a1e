import sys
import os
import random
import pytest

# 프로젝트 루트를 sys.path에 추가
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from dizk.algebra.curves import BN254A
from dizk.algebra.field import BN254Fr
from dizk.configuration import Configuration
from dizk.dataset.context import LocalContext, ParallelContext
from dizk.dataset.dataset import StorageLevel
from dizk.io.json_r1cs import JSONR1CSLoader
from dizk.relations.r1cs_constructor import serial_construct


DATA_DIR = os.path.join(os.path.dirname(__file__), "data")
SIMPLE_CIRCUIT = os.path.join(DATA_DIR, "simple_circuit_r1cs.json")

# ── 테스트 상수 ──
SEED = 20240611
VALID_PRIMARY = [1, 12]
VALID_AUXILIARY = [1, 1, 1]
INVALID_AUXILIARY = [2, 1, 1]


def fr_list(values):
    return [BN254Fr(v) for v in values]


@pytest.fixture(scope="session")
def local_config():
    """단일 프로세스 실행 설정."""
    return Configuration(
        num_partitions=4,
        storage_level=StorageLevel.MEMORY_ONLY,
        debug_flag=True,
        seed=SEED,
        context=LocalContext(default_parallelism=4),
    )


@pytest.fixture(scope="session")
def parallel_config():
    """joblib 워커 풀 실행 설정."""
    return Configuration(
        num_partitions=3,
        storage_level=StorageLevel.MEMORY_ONLY,
        debug_flag=True,
        seed=SEED,
        context=ParallelContext(n_jobs=2, default_parallelism=3),
    )


@pytest.fixture(params=["local", "parallel"])
def config(request, local_config, parallel_config):
    """두 실행 경로 모두에서 같은 테스트를 돌린다."""
    return local_config if request.param == "local" else parallel_config


@pytest.fixture
def rng():
    return random.Random(SEED)


@pytest.fixture(scope="session")
def curve():
    return BN254A


@pytest.fixture(scope="session")
def simple_circuit():
    """x*x*x*12 = out 회로와 만족/불만족 할당."""
    r1cs = JSONR1CSLoader(SIMPLE_CIRCUIT).load_serial(BN254Fr)
    return {
        "r1cs": r1cs,
        "primary": fr_list(VALID_PRIMARY),
        "auxiliary": fr_list(VALID_AUXILIARY),
        "invalid_auxiliary": fr_list(INVALID_AUXILIARY),
    }


@pytest.fixture(scope="session")
def random_circuit():
    """마지막 제약식이 조밀한 무작위 R1CS (제약식 6개, 공개 입력 3개)."""
    r1cs, primary, auxiliary = serial_construct(6, 3, BN254Fr, random.Random(SEED))
    return {"r1cs": r1cs, "primary": primary, "auxiliary": auxiliary}
