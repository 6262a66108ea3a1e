import random

import pytest

from dizk.groth16.proving import prove
from dizk.groth16.setup import generate


# ── 테스트 상수 ──
SETUP_SEED = 3926
PROVER_SEED = 4106


def parallelize_assignment(config, values):
    return config.context.parallelize(list(enumerate(values)), config.num_partitions)


@pytest.fixture(scope="session")
def simple_crs(simple_circuit, curve, local_config):
    """x*x*x*12 = out 회로의 CRS (단일 프로세스)."""
    r1cs_rdd = simple_circuit["r1cs"].to_rdd(local_config)
    return generate(r1cs_rdd, curve, local_config, random.Random(SETUP_SEED))


@pytest.fixture(scope="session")
def simple_proof(simple_circuit, simple_crs, curve, local_config):
    """유효한 할당으로 만든 증명"""
    primary = simple_circuit["primary"]
    full_assignment = parallelize_assignment(local_config, primary + simple_circuit["auxiliary"])
    return prove(simple_crs.proving_key, primary, full_assignment, curve, local_config,
                 random.Random(PROVER_SEED))
