"""
Groth16 tests: setup.py, proving.py, verifying.py
"""
import random

import pytest

from dizk.configuration import Configuration
from dizk.dataset.context import LocalContext
from dizk.dataset.dataset import StorageLevel
from dizk.errors import ConfigurationError, UnsatisfiedAssignmentError
from dizk.groth16.objects import Proof
from dizk.groth16.proving import check_proving_key, prove
from dizk.groth16.setup import generate
from dizk.groth16.verifying import verify


def parallelize_assignment(config, values):
    return config.context.parallelize(list(enumerate(values)), config.num_partitions)


def drop_key(index):
    def keep(record):
        return record[0] != index
    return keep


class TestSetup:

    def test_query_sizes(self, simple_circuit, simple_crs):
        """query_a/query_b는 변수 수, query_h는 n+1, delta_abc는 보조 변수 수"""
        pk = simple_crs.proving_key
        r1cs = simple_circuit["r1cs"]
        assert pk.query_a.count() == r1cs.num_variables()
        assert pk.query_b.count() == r1cs.num_variables()
        assert pk.query_h.count() == 8 + 1
        assert pk.delta_abc_g1.count() == r1cs.num_auxiliary
        assert sorted(pk.delta_abc_g1.keys().collect()) == [2, 3, 4]

    def test_verification_key(self, simple_circuit, simple_crs, curve):
        pk, vk = simple_crs
        assert len(vk.gamma_abc_g1) == simple_circuit["r1cs"].num_primary
        assert curve.eq(vk.delta_g2, pk.delta_g2)
        assert vk.alpha_g1_beta_g2 == curve.pairing(pk.beta_g2, pk.alpha_g1)

    def test_points_on_curve(self, simple_crs, curve):
        pk = simple_crs.proving_key
        for _, point in pk.query_a.collect():
            assert curve.is_on_curve_g1(point)
        for _, (p1, p2) in pk.query_b.collect():
            assert curve.is_on_curve_g1(p1)
            assert curve.is_on_curve_g2(p2)

    def test_deterministic_with_seeded_rng(self, simple_circuit, simple_crs, curve, local_config):
        again = generate(simple_circuit["r1cs"].to_rdd(local_config), curve, local_config, random.Random(3926))
        assert curve.eq(again.proving_key.alpha_g1, simple_crs.proving_key.alpha_g1)
        assert curve.eq(again.verification_key.gamma_g2, simple_crs.verification_key.gamma_g2)


class TestProve:

    def test_proof_points(self, simple_proof, curve):
        assert curve.is_on_curve_g1(simple_proof.g_a)
        assert curve.is_on_curve_g2(simple_proof.g_b)
        assert curve.is_on_curve_g1(simple_proof.g_c)

    def test_deterministic_with_seeded_rng(self, simple_circuit, simple_crs, simple_proof, curve, local_config):
        primary = simple_circuit["primary"]
        full_assignment = parallelize_assignment(local_config, primary + simple_circuit["auxiliary"])
        again = prove(simple_crs.proving_key, primary, full_assignment, curve, local_config, random.Random(4106))
        assert all(curve.eq(p, q) for p, q in zip(again, simple_proof))

    def test_missing_query_a(self, simple_circuit, simple_crs, curve, local_config):
        pk = simple_crs.proving_key
        broken = pk._replace(query_a=pk.query_a.filter(drop_key(3)))
        primary = simple_circuit["primary"]
        full_assignment = parallelize_assignment(local_config, primary + simple_circuit["auxiliary"])
        with pytest.raises(ConfigurationError, match="query_a"):
            prove(broken, primary, full_assignment, curve, local_config)

    def test_missing_query_h(self, simple_circuit, simple_crs, local_config):
        pk = simple_crs.proving_key
        broken = pk._replace(query_h=pk.query_h.filter(drop_key(8)))
        primary = simple_circuit["primary"]
        full_assignment = parallelize_assignment(local_config, primary + simple_circuit["auxiliary"])
        with pytest.raises(ConfigurationError, match="query_h"):
            check_proving_key(broken, full_assignment, local_config)

    def test_unsatisfied_in_debug(self, simple_circuit, simple_crs, curve, local_config):
        primary = simple_circuit["primary"]
        full_assignment = parallelize_assignment(local_config, primary + simple_circuit["invalid_auxiliary"])
        with pytest.raises(UnsatisfiedAssignmentError):
            prove(simple_crs.proving_key, primary, full_assignment, curve, local_config)

    def test_records_runtime(self, simple_circuit, simple_crs, curve):
        """runtime_flag가 켜져 있으면 증명 시간이 runtimes에 남는다."""
        config = Configuration(num_partitions=2, runtime_flag=True, seed=9)
        primary = simple_circuit["primary"]
        full_assignment = parallelize_assignment(config, primary + simple_circuit["auxiliary"])
        proof = prove(simple_crs.proving_key, primary, full_assignment, curve, config)
        assert "Proof" in config.runtimes
        assert verify(simple_crs.verification_key, primary, proof, curve)


class TestVerify:

    def test_valid_proof(self, simple_circuit, simple_crs, simple_proof, curve):
        assert verify(simple_crs.verification_key, simple_circuit["primary"], simple_proof, curve)

    def test_wrong_primary(self, simple_crs, simple_proof, curve):
        primary = [curve.fr(1), curve.fr(13)]
        assert not verify(simple_crs.verification_key, primary, simple_proof, curve)

    def test_primary_size_mismatch(self, simple_crs, simple_proof, curve):
        assert not verify(simple_crs.verification_key, [curve.fr(1)], simple_proof, curve)

    def test_random_proof(self, simple_circuit, simple_crs, curve):
        rng = random.Random(1357)
        fake = Proof(curve.random_g1(rng), curve.random_g2(rng), curve.random_g1(rng))
        assert not verify(simple_crs.verification_key, simple_circuit["primary"], fake, curve)

    def test_off_curve_proof(self, simple_circuit, simple_crs, simple_proof, curve):
        fake = simple_proof._replace(g_a=(curve.fq(1), curve.fq(1), curve.fq(1)))
        assert not verify(simple_crs.verification_key, simple_circuit["primary"], fake, curve)

    def test_fresh_randomness_still_verifies(self, simple_circuit, simple_crs, simple_proof, curve, local_config):
        """r, s가 달라도 검증은 통과하고 증명은 달라진다."""
        primary = simple_circuit["primary"]
        full_assignment = parallelize_assignment(local_config, primary + simple_circuit["auxiliary"])
        other = prove(simple_crs.proving_key, primary, full_assignment, curve, local_config, random.Random(4565))
        assert not curve.eq(other.g_a, simple_proof.g_a)
        assert verify(simple_crs.verification_key, primary, other, curve)

    def test_unsatisfied_without_debug(self, simple_circuit, simple_crs, curve):
        """디버그 검사 없이 만든 잘못된 증명은 검증에서 거부된다."""
        config = Configuration(
            num_partitions=4,
            storage_level=StorageLevel.MEMORY_ONLY,
            debug_flag=False,
            context=LocalContext(default_parallelism=4),
        )
        primary = simple_circuit["primary"]
        full_assignment = parallelize_assignment(config, primary + simple_circuit["invalid_auxiliary"])
        proof = prove(simple_crs.proving_key, primary, full_assignment, curve, config, random.Random(1))
        assert not verify(simple_crs.verification_key, primary, proof, curve)


class TestEndToEnd:

    def test_parallel_context(self, simple_circuit, curve, parallel_config):
        crs = generate(simple_circuit["r1cs"].to_rdd(parallel_config), curve, parallel_config, random.Random(2971))
        primary = simple_circuit["primary"]
        full_assignment = parallelize_assignment(parallel_config, primary + simple_circuit["auxiliary"])
        proof = prove(crs.proving_key, primary, full_assignment, curve, parallel_config, random.Random(3721))
        assert verify(crs.verification_key, primary, proof, curve)

    def test_random_circuit(self, random_circuit, curve, local_config):
        crs = generate(random_circuit["r1cs"].to_rdd(local_config), curve, local_config, random.Random(5))
        primary = random_circuit["primary"]
        full_assignment = parallelize_assignment(local_config, primary + random_circuit["auxiliary"])
        proof = prove(crs.proving_key, primary, full_assignment, curve, local_config, random.Random(6))
        assert verify(crs.verification_key, primary, proof, curve)
