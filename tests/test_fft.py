"""
FFT tests: serial_fft.py, distributed_fft.py
"""
import random

import pytest

from dizk.algebra.field import BN254Fr, multiplicative_generator, root_of_unity
from dizk.errors import DomainSizeError
from dizk.fft import distributed_fft, serial_fft


def random_values(n, seed=1):
    rng = random.Random(seed)
    return [BN254Fr(rng.randrange(BN254Fr.field_modulus)) for _ in range(n)]


def naive_eval(coeffs, x):
    acc = BN254Fr(0)
    for c in reversed(coeffs):
        acc = acc * x + c
    return acc


def as_dense(dataset, n):
    values = dataset.collect_as_map()
    assert sorted(values) == list(range(n))
    return [values[i] for i in range(n)]


# =====================================================================
# Serial
# =====================================================================

class TestSerialFFT:

    def test_matches_naive_evaluation(self):
        coeffs = random_values(8)
        omega = root_of_unity(BN254Fr, 8)
        evals = serial_fft.fft(coeffs, omega)
        for i in range(8):
            assert evals[i] == naive_eval(coeffs, omega ** i)

    @pytest.mark.parametrize("n", [1, 2, 16])
    def test_round_trip(self, n):
        coeffs = random_values(n)
        omega = root_of_unity(BN254Fr, n)
        assert serial_fft.ifft(serial_fft.fft(coeffs, omega), omega) == coeffs

    def test_coset_round_trip(self):
        coeffs = random_values(8)
        omega = root_of_unity(BN254Fr, 8)
        g = BN254Fr(987654321)
        evals = serial_fft.coset_fft(coeffs, omega, g)
        assert evals[3] == naive_eval(coeffs, g * omega ** 3)
        assert serial_fft.coset_ifft(evals, omega, g) == coeffs


class TestVanishingPolynomial:
    """Z(t) = 0 ⇔ t^n = 1"""

    def test_zero_on_domain(self):
        omega = root_of_unity(BN254Fr, 16)
        for i in range(16):
            assert serial_fft.compute_z(omega ** i, 16) == 0
            assert distributed_fft.compute_z(omega ** i, 16) == 0

    def test_nonzero_off_domain(self):
        t = BN254Fr(123456789)
        assert t ** 16 != BN254Fr(1)
        assert serial_fft.compute_z(t, 16) == t ** 16 - 1
        assert serial_fft.compute_z(t, 16) != 0

    def test_root_of_smaller_domain(self):
        """ω_8는 16차 소거 다항식의 근이기도 하다."""
        omega_8 = root_of_unity(BN254Fr, 8)
        assert serial_fft.compute_z(omega_8, 16) == 0
        assert serial_fft.compute_z(root_of_unity(BN254Fr, 32), 16) != 0


class TestSerialLagrange:

    def test_kronecker_on_domain(self):
        n = 8
        omega = root_of_unity(BN254Fr, n)
        for j in range(n):
            coeffs = serial_fft.lagrange_coefficients(omega ** j, n)
            assert coeffs == [BN254Fr(1) if i == j else BN254Fr(0) for i in range(n)]

    def test_partition_of_unity(self):
        """Σ L_i(t) = 1"""
        coeffs = serial_fft.lagrange_coefficients(BN254Fr(4242), 16)
        assert sum(coeffs, BN254Fr(0)) == BN254Fr(1)

    def test_interpolates(self):
        """p(t) = Σ p(ω^i) L_i(t)"""
        n = 8
        poly = random_values(n, seed=9)
        omega = root_of_unity(BN254Fr, n)
        t = BN254Fr(31337)
        evals = serial_fft.fft(poly, omega)
        coeffs = serial_fft.lagrange_coefficients(t, n)
        assert sum((e * c for e, c in zip(evals, coeffs)), BN254Fr(0)) == naive_eval(poly, t)

    def test_subsequence(self):
        t = BN254Fr(777)
        full = serial_fft.lagrange_coefficients(t, 16)
        subset = serial_fft.subsequence_radix2_lagrange_coefficients(t, 16, [0, 5, 15])
        assert subset == {0: full[0], 5: full[5], 15: full[15]}


# =====================================================================
# Distributed
# =====================================================================

class TestGrid:

    def test_dimensions(self):
        assert distributed_fft.grid_dimensions(1) == (1, 1)
        assert distributed_fft.grid_dimensions(2) == (1, 2)
        assert distributed_fft.grid_dimensions(16) == (4, 4)
        assert distributed_fft.grid_dimensions(32) == (8, 4)


class TestDistributedFFT:

    @pytest.mark.parametrize("n", [2, 8, 32])
    def test_matches_serial(self, n, config):
        coeffs = random_values(n, seed=n)
        values = config.context.parallelize(list(enumerate(coeffs)), config.num_partitions)
        evals = distributed_fft.radix2_fft(values, n, BN254Fr, config)
        assert as_dense(evals, n) == serial_fft.fft(coeffs, root_of_unity(BN254Fr, n))

    @pytest.mark.parametrize("n", [4, 16])
    def test_round_trip(self, n, config):
        coeffs = random_values(n, seed=n + 1)
        values = config.context.parallelize(list(enumerate(coeffs)), config.num_partitions)
        evals = distributed_fft.radix2_fft(values, n, BN254Fr, config)
        back = distributed_fft.radix2_inverse_fft(evals, n, BN254Fr, config)
        assert as_dense(back, n) == coeffs

    def test_coset_round_trip(self, config):
        n = 8
        coeffs = random_values(n, seed=5)
        g = multiplicative_generator(BN254Fr)
        values = config.context.parallelize(list(enumerate(coeffs)), config.num_partitions)
        evals = distributed_fft.radix2_coset_fft(values, g, n, config)
        assert as_dense(evals, n) == serial_fft.coset_fft(coeffs, root_of_unity(BN254Fr, n), g)
        back = distributed_fft.radix2_coset_inverse_fft(evals, g, n, config)
        assert as_dense(back, n) == coeffs

    def test_coset_round_trip_arbitrary_shift(self, local_config):
        n = 16
        coeffs = random_values(n, seed=6)
        g = BN254Fr(random.Random(2).randrange(1, BN254Fr.field_modulus))
        values = local_config.context.parallelize(list(enumerate(coeffs)), 4)
        evals = distributed_fft.radix2_coset_fft(values, g, n, local_config)
        back = distributed_fft.radix2_coset_inverse_fft(evals, g, n, local_config)
        assert as_dense(back, n) == coeffs

    def test_sparse_input_is_zero_padded(self, config):
        n = 16
        sparse = [(3, BN254Fr(7)), (10, BN254Fr(2))]
        dense = [BN254Fr(0)] * n
        dense[3], dense[10] = BN254Fr(7), BN254Fr(2)
        values = config.context.parallelize(sparse, config.num_partitions)
        evals = distributed_fft.radix2_fft(values, n, BN254Fr, config)
        assert as_dense(evals, n) == serial_fft.fft(dense, root_of_unity(BN254Fr, n))

    def test_empty_input(self, local_config):
        values = local_config.context.parallelize([], 2)
        evals = distributed_fft.radix2_inverse_fft(values, 8, BN254Fr, local_config)
        assert as_dense(evals, 8) == [BN254Fr(0)] * 8

    def test_divide_by_z_on_coset(self, local_config):
        g = multiplicative_generator(BN254Fr)
        values = local_config.context.parallelize([(0, BN254Fr(10)), (1, BN254Fr(20))], 2)
        z = serial_fft.compute_z(g, 8)
        result = distributed_fft.divide_by_z_on_coset(g, values, 8).collect_as_map()
        assert result[0] * z == BN254Fr(10)
        assert result[1] * z == BN254Fr(20)

    def test_rejects_bad_domain(self, local_config):
        values = local_config.context.parallelize([(0, BN254Fr(1))], 1)
        with pytest.raises(DomainSizeError):
            distributed_fft.radix2_fft(values, 6, BN254Fr, local_config)
        with pytest.raises(DomainSizeError):
            distributed_fft.lagrange_coeffs(BN254Fr(3), 12, local_config)


class TestDistributedLagrange:

    def test_matches_serial(self, config):
        t = BN254Fr(98765)
        result = distributed_fft.lagrange_coeffs(t, 16, config)
        assert as_dense(result, 16) == serial_fft.lagrange_coefficients(t, 16)

    def test_kronecker_on_domain(self, config):
        """L_i(ω^j) = δ_ij"""
        n = 8
        omega = root_of_unity(BN254Fr, n)
        for j in (0, 3, 7):
            result = as_dense(distributed_fft.lagrange_coeffs(omega ** j, n, config), n)
            assert result == [BN254Fr(1) if i == j else BN254Fr(0) for i in range(n)]
