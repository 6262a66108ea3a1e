"""
R1CS → QAP 변환 (분산)
======================

**인스턴스 변환 reduce_instance(r1cs, t)**:
  At = (A_0(t), ..., A_m(t)), Bt, Ct 도 같다 (m = 변수 수)
  Ht = (1, t, t², ..., t^n)
  Zt = Z(t) = t^n - 1
  n = (제약식 수 + 공개 입력 수) 이상의 가장 작은 2의 거듭제곱

  공개 입력 j마다 가상의 제약식 input_j * 0 = 0 을 행 numConstraints + j에 추가해
  입력 일관성을 강제한다 (At에만 L_{numConstraints + j}(t)가 더해진다).

**증인 변환 reduce_witness(r1cs, primary, full_assignment)**:
  H(z) = (A(z)B(z) - C(z)) / Z(z) 의 계수 h_0, ..., h_n 을 구한다.
    1. 도메인 S 위에서 A, B, C 평가값 계산
    2. 역 FFT로 계수 복원
    3. 코셋 T = g·S 위에서 다시 평가
    4. T 위에서 (A·B - C) / Z 계산
    5. 코셋 역 FFT로 H의 계수 복원, 인덱스 n에 0을 덧붙인다

사용 예시:
    >>> qap = reduce_instance(r1cs_rdd, t, config)
    >>> witness = reduce_witness(r1cs_rdd, primary, full_assignment, BN254Fr, config)
"""

import functools
import logging
import operator

from dizk.algebra.field import check_domain_size, multiplicative_generator, next_power_of_two
from dizk.errors import ConfigurationError, UnsatisfiedAssignmentError
from dizk.fft import distributed_fft
from dizk.fft.serial_fft import subsequence_radix2_lagrange_coefficients
from dizk.relations.qap import QAPRelationRDD, QAPWitnessRDD
from dizk.relations.r1cs import term_by_variable, weighted_by_constraint

logger = logging.getLogger(__name__)


def domain_size(r1cs):
    return next_power_of_two(r1cs.num_constraints() + r1cs.num_primary)


def _check_relation(r1cs):
    if r1cs.num_constraints() < 1:
        raise ConfigurationError("R1CS relation has no constraints")


# ─────────────────────────────────────────────────────────────────────
# 파티션 작업 함수
# ─────────────────────────────────────────────────────────────────────

def _in_row(row, record):
    return record[0] == row


def _not_in_row(row, record):
    return record[0] != row


def _scaled_term(coeff, term):
    return (term.index, term.value * coeff)


def _weighted_by_lagrange(record):
    _, (term, coeff) = record
    return (term.index, term.value * coeff)


def _power_at_key(t, record):
    return (record[0], t ** record[0])


def _is_constant_term(record):
    return record[1].index == 0


def _is_variable_term(record):
    return record[1].index != 0


def _term_value(term):
    return term.value


def _a_times_b_minus_c(value):
    (a, b), c = value
    return a * b - c


# ─────────────────────────────────────────────────────────────────────
# 인스턴스 변환
# ─────────────────────────────────────────────────────────────────────

def _evaluate_at_t(matrix, lagrange_coeffs, popular_row, popular_coeff, num_partitions):
    popular = (
        matrix
        .filter(functools.partial(_in_row, popular_row))
        .values()
        .map_to_pair(functools.partial(_scaled_term, popular_coeff))
        .reduce_by_key(operator.add)
    )
    ordinary = (
        matrix
        .filter(functools.partial(_not_in_row, popular_row))
        .join(lagrange_coeffs, num_partitions)
        .map_to_pair(_weighted_by_lagrange)
    )
    return ordinary.union(popular)


def reduce_instance(r1cs, t, config):
    _check_relation(r1cs)
    num_primary = r1cs.num_primary
    num_constraints = r1cs.num_constraints()
    n = domain_size(r1cs)
    num_partitions = config.num_partitions
    check_domain_size(type(t), n)
    logger.info("instance reduction: %d constraints, %d primary, domain %d", num_constraints, num_primary, n)

    config.begin_log("Compute Lagrange coefficients")
    lagrange_coeffs = distributed_fft.lagrange_coeffs(t, n, config).persist(config.storage_level)
    config.end_log("Compute Lagrange coefficients")

    # input_j * 0 = 0 → (j, L_{numConstraints + j}(t))
    soundness_rows = range(num_constraints, num_constraints + num_primary)
    soundness_coeffs = subsequence_radix2_lagrange_coefficients(t, n, soundness_rows)
    at_coeffs = config.context.parallelize(
        [(row - num_constraints, soundness_coeffs[row]) for row in soundness_rows],
        num_partitions,
    )

    # TODO: take the popular rows from the relation instead of assuming only the last one
    popular_row = num_constraints - 1
    popular_coeff = subsequence_radix2_lagrange_coefficients(t, n, [popular_row])[popular_row]

    config.begin_log("Evaluate A(t), B(t), C(t)")
    matrices = r1cs.constraints
    At = (
        _evaluate_at_t(matrices.a, lagrange_coeffs, popular_row, popular_coeff, num_partitions)
        .union(at_coeffs)
        .reduce_by_key(operator.add, num_partitions)
        .persist(config.storage_level)
    )
    Bt = (
        _evaluate_at_t(matrices.b, lagrange_coeffs, popular_row, popular_coeff, num_partitions)
        .reduce_by_key(operator.add, num_partitions)
        .persist(config.storage_level)
    )
    Ct = (
        _evaluate_at_t(matrices.c, lagrange_coeffs, popular_row, popular_coeff, num_partitions)
        .reduce_by_key(operator.add, num_partitions)
        .persist(config.storage_level)
    )
    config.end_log("Evaluate A(t), B(t), C(t)")

    Ht = (
        config.context.fill(n + 1, type(t).zero(), num_partitions)
        .map_to_pair(functools.partial(_power_at_key, t))
    )
    Zt = distributed_fft.compute_z(t, n)

    return QAPRelationRDD(At, Bt, Ct, Ht, Zt, t, num_primary, r1cs.num_variables(), n)


# ─────────────────────────────────────────────────────────────────────
# 증인 변환
# ─────────────────────────────────────────────────────────────────────

def _evaluate_on_domain(matrix, full_assignment, num_partitions, extra=None):
    constant = (
        matrix
        .filter(_is_constant_term)
        .map_values(_term_value)
        .reduce_by_key(operator.add)
    )
    evaluations = (
        matrix
        .filter(_is_variable_term)
        .map_to_pair(term_by_variable)
        .join(full_assignment, num_partitions)
        .map_to_pair(weighted_by_constraint)
    )
    if extra is not None:
        evaluations = evaluations.union(extra)
    return evaluations.union(constant).reduce_by_key(operator.add)


def reduce_witness(r1cs, primary, full_assignment, field, config):
    _check_relation(r1cs)
    if config.debug_flag and not r1cs.is_satisfied(primary, full_assignment):
        raise UnsatisfiedAssignmentError("assignment does not satisfy the R1CS relation")

    g = multiplicative_generator(field)
    n = domain_size(r1cs)
    num_partitions = config.num_partitions
    num_constraints = r1cs.num_constraints()
    check_domain_size(field, n)
    logger.info("witness reduction: domain %d, coset generator %s", n, g)

    config.begin_log("Account for the additional constraints input_i * 0 = 0")
    additional_a = config.context.parallelize(
        [(num_constraints + i, primary[i]) for i in range(r1cs.num_primary)],
        num_partitions,
    )
    config.end_log("Account for the additional constraints input_i * 0 = 0")

    config.begin_log("Evaluate A, B, C on S")
    matrices = r1cs.constraints
    A = _evaluate_on_domain(matrices.a, full_assignment, num_partitions, additional_a)
    B = _evaluate_on_domain(matrices.b, full_assignment, num_partitions)
    C = _evaluate_on_domain(matrices.c, full_assignment, num_partitions)
    config.end_log("Evaluate A, B, C on S")

    config.begin_log("Inverse FFT for the coefficients of A, B, C")
    A = distributed_fft.radix2_inverse_fft(A, n, field, config)
    B = distributed_fft.radix2_inverse_fft(B, n, field, config)
    C = distributed_fft.radix2_inverse_fft(C, n, field, config)
    config.end_log("Inverse FFT for the coefficients of A, B, C")

    config.begin_log("Evaluate A, B, C on T")
    A = distributed_fft.radix2_coset_fft(A, g, n, config)
    B = distributed_fft.radix2_coset_fft(B, g, n, config)
    C = distributed_fft.radix2_coset_fft(C, g, n, config)
    config.end_log("Evaluate A, B, C on T")

    config.begin_log("Compute A * B - C on T")
    coefficients_h = (
        A.join(B, num_partitions)
        .join(C, num_partitions)
        .map_values(_a_times_b_minus_c)
    )
    config.end_log("Compute A * B - C on T")

    config.begin_log("Divide by Z on T")
    coefficients_h = distributed_fft.divide_by_z_on_coset(g, coefficients_h, n)
    config.end_log("Divide by Z on T")

    config.begin_log("Compute coefficients of H")
    coefficients_h = (
        distributed_fft.radix2_coset_inverse_fft(coefficients_h, g, n, config)
        .union(config.context.parallelize([(n, field.zero())], 1))
        .persist(config.storage_level)
    )
    config.end_log("Compute coefficients of H")

    return QAPWitnessRDD(full_assignment, coefficients_h, r1cs.num_primary, r1cs.num_variables(), n)
