"""
분산 FFT (Four-step)
====================

크기 n = rows × cols 인 평가 도메인 위의 FFT를 2차원 격자로 분해해
파티션 단위 작업(re-key + group + 지역 FFT)만으로 계산한다.

**인덱스 배치**:
  입력 인덱스  i = row + rows · col   (row < rows, col < cols)
  출력 인덱스  k = k2 + cols · k1     (k2 < cols, k1 < rows)

**단계**:
  1. row 별로 묶어 길이 cols의 FFT (단위근 ω^rows)
  2. 회전 인자(twiddle) ω^(row · k2) 곱하기
  3. k2 를 키로 재배치 (전치)
  4. k2 별로 묶어 길이 rows의 FFT (단위근 ω^cols)
  5. 출력 인덱스 k2 + cols · k1 로 다시 키를 붙인다 (전치 복원)

입력에 없는 인덱스는 0으로 취급하고, 출력은 항상 n개의 (인덱스, 값) 쌍이다.

사용 예시:
    >>> values = ctx.parallelize([(i, BN254Fr(i)) for i in range(8)], 4)
    >>> evals = radix2_fft(values, 8, BN254Fr, config)
    >>> coeffs = radix2_inverse_fft(evals, 8, BN254Fr, config)
"""

import functools
import math
import operator

from dizk.algebra.field import batch_inverse, check_domain_size, next_power_of_two, root_of_unity
from dizk.fft import serial_fft


def grid_dimensions(n):
    """rows = (√n 이상의 가장 작은 2의 거듭제곱), cols = n / rows."""
    rows = next_power_of_two(math.isqrt(n))
    return rows, n // rows


def compute_z(t, n):
    return serial_fft.compute_z(t, n)


# ─────────────────────────────────────────────────────────────────────
# 파티션 작업 함수
# ─────────────────────────────────────────────────────────────────────

def _to_grid(rows, record):
    index, value = record
    return (index % rows, (index // rows, value))


def _column_placeholder(k2):
    return (k2, None)


def _row_fft(cols, omega_rows, omega, zero, record):
    row, entries = record
    dense = [zero] * cols
    for col, value in entries:
        dense[col] = value
    out = []
    twiddle = omega ** row
    factor = omega.one()
    for k2, y in enumerate(serial_fft.fft(dense, omega_rows)):
        out.append((k2, (row, y * factor)))
        factor = factor * twiddle
    return out


def _column_fft(rows, cols, omega_cols, zero, record):
    k2, entries = record
    dense = [zero] * rows
    for entry in entries:
        if entry is not None:
            row, value = entry
            dense[row] = value
    return [(k2 + cols * k1, x) for k1, x in enumerate(serial_fft.fft(dense, omega_cols))]


def _shift_by_power(g, record):
    index, value = record
    return (index, value * g ** index)


def _lagrange_partition(t, omega, z, n, records):
    indices = list(records)
    if not indices:
        return []
    field = type(t)
    powers = [omega ** indices[0]]
    for _ in indices[1:]:
        powers.append(powers[-1] * omega)

    if z == 0:
        return [(i, field.one() if w == t else field.zero()) for i, w in zip(indices, powers)]

    l = z / n
    inverses = batch_inverse([t - w for w in powers])
    return [(i, l * w * inv) for i, w, inv in zip(indices, powers, inverses)]


# ─────────────────────────────────────────────────────────────────────
# 공개 연산
# ─────────────────────────────────────────────────────────────────────

def _four_step(values, n, omega, zero, config):
    rows, cols = grid_dimensions(n)
    num_partitions = config.num_partitions

    row_results = (
        values
        .map_to_pair(functools.partial(_to_grid, rows))
        .group_by_key(num_partitions)
        .flat_map(functools.partial(_row_fft, cols, omega ** rows, omega, zero))
    )
    placeholders = config.context.range(cols, num_partitions).map(_column_placeholder)
    return (
        row_results
        .union(placeholders)
        .group_by_key(num_partitions)
        .flat_map(functools.partial(_column_fft, rows, cols, omega ** cols, zero))
    )


def radix2_fft(values, n, field, config):
    """계수 (i, c_i) → 평가값 (k, p(ω^k))."""
    check_domain_size(field, n)
    return _four_step(values, n, root_of_unity(field, n), field.zero(), config)


def radix2_inverse_fft(values, n, field, config):
    """평가값 (k, p(ω^k)) → 계수 (i, c_i). ω^(-1)로 FFT 후 1/n을 곱한다."""
    check_domain_size(field, n)
    omega_inv = field.one() / root_of_unity(field, n)
    n_inv = field.one() / n
    return (
        _four_step(values, n, omega_inv, field.zero(), config)
        .map_values(functools.partial(operator.mul, n_inv))
    )


def radix2_coset_fft(values, g, n, config):
    """계수 → 코셋 g·S 위의 평가값. c_i에 g^i를 먼저 곱한다."""
    shifted = values.map(functools.partial(_shift_by_power, g))
    return radix2_fft(shifted, n, type(g), config)


def radix2_coset_inverse_fft(values, g, n, config):
    """코셋 g·S 위의 평가값 → 계수. 역변환 후 c_i에 g^(-i)를 곱한다."""
    g_inv = g.one() / g
    return (
        radix2_inverse_fft(values, n, type(g), config)
        .map(functools.partial(_shift_by_power, g_inv))
    )


def divide_by_z_on_coset(g, values, n):
    """코셋 g·S 위에서 Z(g·ω^i) = g^n - 1 은 상수이므로 그 역원을 곱한다."""
    z_inv = g.one() / compute_z(g, n)
    return values.map_values(functools.partial(operator.mul, z_inv))


def lagrange_coeffs(t, n, config):
    """모든 i ∈ [0, n)에 대한 (i, L_i(t)) 데이터셋.

    파티션마다 연속 구간의 ω^i를 점진적으로 계산하고 일괄 역원을 쓴다.
    t가 도메인 점이면 일치하는 인덱스만 1, 나머지는 0이다.
    """
    field = type(t)
    check_domain_size(field, n)
    omega = root_of_unity(field, n)
    z = compute_z(t, n)
    return (
        config.context.range(n, config.num_partitions)
        .map_partitions(functools.partial(_lagrange_partition, t, omega, z, n))
    )
