"""
다중 스칼라 곱(Multi-Scalar Multiplication)
===========================================

Σ s_i · P_i 를 계산한다. 증명 생성 비용의 대부분이 여기서 나온다.

분산 버전은 파티션마다 부분합을 만든 뒤 그룹 덧셈으로 합친다.
그룹 덧셈은 교환/결합 법칙을 만족하므로 파티션 순서와 무관하게 같은 점이 나온다.

사용 예시:
    >>> pairs = ctx.parallelize([(curve.fr(2), curve.g1), (curve.fr(3), curve.g1)], 2)
    >>> curve.eq(distributed_msm(pairs, curve), curve.mul(curve.g1, 5))  # True
"""

import functools


def serial_msm(curve, pairs, zero=None):
    """(scalar, base) 쌍들의 Σ scalar · base."""
    acc = curve.g1_zero if zero is None else zero
    for scalar, base in pairs:
        if scalar == 0:
            continue
        if scalar == 1:
            acc = curve.add(acc, base)
        else:
            acc = curve.add(acc, curve.mul(base, scalar))
    return acc


def serial_double_msm(curve, pairs):
    """(scalar, (P1, P2)) 쌍들에 대해 (Σ s·P1, Σ s·P2)를 함께 계산한다."""
    acc1, acc2 = curve.g1_zero, curve.g2_zero
    for scalar, (base1, base2) in pairs:
        if scalar == 0:
            continue
        acc1 = curve.add(acc1, curve.mul(base1, scalar))
        acc2 = curve.add(acc2, curve.mul(base2, scalar))
    return acc1, acc2


def _partition_msm(curve, zero, records):
    return [serial_msm(curve, records, zero)]


def _partition_double_msm(curve, records):
    return [serial_double_msm(curve, records)]


def _add_pairs(curve, a, b):
    return curve.add(a[0], b[0]), curve.add(a[1], b[1])


def distributed_msm(dataset, curve, zero=None):
    """(scalar, base) 레코드 데이터셋의 MSM. zero 기본값은 G1 항등원."""
    zero = curve.g1_zero if zero is None else zero
    return (
        dataset
        .map_partitions(functools.partial(_partition_msm, curve, zero))
        .fold(zero, curve.add)
    )


def distributed_double_msm(dataset, curve):
    """(scalar, (G1, G2)) 레코드 데이터셋의 MSM. 결과는 (G1 합, G2 합)."""
    return (
        dataset
        .map_partitions(functools.partial(_partition_double_msm, curve))
        .fold((curve.g1_zero, curve.g2_zero), functools.partial(_add_pairs, curve))
    )
