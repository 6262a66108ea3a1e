"""
스칼라 필드(Scalar Field) FR
============================

증명 시스템 전체에서 사용하는 스칼라 필드 원소를 정의한다.

**필드 클래스**:
  py_ecc의 FQ를 상속하고 field_modulus를 곡선 위수(curve order)로 바꾼다.
  - BN254Fr: bn254 (py_ecc의 bn128) 스칼라 필드, r - 1 = 2^28 × (홀수)
  - BLS12_381Fr: bls12-381 스칼라 필드, r - 1 = 2^32 × (홀수)

**단위근(Roots of Unity)**:
  크기 n (2의 거듭제곱)의 곱셈 부분군 S = {1, ω, ..., ω^(n-1)}이
  FFT와 QAP 보간의 평가 도메인이 된다. n이 r - 1을 나누어야 하므로
  n ≤ 2^two_adicity 이어야 한다.

사용 예시:
    >>> from dizk.algebra.field import BN254Fr, root_of_unity
    >>> omega = root_of_unity(BN254Fr, 8)
    >>> omega ** 8 == BN254Fr(1)  # True
"""

from py_ecc.fields import bn128_FQ, bls12_381_FQ
from py_ecc import optimized_bn128, optimized_bls12_381

from dizk.errors import DomainSizeError


class BN254Fr(bn128_FQ):
    field_modulus = optimized_bn128.curve_order
    GENERATOR = 5
    TWO_ADICITY = 28


class BLS12_381Fr(bls12_381_FQ):
    field_modulus = optimized_bls12_381.curve_order
    GENERATOR = 7
    TWO_ADICITY = 32


def multiplicative_generator(field):
    """FR*의 생성자 g. 코셋 g·S는 도메인 S와 서로소이다."""
    return field(field.GENERATOR)


def is_power_of_two(n):
    return n >= 1 and (n & (n - 1)) == 0


def next_power_of_two(n):
    """n 이상의 가장 작은 2의 거듭제곱을 반환한다.

    예시:
        >>> next_power_of_two(5)  # 8
        >>> next_power_of_two(8)  # 8
    """
    if n <= 1:
        return 1
    p = 1
    while p < n:
        p <<= 1
    return p


def check_domain_size(field, n):
    """도메인 크기 n이 유효한지 확인한다.

    Raises:
        DomainSizeError: n이 2의 거듭제곱이 아니거나 2^TWO_ADICITY를 초과할 때
    """
    if not is_power_of_two(n):
        raise DomainSizeError(f"domain size must be a power of two: {n}")
    if n > (1 << field.TWO_ADICITY):
        raise DomainSizeError(
            f"domain size {n} exceeds 2^{field.TWO_ADICITY} for {field.__name__}"
        )


def root_of_unity(field, n):
    """n차 원시 단위근 ω = g^((r-1)/n) 을 반환한다.

    Args:
        field: 필드 클래스 (BN254Fr, BLS12_381Fr)
        n: 도메인 크기 (2의 거듭제곱)

    Returns:
        FR: ω^n = 1, ω^k ≠ 1 (0 < k < n)
    """
    check_domain_size(field, n)
    if n == 1:
        return field(1)
    return multiplicative_generator(field) ** ((field.field_modulus - 1) // n)


def random_element(field, rng):
    """주입된 난수원 rng에서 필드 원소를 뽑는다."""
    return field(rng.randrange(field.field_modulus))


def random_nonzero_element(field, rng):
    return field(rng.randrange(1, field.field_modulus))


def batch_inverse(values):
    """Montgomery 일괄 역원: n번의 역원을 3(n-1)번의 곱셈 + 1번의 역원으로 계산한다.

    모든 원소는 0이 아니어야 한다.
    """
    if not values:
        return []
    prefix = [values[0]]
    for v in values[1:]:
        prefix.append(prefix[-1] * v)
    inv = prefix[-1].one() / prefix[-1]
    result = [None] * len(values)
    for i in range(len(values) - 1, 0, -1):
        result[i] = inv * prefix[i - 1]
        inv = inv * values[i]
    result[0] = inv
    return result
