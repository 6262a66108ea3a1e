"""
단일 프로세스 FFT 및 Lagrange 보간 도구
=======================================

평가 도메인 S = {1, ω, ω², ..., ω^(n-1)} (n은 2의 거듭제곱) 위에서
계수 ↔ 평가값 변환을 수행한다. 분산 FFT(distributed_fft)의 정답 비교용
오라클이자, 행/열 단위 부분 FFT의 구현체로 쓰인다.

**변환**:
  - fft:        계수 → S 위의 평가값
  - ifft:       S 위의 평가값 → 계수
  - coset_fft:  계수 → g·S 위의 평가값
  - coset_ifft: g·S 위의 평가값 → 계수

**소거 다항식**:
  Z(X) = X^n - 1, S의 모든 점에서 0이다.

**Lagrange 기저**:
  L_i(X) = (ω^i / n) · Z(X) / (X - ω^i)
  L_i(ω^j) = 1 (i = j), 0 (i ≠ j)

사용 예시:
    >>> omega = root_of_unity(BN254Fr, 4)
    >>> coeffs = [BN254Fr(c) for c in (1, 2, 3, 4)]
    >>> ifft(fft(coeffs, omega), omega) == coeffs  # True
"""

from dizk.algebra.field import batch_inverse, root_of_unity


def fft(coeffs, omega):
    """Fast Fourier Transform: 계수 → 평가값.

    재귀적 Cooley-Tukey radix-2 알고리즘.

    Args:
        coeffs: 필드 원소 리스트 (길이는 2의 거듭제곱)
        omega: len(coeffs)차 원시 단위근

    Returns:
        list: [p(1), p(ω), ..., p(ω^(n-1))]
    """
    n = len(coeffs)
    if n == 1:
        return [coeffs[0]]

    # 짝수/홀수 분리
    even_vals = fft(coeffs[0::2], omega * omega)
    odd_vals = fft(coeffs[1::2], omega * omega)

    # 버터플라이 결합
    result = [None] * n
    omega_k = omega.one()
    half = n // 2
    for k in range(half):
        t = omega_k * odd_vals[k]
        result[k] = even_vals[k] + t
        result[k + half] = even_vals[k] - t
        omega_k = omega_k * omega
    return result


def ifft(evals, omega):
    """Inverse FFT: 평가값 → 계수. ω 대신 ω^(-1)로 FFT 후 1/n을 곱한다."""
    n = len(evals)
    omega_inv = omega.one() / omega
    n_inv = omega.one() / n
    return [v * n_inv for v in fft(evals, omega_inv)]


def coset_fft(coeffs, omega, g):
    """코셋 FFT: p(g·ω^i)를 계산한다. 계수 c_i에 g^i를 곱한 뒤 FFT."""
    shifted = []
    g_i = g.one()
    for c in coeffs:
        shifted.append(c * g_i)
        g_i = g_i * g
    return fft(shifted, omega)


def coset_ifft(evals, omega, g):
    """코셋 IFFT: g·S 위의 평가값에서 계수를 복원한다. IFFT 후 c_i에 g^(-i)를 곱한다."""
    coeffs = ifft(evals, omega)
    g_inv = g.one() / g
    g_i = g.one()
    out = []
    for c in coeffs:
        out.append(c * g_i)
        g_i = g_i * g_inv
    return out


def compute_z(t, n):
    """소거 다항식 Z(t) = t^n - 1. 거듭제곱은 제곱-곱셈으로 O(log n)번의 곱셈."""
    return t ** n - t.one()


def lagrange_coefficients(t, n):
    """모든 i ∈ [0, n)에 대해 L_i(t)를 리스트로 반환한다.

    t가 도메인 점 ω^k이면 Z(t) = 0이므로 나눗셈 공식 대신
    L_k(t) = 1, 나머지는 0을 반환한다.
    """
    field = type(t)
    omega = root_of_unity(field, n)
    z = compute_z(t, n)

    powers = [field.one()]
    for _ in range(n - 1):
        powers.append(powers[-1] * omega)

    if z == 0:
        return [field.one() if w == t else field.zero() for w in powers]

    l = z / n
    inverses = batch_inverse([t - w for w in powers])
    return [l * w * inv for w, inv in zip(powers, inverses)]


def subsequence_radix2_lagrange_coefficients(t, n, indices):
    """지정된 인덱스들에 대해서만 L_i(t)를 계산해 {i: L_i(t)}로 반환한다."""
    field = type(t)
    omega = root_of_unity(field, n)
    z = compute_z(t, n)
    indices = list(indices)
    if any(not 0 <= i < n for i in indices):
        raise ValueError(f"Lagrange indices must lie in [0, {n})")
    points = {i: omega ** i for i in indices}

    if z == 0:
        return {i: field.one() if points[i] == t else field.zero() for i in indices}

    l = z / n
    inverses = batch_inverse([t - points[i] for i in indices])
    return {i: l * points[i] * inv for i, inv in zip(indices, inverses)}
