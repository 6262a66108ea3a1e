"""
타원곡선 그룹 G1, G2 및 페어링
==============================

py_ecc의 optimized 곡선 모듈(사영 좌표)을 하나의 Curve 객체로 묶는다.
Reduction, Setup, Prover, Verifier 코드는 곡선 종류와 무관하게
Curve가 제공하는 연산 집합 {add, mul, neg, eq, pairing, random}만 사용한다.

**지원 곡선**:
  - bn254a   → py_ecc.optimized_bn128
  - bls12-381 → py_ecc.optimized_bls12_381

사용 예시:
    >>> curve = get_curve("bn254a")
    >>> P = curve.mul(curve.g1, curve.fr(5))   # 5·G1
    >>> curve.eq(curve.add(P, curve.neg(P)), curve.g1_zero)  # True
"""

from py_ecc import optimized_bn128, optimized_bls12_381

from dizk.algebra.field import BN254Fr, BLS12_381Fr, random_nonzero_element
from dizk.errors import ConfigurationError


class Curve:
    """하나의 페어링 친화 곡선에 대한 연산 묶음.

    속성:
        name: 곡선 이름 ("bn254a", "bls12-381")
        fr: 스칼라 필드 클래스
        g1, g2: 그룹 생성자
        g1_zero, g2_zero: 항등원 (무한원점)
        fq_bytes, fr_bytes: 직렬화 시 좌표/스칼라 바이트 수
    """

    def __init__(self, name, backend, fr, fq_bytes, fr_bytes):
        self.name = name
        self.fr = fr
        self.fq = backend.FQ
        self.fq2 = backend.FQ2
        self.g1 = backend.G1
        self.g2 = backend.G2
        self.g1_zero = backend.Z1
        self.g2_zero = backend.Z2
        self.order = backend.curve_order
        self.fq_bytes = fq_bytes
        self.fr_bytes = fr_bytes
        self._backend = backend

    def __reduce__(self):
        # 워커 프로세스로 보낼 때는 이름만 보내고 레지스트리에서 다시 찾는다.
        return (get_curve, (self.name,))

    def __repr__(self):
        return f"Curve({self.name!r})"

    def add(self, p1, p2):
        return self._backend.add(p1, p2)

    def mul(self, point, scalar):
        """스칼라 곱 scalar · point. scalar는 정수 또는 FR."""
        return self._backend.multiply(point, int(scalar) % self.order)

    def neg(self, point):
        return self._backend.neg(point)

    def eq(self, p1, p2):
        return self._backend.eq(p1, p2)

    def is_zero(self, point):
        return self._backend.is_inf(point)

    def normalize(self, point):
        """사영 좌표 → 아핀 좌표 (x, y). 항등원에는 사용할 수 없다."""
        return self._backend.normalize(point)

    def is_on_curve_g1(self, point):
        return self._backend.is_on_curve(point, self._backend.b)

    def is_on_curve_g2(self, point):
        return self._backend.is_on_curve(point, self._backend.b2)

    def is_in_subgroup(self, point):
        """order · point = 0. 곡선 위에 있어도 여인수(cofactor) 쪽 점은 거부한다."""
        return self.is_zero(self._backend.multiply(point, self.order))

    def pairing(self, g2_point, g1_point):
        """e(G1, G2) → GT. 인자 순서는 py_ecc와 같이 (G2, G1)이다."""
        return self._backend.pairing(g2_point, g1_point)

    def random_fr(self, rng):
        return random_nonzero_element(self.fr, rng)

    def random_g1(self, rng):
        return self.mul(self.g1, self.random_fr(rng))

    def random_g2(self, rng):
        return self.mul(self.g2, self.random_fr(rng))


BN254A = Curve("bn254a", optimized_bn128, BN254Fr, fq_bytes=32, fr_bytes=32)
BLS12_381 = Curve("bls12-381", optimized_bls12_381, BLS12_381Fr, fq_bytes=48, fr_bytes=32)

CURVES = {
    BN254A.name: BN254A,
    BLS12_381.name: BLS12_381,
}

# py_ecc has no backend for these.
UNSUPPORTED_CURVES = ("bls12-377",)


def get_curve(name):
    """이름으로 Curve를 찾는다.

    Raises:
        ConfigurationError: 알 수 없거나 지원하지 않는 곡선 이름
    """
    if name in UNSUPPORTED_CURVES:
        raise ConfigurationError(f"curve {name} is not supported by this build")
    try:
        return CURVES[name]
    except KeyError:
        raise ConfigurationError(f"invalid curve: {name}") from None
