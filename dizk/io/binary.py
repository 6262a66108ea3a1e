"""
곡선별 바이너리 인코딩
======================

모든 정수는 big-endian이다.

  - u32 / u64: 개수와 인덱스
  - Fr:  fr_bytes 바이트 (bn254a, bls12-381 모두 32)
  - Fq:  fq_bytes 바이트 (bn254a 32, bls12-381 48)
  - G1:  플래그 1바이트 (1 = 항등원) + 아핀 x, y (Fq)
  - G2:  플래그 1바이트 (1 = 항등원) + 아핀 x.c0, x.c1, y.c0, y.c1 (Fq)

항등원도 좌표 자리를 0으로 채워 고정 길이를 유지한다.
잘린 스트림, 범위를 벗어난 원소, 곡선 위에 있지 않거나
소수 위수 부분군 밖에 있는 점은 ConfigurationError.
"""

import struct

from dizk.errors import ConfigurationError

_U32 = struct.Struct(">I")
_U64 = struct.Struct(">Q")


class BinaryWriter:

    def __init__(self, stream, curve):
        self.stream = stream
        self.curve = curve

    def write_u32(self, value):
        self.stream.write(_U32.pack(value))

    def write_u64(self, value):
        self.stream.write(_U64.pack(value))

    def write_fr(self, value):
        self.stream.write(int(value).to_bytes(self.curve.fr_bytes, "big"))

    def write_fq(self, value):
        self.stream.write(int(value).to_bytes(self.curve.fq_bytes, "big"))

    def write_g1(self, point):
        if self.curve.is_zero(point):
            self.stream.write(b"\x01" + bytes(2 * self.curve.fq_bytes))
            return
        x, y = self.curve.normalize(point)
        self.stream.write(b"\x00")
        self.write_fq(x)
        self.write_fq(y)

    def write_g2(self, point):
        if self.curve.is_zero(point):
            self.stream.write(b"\x01" + bytes(4 * self.curve.fq_bytes))
            return
        x, y = self.curve.normalize(point)
        self.stream.write(b"\x00")
        for coord in (x, y):
            for c in coord.coeffs:
                self.write_fq(c)


class BinaryReader:

    def __init__(self, stream, curve):
        self.stream = stream
        self.curve = curve

    def _read(self, size):
        data = self.stream.read(size)
        if len(data) != size:
            raise ConfigurationError(f"truncated stream: expected {size} bytes, got {len(data)}")
        return data

    def read_u32(self):
        return _U32.unpack(self._read(4))[0]

    def read_u64(self):
        return _U64.unpack(self._read(8))[0]

    def read_fr(self):
        value = int.from_bytes(self._read(self.curve.fr_bytes), "big")
        if value >= self.curve.order:
            raise ConfigurationError("scalar field element out of range")
        return self.curve.fr(value)

    def _read_fq_int(self):
        value = int.from_bytes(self._read(self.curve.fq_bytes), "big")
        if value >= self.curve.fq.field_modulus:
            raise ConfigurationError("base field element out of range")
        return value

    def _read_flag(self):
        flag = self._read(1)[0]
        if flag not in (0, 1):
            raise ConfigurationError(f"invalid point flag {flag}")
        return flag

    def read_g1(self):
        flag = self._read_flag()
        x, y = self._read_fq_int(), self._read_fq_int()
        if flag:
            return self.curve.g1_zero
        fq = self.curve.fq
        point = (fq(x), fq(y), fq.one())
        if not self.curve.is_on_curve_g1(point):
            raise ConfigurationError("G1 point is not on the curve")
        if not self.curve.is_in_subgroup(point):
            raise ConfigurationError("G1 point is not in the prime-order subgroup")
        return point

    def read_g2(self):
        flag = self._read_flag()
        coords = [self._read_fq_int() for _ in range(4)]
        if flag:
            return self.curve.g2_zero
        fq2 = self.curve.fq2
        point = (fq2(coords[0:2]), fq2(coords[2:4]), fq2.one())
        if not self.curve.is_on_curve_g2(point):
            raise ConfigurationError("G2 point is not on the curve")
        if not self.curve.is_in_subgroup(point):
            raise ConfigurationError("G2 point is not in the prime-order subgroup")
        return point
