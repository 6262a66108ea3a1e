"""
증명 키 / 할당 / 증명 스트림
============================

**증명 키 스트림** (binary.py 인코딩):
  1. R1CS 헤더: u64 num_variables, u64 num_primary, u64 num_constraints
  2. A, B, C 행렬 각각, 제약식마다: u32 항 개수 + (u64 변수 인덱스, Fr 계수)*
  3. α·G1, β·G1, β·G2, δ·G1, δ·G2
  4. query_a:      u64 개수 + G1*          (변수 인덱스 0부터)
  5. query_b:      u64 개수 + (G1, G2)*    (변수 인덱스 0부터)
  6. query_h:      u64 개수 + G1*          (지수 0부터)
  7. delta_abc_g1: u64 개수 + G1*          (변수 인덱스 num_primary부터)

**할당 스트림**:
  u64 개수 + Fr*  (상수 1을 제외한 변수 z[1], z[2], ... 의 값)

**증명 스트림**:
  G1 (A), G2 (B), G1 (C)

사용 예시:
    >>> with open("pk.bin", "rb") as f:
    ...     proving_key = ZKSnarkObjectReader(f, curve).read_proving_key(ctx, 4)
    >>> with open("assignment.bin", "rb") as f:
    ...     primary, full = AssignmentReader(f, curve).read_primary_full(1, curve.fr.one(), ctx, 4)
"""

import logging
import operator

from dizk.groth16.objects import Proof, ProvingKeyRDD
from dizk.io.binary import BinaryReader, BinaryWriter
from dizk.relations.objects import LinearTerm
from dizk.relations.r1cs import R1CSConstraintsRDD, R1CSRelationRDD

logger = logging.getLogger(__name__)


def _sorted_values(dataset):
    return [value for _, value in sorted(dataset.collect(), key=operator.itemgetter(0))]


class ZKSnarkObjectWriter(BinaryWriter):

    def write_r1cs(self, r1cs):
        self.write_u64(r1cs.num_variables())
        self.write_u64(r1cs.num_primary)
        self.write_u64(r1cs.num_constraints())
        for matrix in r1cs.constraints:
            rows = dict(matrix.group_by_key().collect())
            for i in range(r1cs.num_constraints()):
                terms = rows.get(i, [])
                self.write_u32(len(terms))
                for term in terms:
                    self.write_u64(term.index)
                    self.write_fr(term.value)

    def write_proving_key(self, proving_key):
        self.write_r1cs(proving_key.r1cs)
        self.write_g1(proving_key.alpha_g1)
        self.write_g1(proving_key.beta_g1)
        self.write_g2(proving_key.beta_g2)
        self.write_g1(proving_key.delta_g1)
        self.write_g2(proving_key.delta_g2)

        query_a = _sorted_values(proving_key.query_a)
        self.write_u64(len(query_a))
        for point in query_a:
            self.write_g1(point)

        query_b = _sorted_values(proving_key.query_b)
        self.write_u64(len(query_b))
        for g1_point, g2_point in query_b:
            self.write_g1(g1_point)
            self.write_g2(g2_point)

        query_h = _sorted_values(proving_key.query_h)
        self.write_u64(len(query_h))
        for point in query_h:
            self.write_g1(point)

        delta_abc = _sorted_values(proving_key.delta_abc_g1)
        self.write_u64(len(delta_abc))
        for point in delta_abc:
            self.write_g1(point)

    def write_proof(self, proof):
        self.write_g1(proof.g_a)
        self.write_g2(proof.g_b)
        self.write_g1(proof.g_c)


class ZKSnarkObjectReader(BinaryReader):

    def read_r1cs(self, context, num_partitions):
        num_variables = self.read_u64()
        num_primary = self.read_u64()
        num_constraints = self.read_u64()
        matrices = []
        for _ in range(3):
            records = []
            for i in range(num_constraints):
                for _ in range(self.read_u32()):
                    index = self.read_u64()
                    records.append((i, LinearTerm(index, self.read_fr())))
            matrices.append(context.parallelize(records, num_partitions))
        return R1CSRelationRDD(
            R1CSConstraintsRDD(*matrices), num_primary, num_variables - num_primary, num_constraints
        )

    def _read_indexed(self, read_one, start, context, num_partitions):
        count = self.read_u64()
        return context.parallelize([(start + i, read_one()) for i in range(count)], num_partitions)

    def _read_g1_g2(self):
        return self.read_g1(), self.read_g2()

    def read_proving_key(self, context, num_partitions):
        r1cs = self.read_r1cs(context, num_partitions)
        alpha_g1 = self.read_g1()
        beta_g1 = self.read_g1()
        beta_g2 = self.read_g2()
        delta_g1 = self.read_g1()
        delta_g2 = self.read_g2()
        query_a = self._read_indexed(self.read_g1, 0, context, num_partitions)
        query_b = self._read_indexed(self._read_g1_g2, 0, context, num_partitions)
        query_h = self._read_indexed(self.read_g1, 0, context, num_partitions)
        delta_abc_g1 = self._read_indexed(self.read_g1, r1cs.num_primary, context, num_partitions)
        logger.info("read proving key: %r", r1cs)
        return ProvingKeyRDD(
            alpha_g1, beta_g1, beta_g2, delta_g1, delta_g2,
            delta_abc_g1, query_a, query_b, query_h, r1cs,
        )

    def read_proof(self):
        return Proof(self.read_g1(), self.read_g2(), self.read_g1())


def read_proof(stream, curve):
    return ZKSnarkObjectReader(stream, curve).read_proof()


class AssignmentWriter(BinaryWriter):

    def write_assignment(self, values):
        """상수 1을 제외한 변수 값들을 쓴다."""
        values = list(values)
        self.write_u64(len(values))
        for value in values:
            self.write_fr(value)


class AssignmentReader(BinaryReader):

    def read_primary_full(self, primary_size, one, context, num_partitions):
        """(primary, full_assignment)를 반환한다. 두 쪽 모두 맨 앞에 상수 one이 붙는다."""
        count = self.read_u64()
        values = [self.read_fr() for _ in range(count)]
        primary = [one] + values[:primary_size]
        full_assignment = context.parallelize(list(enumerate([one] + values)), num_partitions)
        return primary, full_assignment
