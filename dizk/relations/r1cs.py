"""
R1CS (Rank-1 Constraint System)
===============================

제약식 i: (A_i · z) * (B_i · z) = C_i · z
z = primary ++ auxiliary, z[0] = 1 (primary의 첫 원소)

**R1CSRelation**:
  단일 프로세스 표현. 제약식마다 A, B, C 선형 결합(LinearTerm 리스트)을 가진다.

**R1CSRelationRDD**:
  분산 표현. A, B, C 각각이 (제약식 인덱스, LinearTerm) 데이터셋이다.
  전체 할당도 (변수 인덱스, 값) 데이터셋으로 받는다.

사용 예시:
    >>> r1cs = JSONR1CSLoader(path).load_serial(BN254Fr)
    >>> r1cs.is_satisfied(primary, auxiliary)
    >>> r1cs_rdd = r1cs.to_rdd(config)
    >>> r1cs_rdd.is_satisfied(primary, full_assignment)
"""

import functools
import logging
import operator
from typing import List, NamedTuple

from dizk.relations.objects import LinearTerm, evaluate_linear_combination

logger = logging.getLogger(__name__)


class R1CSConstraint(NamedTuple):
    a: List[LinearTerm]
    b: List[LinearTerm]
    c: List[LinearTerm]


class R1CSRelation:

    def __init__(self, constraints, num_primary, num_auxiliary):
        self.constraints = list(constraints)
        self.num_primary = num_primary
        self.num_auxiliary = num_auxiliary

    def __repr__(self):
        return (f"R1CSRelation(constraints={self.num_constraints()}, "
                f"primary={self.num_primary}, auxiliary={self.num_auxiliary})")

    def num_constraints(self):
        return len(self.constraints)

    def num_variables(self):
        return self.num_primary + self.num_auxiliary

    def is_valid(self):
        if self.num_constraints() < 1:
            return False
        if self.num_primary < 1 or self.num_primary > self.num_variables():
            return False
        for constraint in self.constraints:
            for terms in constraint:
                for term in terms:
                    if not 0 <= term.index < self.num_variables():
                        return False
        return True

    def is_satisfied(self, primary, auxiliary):
        if len(primary) != self.num_primary or len(auxiliary) != self.num_auxiliary:
            logger.warning("assignment size mismatch: primary %d/%d, auxiliary %d/%d",
                           len(primary), self.num_primary, len(auxiliary), self.num_auxiliary)
            return False
        full = list(primary) + list(auxiliary)
        zero = full[0].zero()
        for i, constraint in enumerate(self.constraints):
            a = evaluate_linear_combination(constraint.a, full, zero)
            b = evaluate_linear_combination(constraint.b, full, zero)
            c = evaluate_linear_combination(constraint.c, full, zero)
            if a * b != c:
                logger.debug("constraint %d not satisfied", i)
                return False
        return True

    def to_rdd(self, config):
        """제약 행렬을 (제약식 인덱스, LinearTerm) 데이터셋으로 분산한다."""
        context, num_partitions = config.context, config.num_partitions

        def matrix(slot):
            return context.parallelize(
                [(i, term) for i, constraint in enumerate(self.constraints) for term in constraint[slot]],
                num_partitions,
            )

        constraints = R1CSConstraintsRDD(matrix(0), matrix(1), matrix(2))
        return R1CSRelationRDD(constraints, self.num_primary, self.num_auxiliary, self.num_constraints())


class R1CSConstraintsRDD(NamedTuple):
    a: object
    b: object
    c: object

    def persist(self, storage_level):
        for matrix in self:
            matrix.persist(storage_level)
        return self


# ─────────────────────────────────────────────────────────────────────
# 분산 만족성 검사용 파티션 함수
# ─────────────────────────────────────────────────────────────────────

def term_by_variable(record):
    constraint, term = record
    return (term.index, (constraint, term.value))


def weighted_by_constraint(record):
    _, ((constraint, coeff), value) = record
    return (constraint, coeff * value)


def _tag(slot, value):
    return (slot, value)


def _constraint_holds(zero, record):
    _, tagged = record
    sums = [zero, zero, zero]
    for slot, value in tagged:
        sums[slot] = value
    return sums[0] * sums[1] == sums[2]


def _key_below(limit, record):
    return record[0] < limit


def _index_out_of_range(num_variables, record):
    return not 0 <= record[1].index < num_variables


def evaluate_matrix(matrix, full_assignment, num_partitions):
    """(제약식 i, M_i · z) 데이터셋. 항이 없는 제약식은 나오지 않는다 (값 0)."""
    return (
        matrix
        .map_to_pair(term_by_variable)
        .join(full_assignment, num_partitions)
        .map_to_pair(weighted_by_constraint)
        .reduce_by_key(operator.add, num_partitions)
    )


class R1CSRelationRDD:

    def __init__(self, constraints, num_primary, num_auxiliary, num_constraints):
        self.constraints = constraints
        self.num_primary = num_primary
        self.num_auxiliary = num_auxiliary
        self._num_constraints = num_constraints

    def __repr__(self):
        return (f"R1CSRelationRDD(constraints={self._num_constraints}, "
                f"primary={self.num_primary}, auxiliary={self.num_auxiliary})")

    def num_constraints(self):
        return self._num_constraints

    def num_variables(self):
        return self.num_primary + self.num_auxiliary

    def is_valid(self):
        if self.num_constraints() < 1:
            return False
        if self.num_primary < 1 or self.num_primary > self.num_variables():
            return False
        check = functools.partial(_index_out_of_range, self.num_variables())
        return all(matrix.filter(check).count() == 0 for matrix in self.constraints)

    def is_satisfied(self, primary, full_assignment):
        """primary가 전체 할당의 앞부분과 일치하고 모든 제약식이 성립하는지 확인한다."""
        if len(primary) != self.num_primary:
            logger.warning("primary size mismatch: %d != %d", len(primary), self.num_primary)
            return False
        head = full_assignment.filter(functools.partial(_key_below, self.num_primary)).collect_as_map()
        if len(head) != self.num_primary or any(head[i] != primary[i] for i in range(self.num_primary)):
            logger.warning("primary assignment does not match the full assignment")
            return False

        num_partitions = full_assignment.num_partitions
        zero = primary[0].zero()
        evaluations = [
            evaluate_matrix(matrix, full_assignment, num_partitions).map_values(functools.partial(_tag, slot))
            for slot, matrix in enumerate(self.constraints)
        ]
        tagged = evaluations[0].union(evaluations[1]).union(evaluations[2])
        return (
            tagged
            .group_by_key(num_partitions)
            .map(functools.partial(_constraint_holds, zero))
            .fold(True, operator.and_)
        )
