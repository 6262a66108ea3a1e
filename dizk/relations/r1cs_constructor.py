"""
무작위 R1CS 생성기
==================

테스트와 벤치마크용으로 항상 만족되는 R1CS와 그 할당을 만든다.

**변수 배치**:
  z[0] = 1, z[1..num_inputs-1] = 무작위 공개 입력,
  제약식 i마다 새 보조 변수 z[num_inputs + i]가 하나씩 생긴다.

**제약식**:
  - i < num_constraints - 1:
      (a0 · 1 + a1 · z[u]) * (b1 · z[v]) = 1 · z[new]
      u, v는 이미 정의된 변수 중에서 무작위로 고른다.
  - 마지막 제약식은 모든 변수를 A에 담은 조밀(dense) 행이다:
      (Σ_k c_k · z[k]) * (1 · z[0]) = 1 · z[new]

사용 예시:
    >>> r1cs, primary, auxiliary = serial_construct(8, 3, BN254Fr, random.Random(1))
    >>> r1cs.is_satisfied(primary, auxiliary)  # True
"""

from dizk.algebra.field import random_element, random_nonzero_element
from dizk.relations.objects import LinearTerm, evaluate_linear_combination
from dizk.relations.r1cs import R1CSConstraint, R1CSRelation


def serial_construct(num_constraints, num_inputs, field, rng):
    """(R1CSRelation, primary, auxiliary)를 반환한다. num_inputs는 z[0] = 1을 포함한 공개 입력 수."""
    if num_constraints < 1 or num_inputs < 1:
        raise ValueError("need at least one constraint and one input")

    one, zero = field.one(), field.zero()
    assignment = [one] + [random_element(field, rng) for _ in range(num_inputs - 1)]
    constraints = []

    for _ in range(num_constraints - 1):
        u = rng.randrange(len(assignment))
        v = rng.randrange(len(assignment))
        a = [LinearTerm(0, random_element(field, rng)), LinearTerm(u, random_nonzero_element(field, rng))]
        b = [LinearTerm(v, random_nonzero_element(field, rng))]
        c = [LinearTerm(len(assignment), one)]
        assignment.append(
            evaluate_linear_combination(a, assignment, zero) * evaluate_linear_combination(b, assignment, zero)
        )
        constraints.append(R1CSConstraint(a, b, c))

    dense = [LinearTerm(k, random_nonzero_element(field, rng)) for k in range(len(assignment))]
    value = evaluate_linear_combination(dense, assignment, zero)
    constraints.append(R1CSConstraint(dense, [LinearTerm(0, one)], [LinearTerm(len(assignment), one)]))
    assignment.append(value)

    r1cs = R1CSRelation(constraints, num_inputs, len(assignment) - num_inputs)
    return r1cs, assignment[:num_inputs], assignment[num_inputs:]


def parallel_construct(num_constraints, num_inputs, field, rng, config):
    """(R1CSRelationRDD, primary, full_assignment 데이터셋)을 반환한다."""
    r1cs, primary, auxiliary = serial_construct(num_constraints, num_inputs, field, rng)
    full_assignment = config.context.parallelize(
        list(enumerate(primary + auxiliary)), config.num_partitions
    )
    return r1cs.to_rdd(config), primary, full_assignment
