from typing import NamedTuple


class LinearTerm(NamedTuple):
    """계수 value가 붙은 변수 index. 선형 결합 Σ value · z[index]의 한 항."""
    index: int
    value: object


def evaluate_linear_combination(terms, assignment, zero):
    """Σ value · assignment[index]. assignment는 z[0] = 1 을 포함한 전체 할당."""
    acc = zero
    for term in terms:
        acc = acc + term.value * assignment[term.index]
    return acc
