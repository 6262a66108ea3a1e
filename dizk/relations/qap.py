from typing import Any, List, NamedTuple


class QAPRelation(NamedTuple):
    """t에서 평가된 QAP 인스턴스 (단일 프로세스)."""
    At: List[Any]
    Bt: List[Any]
    Ct: List[Any]
    Ht: List[Any]
    Zt: Any
    t: Any
    num_inputs: int
    num_variables: int
    degree: int


class QAPRelationRDD(NamedTuple):
    """t에서 평가된 QAP 인스턴스. At/Bt/Ct는 변수 인덱스, Ht는 지수 i ↦ t^i 데이터셋."""
    At: Any
    Bt: Any
    Ct: Any
    Ht: Any
    Zt: Any
    t: Any
    num_inputs: int
    num_variables: int
    degree: int


class QAPWitness(NamedTuple):
    assignment: List[Any]
    coefficients_h: List[Any]
    num_inputs: int
    num_variables: int
    degree: int


class QAPWitnessRDD(NamedTuple):
    """전체 할당과 몫 다항식 H의 계수 (i, h_i), i ∈ [0, degree]."""
    full_assignment: Any
    coefficients_h: Any
    num_inputs: int
    num_variables: int
    degree: int
