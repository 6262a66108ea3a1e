"""
JSON R1CS 로더
==============

libsnark / zeth가 내보내는 JSON 형식의 R1CS를 읽는다.

    {
      "scalar_field_characteristic": "0x30644e...",
      "num_variables": 4,        # z[0] = 1 제외
      "num_inputs": 1,           # z[0] = 1 제외
      "num_constraints": 3,
      "constraints": [
        {"linear_combination": {"A": [{"index": 2, "value": "0x1"}], "B": [...], "C": [...]}},
        ...
      ]
    }

z[0] = 1은 파일에 세지 않으므로 num_primary = num_inputs + 1,
num_auxiliary = num_variables - num_inputs 가 된다.

사용 예시:
    >>> loader = JSONR1CSLoader("tests/data/simple_circuit_r1cs.json")
    >>> r1cs = loader.load_serial(BN254Fr)
    >>> r1cs_rdd = loader.load_rdd(BN254Fr, config)
"""

import json
import logging

from dizk.errors import ConfigurationError
from dizk.relations.objects import LinearTerm
from dizk.relations.r1cs import R1CSConstraint, R1CSRelation

logger = logging.getLogger(__name__)


def _parse_value(value):
    if isinstance(value, int):
        return value
    return int(value, 16)


class JSONR1CSLoader:

    def __init__(self, path):
        self.path = path

    def _read(self, field):
        try:
            with open(self.path) as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"cannot read R1CS file {self.path}: {e}") from e

        try:
            characteristic = _parse_value(data["scalar_field_characteristic"])
            num_inputs = int(data["num_inputs"])
            num_variables = int(data["num_variables"])
            raw_constraints = data["constraints"]
        except (KeyError, ValueError, TypeError) as e:
            raise ConfigurationError(f"malformed R1CS file {self.path}: {e}") from e

        if characteristic != field.field_modulus:
            raise ConfigurationError(
                f"R1CS field characteristic {hex(characteristic)} does not match {field.__name__}"
            )
        if "num_constraints" in data and int(data["num_constraints"]) != len(raw_constraints):
            raise ConfigurationError(
                f"num_constraints {data['num_constraints']} != {len(raw_constraints)} constraints"
            )

        constraints = []
        try:
            for raw in raw_constraints:
                combination = raw["linear_combination"]
                constraints.append(R1CSConstraint(*(
                    [LinearTerm(int(term["index"]), field(_parse_value(term["value"]))) for term in combination[m]]
                    for m in ("A", "B", "C")
                )))
        except (KeyError, ValueError, TypeError) as e:
            raise ConfigurationError(f"malformed constraint in {self.path}: {e}") from e
        logger.info("loaded %d constraints from %s", len(constraints), self.path)
        return constraints, num_inputs + 1, num_variables - num_inputs

    def load_serial(self, field):
        constraints, num_primary, num_auxiliary = self._read(field)
        return R1CSRelation(constraints, num_primary, num_auxiliary)

    def load_rdd(self, field, config):
        return self.load_serial(field).to_rdd(config)
