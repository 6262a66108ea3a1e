import functools
import logging

from dizk.algebra.msm import distributed_double_msm, distributed_msm
from dizk.errors import ConfigurationError, UnsatisfiedAssignmentError
from dizk.groth16.objects import Proof
from dizk.reductions.r1cs_to_qap import domain_size, reduce_witness

logger = logging.getLogger(__name__)


def _key_at_least(bound, record):
    return record[0] >= bound


def _nonzero_value(record):
    return record[1] != 0


def _as_key(index):
    return (index, None)


def _check_coverage(name, required, query):
    missing = required.subtract_by_key(query).count()
    if missing:
        raise ConfigurationError(f"proving key is missing {missing} {name} entries")


def check_proving_key(proving_key, full_assignment, config):
    r1cs = proving_key.r1cs
    n = domain_size(r1cs)
    _check_coverage("query_a", full_assignment, proving_key.query_a)
    _check_coverage("query_b", full_assignment, proving_key.query_b)
    _check_coverage(
        "delta_abc_g1",
        full_assignment.filter(functools.partial(_key_at_least, r1cs.num_primary)),
        proving_key.delta_abc_g1,
    )
    _check_coverage("query_h", config.context.range(n + 1, config.num_partitions).map(_as_key), proving_key.query_h)


def prove(proving_key, primary, full_assignment, curve, config, rng=None):
    rng = rng or config.random_source()
    num_partitions = config.num_partitions

    config.begin_log("Check proving key coverage")
    check_proving_key(proving_key, full_assignment, config)
    config.end_log("Check proving key coverage")

    config.begin_runtime("Proof")
    witness = reduce_witness(proving_key.r1cs, primary, full_assignment, curve.fr, config)
    n = witness.degree

    if config.debug_flag:
        # deg H <= n - 2
        high = (
            witness.coefficients_h
            .filter(functools.partial(_key_at_least, n - 1))
            .filter(_nonzero_value)
            .count()
        )
        if high:
            raise UnsatisfiedAssignmentError("quotient polynomial has nonzero coefficients at n-1 or n")

    r = curve.random_fr(rng)
    s = curve.random_fr(rng)

    config.begin_log("Computing evaluation to query A: summation of variable_i*A_i(t)")
    evaluation_at = distributed_msm(
        full_assignment.join(proving_key.query_a, num_partitions).values(), curve
    )
    config.end_log("Computing evaluation to query A: summation of variable_i*A_i(t)")

    config.begin_log("Computing evaluation to query B: summation of variable_i*B_i(t)")
    evaluation_bt1, evaluation_bt2 = distributed_double_msm(
        full_assignment.join(proving_key.query_b, num_partitions).values(), curve
    )
    config.end_log("Computing evaluation to query B: summation of variable_i*B_i(t)")

    config.begin_log("Computing evaluation to deltaABC and query H")
    evaluation_abc = curve.add(
        distributed_msm(full_assignment.join(proving_key.delta_abc_g1, num_partitions).values(), curve),
        distributed_msm(witness.coefficients_h.join(proving_key.query_h, num_partitions).values(), curve),
    )
    config.end_log("Computing evaluation to deltaABC and query H")

    # A = alpha + sum_i(a_i*A_i(t)) + r*delta
    g_a = curve.add(curve.add(proving_key.alpha_g1, evaluation_at), curve.mul(proving_key.delta_g1, r))

    # B = beta + sum_i(a_i*B_i(t)) + s*delta
    g_b1 = curve.add(curve.add(proving_key.beta_g1, evaluation_bt1), curve.mul(proving_key.delta_g1, s))
    g_b2 = curve.add(curve.add(proving_key.beta_g2, evaluation_bt2), curve.mul(proving_key.delta_g2, s))

    # C = sum_i(a_i*((beta*A_i(t) + alpha*B_i(t) + C_i(t)) + H(t)*Z(t))/delta) + A*s + r*b - r*s*delta
    g_c = curve.add(
        curve.add(evaluation_abc, curve.mul(g_a, s)),
        curve.add(curve.mul(g_b1, r), curve.neg(curve.mul(proving_key.delta_g1, r * s))),
    )
    config.end_runtime("Proof")

    logger.info("proof generated for %d primary inputs", len(primary))
    return Proof(g_a, g_b2, g_c)
