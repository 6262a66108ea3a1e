import functools
import logging
import operator

from dizk.groth16.objects import CRS, ProvingKeyRDD, VerificationKey
from dizk.reductions.r1cs_to_qap import reduce_instance

logger = logging.getLogger(__name__)


def _g1_mul(curve, factor, value):
    return curve.mul(curve.g1, value * factor)


def _g1_g2_mul(curve, value):
    return (curve.mul(curve.g1, value), curve.mul(curve.g2, value))


def _abc(alpha, beta, value):
    (a, b), c = value
    return beta * a + alpha * b + c


def _is_primary(num_primary, record):
    return record[0] < num_primary


def _is_auxiliary(num_primary, record):
    return record[0] >= num_primary


def _dense(values, num_variables, zero, config):
    return (
        values
        .union(config.context.fill(num_variables, zero, config.num_partitions))
        .reduce_by_key(operator.add, config.num_partitions)
    )


def generate(r1cs, curve, config, rng=None):
    rng = rng or config.random_source()
    fr = curve.fr
    one = fr.one()

    t = curve.random_fr(rng)
    alpha = curve.random_fr(rng)
    beta = curve.random_fr(rng)
    gamma = curve.random_fr(rng)
    delta = curve.random_fr(rng)
    gamma_inv = one / gamma
    delta_inv = one / delta

    qap = reduce_instance(r1cs, t, config)
    num_variables = qap.num_variables
    num_primary = qap.num_inputs
    logger.info("setup: %d variables, %d primary, domain %d", num_variables, num_primary, qap.degree)

    config.begin_log("Densify A(t), B(t), C(t)")
    At = _dense(qap.At, num_variables, fr.zero(), config).persist(config.storage_level)
    Bt = _dense(qap.Bt, num_variables, fr.zero(), config).persist(config.storage_level)
    Ct = _dense(qap.Ct, num_variables, fr.zero(), config)
    config.end_log("Densify A(t), B(t), C(t)")

    config.begin_log("Compute query_a, query_b, query_h")
    query_a = At.map_values(functools.partial(_g1_mul, curve, one)).persist(config.storage_level)
    query_b = Bt.map_values(functools.partial(_g1_g2_mul, curve)).persist(config.storage_level)
    query_h = (
        qap.Ht
        .map_values(functools.partial(_g1_mul, curve, qap.Zt * delta_inv))
        .persist(config.storage_level)
    )
    config.end_log("Compute query_a, query_b, query_h")

    config.begin_log("Compute delta_abc and gamma_abc")
    abc = (
        At.join(Bt, config.num_partitions)
        .join(Ct, config.num_partitions)
        .map_values(functools.partial(_abc, alpha, beta))
        .persist(config.storage_level)
    )
    delta_abc_g1 = (
        abc
        .filter(functools.partial(_is_auxiliary, num_primary))
        .map_values(functools.partial(_g1_mul, curve, delta_inv))
        .persist(config.storage_level)
    )
    gamma_abc = (
        abc
        .filter(functools.partial(_is_primary, num_primary))
        .map_values(functools.partial(_g1_mul, curve, gamma_inv))
        .collect()
    )
    gamma_abc_g1 = [point for _, point in sorted(gamma_abc, key=operator.itemgetter(0))]
    config.end_log("Compute delta_abc and gamma_abc")

    alpha_g1 = curve.mul(curve.g1, alpha)
    beta_g1 = curve.mul(curve.g1, beta)
    beta_g2 = curve.mul(curve.g2, beta)
    delta_g1 = curve.mul(curve.g1, delta)
    delta_g2 = curve.mul(curve.g2, delta)
    gamma_g2 = curve.mul(curve.g2, gamma)

    proving_key = ProvingKeyRDD(
        alpha_g1, beta_g1, beta_g2, delta_g1, delta_g2,
        delta_abc_g1, query_a, query_b, query_h, r1cs,
    )
    verification_key = VerificationKey(
        curve.pairing(beta_g2, alpha_g1), gamma_g2, delta_g2, gamma_abc_g1,
    )
    return CRS(proving_key, verification_key)
