import logging

from dizk.algebra.msm import serial_msm

logger = logging.getLogger(__name__)


def verify(verification_key, primary, proof, curve):
    if len(primary) != len(verification_key.gamma_abc_g1):
        logger.warning("primary input size %d does not match the verification key (%d)",
                       len(primary), len(verification_key.gamma_abc_g1))
        return False
    if not (curve.is_on_curve_g1(proof.g_a) and curve.is_on_curve_g2(proof.g_b)
            and curve.is_on_curve_g1(proof.g_c)):
        return False

    accumulated = serial_msm(curve, zip(primary, verification_key.gamma_abc_g1))

    LHS = curve.pairing(proof.g_b, proof.g_a)
    RHS = verification_key.alpha_g1_beta_g2
    RHS = RHS * curve.pairing(verification_key.gamma_g2, accumulated)
    RHS = RHS * curve.pairing(verification_key.delta_g2, proof.g_c)
    return LHS == RHS
