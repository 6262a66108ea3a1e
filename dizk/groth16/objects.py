from typing import Any, List, NamedTuple


class Proof(NamedTuple):
    g_a: Any  # G1
    g_b: Any  # G2
    g_c: Any  # G1


class ProvingKeyRDD(NamedTuple):
    alpha_g1: Any
    beta_g1: Any
    beta_g2: Any
    delta_g1: Any
    delta_g2: Any
    # (i, (βA_i(t) + αB_i(t) + C_i(t)) / δ · G1), i >= num_primary
    delta_abc_g1: Any
    # (i, A_i(t) · G1)
    query_a: Any
    # (i, (B_i(t) · G1, B_i(t) · G2))
    query_b: Any
    # (i, t^i · Z(t) / δ · G1), i ∈ [0, n]
    query_h: Any
    r1cs: Any


class VerificationKey(NamedTuple):
    alpha_g1_beta_g2: Any
    gamma_g2: Any
    delta_g2: Any
    # (βA_i(t) + αB_i(t) + C_i(t)) / γ · G1, i < num_primary
    gamma_abc_g1: List[Any]


class CRS(NamedTuple):
    proving_key: ProvingKeyRDD
    verification_key: VerificationKey
