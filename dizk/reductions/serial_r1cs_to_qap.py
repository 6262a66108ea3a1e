from dizk.algebra.field import multiplicative_generator, next_power_of_two, root_of_unity
from dizk.fft.serial_fft import coset_fft, coset_ifft, compute_z, ifft, lagrange_coefficients
from dizk.relations.objects import evaluate_linear_combination
from dizk.relations.qap import QAPRelation, QAPWitness


def r1cs_to_qap_relation(r1cs, t):
    """단일 프로세스 인스턴스 변환. 분산 reduce_instance의 정답 비교용."""
    field = type(t)
    num_constraints = r1cs.num_constraints()
    n = next_power_of_two(num_constraints + r1cs.num_primary)
    u = lagrange_coefficients(t, n)

    At = [field.zero()] * r1cs.num_variables()
    Bt = [field.zero()] * r1cs.num_variables()
    Ct = [field.zero()] * r1cs.num_variables()

    for j in range(r1cs.num_primary):
        At[j] = At[j] + u[num_constraints + j]

    for i, constraint in enumerate(r1cs.constraints):
        for target, terms in zip((At, Bt, Ct), constraint):
            for term in terms:
                target[term.index] = target[term.index] + u[i] * term.value

    Ht = [t ** i for i in range(n + 1)]
    return QAPRelation(At, Bt, Ct, Ht, compute_z(t, n), t, r1cs.num_primary, r1cs.num_variables(), n)


def r1cs_to_qap_witness(r1cs, primary, auxiliary):
    """단일 프로세스 증인 변환. H의 계수 h_0, ..., h_n (h_n = 0)."""
    field = type(primary[0])
    num_constraints = r1cs.num_constraints()
    n = next_power_of_two(num_constraints + r1cs.num_primary)
    omega = root_of_unity(field, n)
    g = multiplicative_generator(field)
    full = list(primary) + list(auxiliary)
    zero = field.zero()

    aA, aB, aC = [zero] * n, [zero] * n, [zero] * n
    for i, constraint in enumerate(r1cs.constraints):
        aA[i] = evaluate_linear_combination(constraint.a, full, zero)
        aB[i] = evaluate_linear_combination(constraint.b, full, zero)
        aC[i] = evaluate_linear_combination(constraint.c, full, zero)
    for j in range(r1cs.num_primary):
        aA[num_constraints + j] = full[j]

    evals_a = coset_fft(ifft(aA, omega), omega, g)
    evals_b = coset_fft(ifft(aB, omega), omega, g)
    evals_c = coset_fft(ifft(aC, omega), omega, g)

    z_inv = field.one() / compute_z(g, n)
    evals_h = [(a * b - c) * z_inv for a, b, c in zip(evals_a, evals_b, evals_c)]
    coefficients_h = coset_ifft(evals_h, omega, g) + [zero]
    return QAPWitness(full, coefficients_h, r1cs.num_primary, r1cs.num_variables(), n)
