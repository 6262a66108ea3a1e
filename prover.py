"""
Distributed prover command line.

    prove [--local] [--test] [--primary-size N] [--output FILE] [--curve NAME]
          PROVING_KEY_FILE ASSIGNMENT_FILE
"""

import argparse
import logging
import sys

from dizk.algebra.curves import CURVES, UNSUPPORTED_CURVES, get_curve
from dizk.configuration import Configuration
from dizk.dataset.self_test import run_self_test
from dizk.errors import ConfigurationError, DizkError, UnsatisfiedAssignmentError
from dizk.groth16.proving import prove
from dizk.io.zksnark_io import AssignmentReader, ZKSnarkObjectReader, ZKSnarkObjectWriter

logger = logging.getLogger("prover")


def build_parser():
    parser = argparse.ArgumentParser(
        prog="prove",
        usage="%(prog)s [options] PROVING_KEY_FILE ASSIGNMENT_FILE",
        description="Distributed Prover (PoC implementation)",
    )
    parser.add_argument("-l", "--local", action="store_true", help="run in a single process")
    parser.add_argument("-t", "--test", action="store_true", help="run trivial test to verify setup")
    parser.add_argument("-p", "--primary-size", type=int, default=1, help="size of primary input (1)")
    parser.add_argument("-o", "--output", default="proof.bin", help="output file (proof.bin)")
    parser.add_argument(
        "-c", "--curve", default="bn254a",
        help="curve name: " + " or ".join(list(CURVES) + list(UNSUPPORTED_CURVES)) + " (bn254a)",
    )
    parser.add_argument("files", nargs="*", metavar="FILE", help=argparse.SUPPRESS)
    return parser


def run(curve, primary_size, proving_key_file, assignment_file, output_file, config):
    logger.info("proving key: %s, assignment: %s, output: %s", proving_key_file, assignment_file, output_file)

    with open(proving_key_file, "rb") as f:
        proving_key = ZKSnarkObjectReader(f, curve).read_proving_key(config.context, config.num_partitions)
    with open(assignment_file, "rb") as f:
        primary, full_assignment = AssignmentReader(f, curve).read_primary_full(
            primary_size, curve.fr.one(), config.context, config.num_partitions
        )
    full_assignment.persist(config.storage_level)

    r1cs = proving_key.r1cs
    r1cs.constraints.persist(config.storage_level)
    if len(primary) != r1cs.num_primary:
        raise ConfigurationError(
            f"primary input size {len(primary) - 1} does not match the proving key ({r1cs.num_primary - 1})"
        )

    config.begin_log("Check satisfiability")
    if not r1cs.is_satisfied(primary, full_assignment):
        raise UnsatisfiedAssignmentError("assignment does not satisfy the R1CS relation")
    config.end_log("Check satisfiability")

    proof = prove(proving_key, primary, full_assignment, curve, config)

    with open(output_file, "wb") as f:
        ZKSnarkObjectWriter(f, curve).write_proof(proof)
    logger.info("proof written to %s", output_file)
    return proof


def main(argv=None):
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    parser = build_parser()
    args = parser.parse_args(argv)

    config = Configuration.for_cluster(local=args.local)

    if args.test:
        run_self_test(config.context)
        print("TEST PASSED")
        return 0

    if len(args.files) != 2:
        print("error: invalid number of arguments\n", file=sys.stderr)
        parser.print_usage(sys.stderr)
        return 1

    try:
        curve = get_curve(args.curve)
        run(curve, args.primary_size, args.files[0], args.files[1], args.output, config)
    except (DizkError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
