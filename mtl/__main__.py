"""
CLI entry point. Run as: python -m mtl FILE [FILE ...]
"""

import argparse
import logging
import sys
from dataclasses import replace

from .anum import string_anum_file_to_mtl
from .core.errors import MTLError
from .core.limits import default_limits
from .core.parser import parse_with_recovery
from .core.prover import create_prover_state, verify_all, verify_statements
from .report import print_results, print_trace, results_to_json


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Meta-Theory of Links checker")
    parser.add_argument("files", nargs="+", metavar="FILE", help=".mtl files to verify")
    parser.add_argument("--max-depth", type=int, default=None, help="Deepest term any traversal may enter")
    parser.add_argument("--max-nodes", type=int, default=None, help="Largest term expansion may build")
    parser.add_argument("--fixpoint", action="store_true",
                        help="Retry the ∞/♂/♀ schemas to a fixpoint before failing")
    parser.add_argument("--json",    action="store_true", help="Print results as JSON")
    parser.add_argument("--quiet",   action="store_true", help="One line per statement")
    parser.add_argument("--debug",   action="store_true", help="Enable debug logging")
    parser.add_argument("--recover", action="store_true",
                        help="Verify what parses and report the first syntax error")
    parser.add_argument("--anum",    action="store_true",
                        help="Treat files as .astr string anumbers and print them as .mtl")
    args = parser.parse_args(argv)

    if args.debug:
        logging.basicConfig(level=logging.DEBUG)

    limits = default_limits()
    overrides = {}
    if args.max_depth is not None:
        overrides["max_depth"] = args.max_depth
    if args.max_nodes is not None:
        overrides["max_nodes"] = args.max_nodes
    if overrides:
        limits = replace(limits, **overrides)

    ok = True
    for path in args.files:
        with open(path, encoding="utf-8") as f:
            text = f.read()

        if args.anum:
            print(string_anum_file_to_mtl(text))
            continue

        state = create_prover_state(fixpoint_schemas=args.fixpoint, limits=limits)
        if not args.json:
            print(f"File: {path}")

        if args.recover:
            try:
                recovered = parse_with_recovery(text, limits)
            except MTLError as err:
                print(err, file=sys.stderr)
                ok = False
                continue
            statements = recovered.file.statements if recovered.file else ()
            results = verify_statements(statements, state)
            if recovered.error is not None:
                print(recovered.error, file=sys.stderr)
                ok = False
        else:
            try:
                results, state = verify_all(text, state)
            except MTLError as err:
                print(err, file=sys.stderr)
                ok = False
                continue

        if args.json:
            print(results_to_json(results, limits))
        else:
            print_results(results, quiet=args.quiet, limits=limits)
            if args.debug:
                print_trace(state)
        ok = ok and all(r.success for _, r in results)

    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
