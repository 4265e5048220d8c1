# mini_fem3d/cli.py
"""
Command line entry point.

    mini-fem3d NAME           reads NAME.dat, writes NAME.post.res
"""

import argparse
import logging
import sys

from .config import SOLVE_METHODS, SolverConfig
from .formulations import FORMULATIONS
from .post import field_summary, results_table
from .solve import run


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='mini-fem3d',
        description='Solve a 3D tetrahedral finite element scalar field problem',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  mini-fem3d demos/data/cube
  mini-fem3d demos/data/cube --method lapack --csv cube.csv -v

This reads demos/data/cube.dat and writes demos/data/cube.post.res.
        """
    )
    parser.add_argument(
        'filename',
        help='Input file name without the .dat extension'
    )
    parser.add_argument(
        '--formulation',
        choices=sorted(FORMULATIONS),
        default='heat_transfer',
        help='Element coefficients (default: heat_transfer)'
    )
    parser.add_argument(
        '--method',
        choices=SOLVE_METHODS,
        default='cholesky_inverse',
        help='Reduced system solver (default: cholesky_inverse)'
    )
    parser.add_argument(
        '--report',
        action='store_true',
        help='Print the mesh content before solving'
    )
    parser.add_argument(
        '--csv',
        metavar='PATH',
        help='Also write a node table (id, coordinates, value) as CSV'
    )
    parser.add_argument(
        '--plot',
        metavar='PATH',
        help='Also save a 3D scatter plot of the field'
    )
    parser.add_argument(
        '-v', '--verbose',
        action='count',
        default=0,
        help='-v for progress, -vv for per-element detail'
    )
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    level = [logging.WARNING, logging.INFO, logging.DEBUG][min(args.verbose, 2)]
    logging.basicConfig(level=level, format='%(levelname)s %(name)s: %(message)s')

    config = SolverConfig(formulation=args.formulation, method=args.method)
    result = run(args.filename, config)

    if not result.ok:
        print(f"mini-fem3d: {result.reason}", file=sys.stderr)
        return 1

    if args.report:
        print(result.mesh.report())

    summary = field_summary(result.values)
    print(f"Solved {len(result.values)} nodes -> {result.output_path}")
    print(f"  min {summary['min']:.6g} at node {summary['min_node']}, "
          f"max {summary['max']:.6g} at node {summary['max_node']}")

    if args.csv:
        results_table(result.mesh, result.values).to_csv(args.csv, index=False)
        print(f"  table -> {args.csv}")

    if args.plot:
        import matplotlib
        matplotlib.use('Agg')
        from .viz import plot_nodal_field

        plot_nodal_field(result.mesh, result.values, outpath=args.plot)
        print(f"  plot -> {args.plot}")

    return 0


if __name__ == '__main__':
    sys.exit(main())
