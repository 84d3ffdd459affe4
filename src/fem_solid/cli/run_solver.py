#!/usr/bin/env python3
"""
Element Assembly CLI Runner.

This script loads a solution task from an XML or YAML input file, assembles
the local stiffness of every element and scatters it into the global matrix.

Usage:
    python -m fem_solid.cli.run_solver input.xml [options]

Examples:
    # Assemble every element of a task
    fem-solid task.xml

    # Dump the constitutive matrix and local stiffnesses
    fem-solid task.yaml --verbose

    # Stop at the first degenerate element
    fem-solid task.xml --strict

    # Preview configuration without assembling
    fem-solid task.yaml --preview

    # Generate template input
    fem-solid --template > task.yaml
"""

import argparse
import logging
import sys
from typing import List, Optional

# Template YAML input: a single unit tetrahedron
TEMPLATE_CONFIG = """# fem-solid Task Input
# ====================

#============================================================================
# TASK
#============================================================================
task:
  task_type: "CARTESIAN3D"
  element_kind: "TETRAHEDRA10"  # the only registered element kind
  nodes_per_element: 10
  dof: 3
  gauss_points_count: 4         # 4 or 5
  precision: "double"           # "double" or "single"

  model:
    type: "A5"                  # "A5" (linear isotropic) or "COMPRESSIBLE_NEOHOOKEAN"
    parameters: [100.0, 100.0]  # lambda, mu
    # Or engineering constants:
    # E: 210.0e9
    # nu: 0.3

  # Nonlinear driver settings (carried for the incremental solve)
  solution:
    load_increments_count: 10
    desired_tolerance: 1.0e-8
    modified_newton: true
    linesearch_max: 5
    arclength_max: 0

#============================================================================
# GEOMETRY
#============================================================================
geometry:
  nodes:
    - [0.0, 0.0, 0.0]
    - [1.0, 0.0, 0.0]
    - [0.0, 1.0, 0.0]
    - [0.0, 0.0, 1.0]
    - [0.5, 0.0, 0.0]
    - [0.5, 0.5, 0.0]
    - [0.0, 0.5, 0.0]
    - [0.0, 0.0, 0.5]
    - [0.5, 0.0, 0.5]
    - [0.0, 0.5, 0.5]
  # Corners 0-3, then mid-edges 0-1, 1-2, 0-2, 0-3, 1-3, 2-3
  elements:
    - [0, 1, 2, 3, 4, 5, 6, 7, 8, 9]

#============================================================================
# BOUNDARY CONDITIONS
#============================================================================
boundary_conditions:
  prescribed:
    - node: 0
      values: [0.0, 0.0, 0.0]
      type: 7        # bitmask: x=1, y=2, z=4 (or a name such as "xyz")
    - node: 1
      values: [0.0, 0.0, 0.0]
      type: "yz"
"""


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the CLI."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def preview(task) -> None:
    """Print the task configuration and its warnings."""
    print(task)
    warnings = task.validate()
    if warnings:
        print("\nWarnings:")
        for w in warnings:
            print(f"  - {w}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Assemble element stiffness matrices for a 3D solid task.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Exit codes:
  0  success (degenerate elements are reported as warnings)
  1  missing argument, unreadable input or invalid configuration
  2  degenerate element found with --strict
        """,
    )

    parser.add_argument(
        "input",
        nargs="?",
        help="Path to XML or YAML task input",
    )

    parser.add_argument(
        "--strict",
        action="store_true",
        help="Stop at the first degenerate element",
    )

    parser.add_argument(
        "--preview",
        "-p",
        action="store_true",
        help="Print the loaded configuration without assembling",
    )

    parser.add_argument(
        "--template",
        "-t",
        action="store_true",
        help="Print template YAML input to stdout",
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging (dumps constitutive and local matrices)",
    )

    args = parser.parse_args(argv)

    if args.template:
        print(TEMPLATE_CONFIG)
        return 0

    if not args.input:
        parser.print_help()
        return 1

    setup_logging(args.verbose)
    logger = logging.getLogger("fem_solid.cli")

    from fem_solid.core.assembler import MeshAssembler
    from fem_solid.core.config import ConfigurationError
    from fem_solid.core.io import InputError, load_input
    from fem_solid.solvers import DegenerateElementError, FeaSolver

    try:
        data = load_input(args.input)
        if args.preview:
            preview(data.task)
            return 0
        fixed = data.boundary.fixed_dofs(data.task.dof)
        solver = FeaSolver(data.task, data.geometry, data.boundary)
    except FileNotFoundError as e:
        print(f"Error: {e}")
        return 1
    except (InputError, ConfigurationError, IndexError, ValueError) as e:
        logger.error("Failed to load %s: %s", args.input, e)
        return 1

    try:
        assembler = MeshAssembler(solver, strict=args.strict)
    except DegenerateElementError as e:
        logger.error("%s", e)
        return 2

    K = assembler.assemble_stiffness_matrix()
    logger.info(
        "Summary: %d elements, msize=%d, nnz=%d, %d failures, %d prescribed dofs",
        solver.element_count,
        solver.msize,
        K.nnz,
        len(assembler.failures),
        len(fixed),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
