# mini_fem3d/config.py
"""
Solver configuration and defaults.
"""

from dataclasses import dataclass

from .formulations import FORMULATIONS


# Substituted for a zero/NaN Jacobian or volume, and used as the Cholesky
# diagonal L[j, j] where a pivot is not positive (effective pivot epsilon²).
# Keeps degenerate elements solvable at the cost of accuracy.
DEGENERACY_EPSILON = 1e-6

SOLVE_METHODS = ('cholesky_inverse', 'lapack')


@dataclass
class SolverConfig:
    """Settings for one run of the assembly-and-solve pipeline."""

    # Element coefficients, see formulations.FORMULATIONS
    formulation: str = "heat_transfer"

    # Reduced system solve: hand-written Cholesky inverse or scipy reference
    method: str = "cholesky_inverse"

    epsilon: float = DEGENERACY_EPSILON

    # Above this condition number the reduced system is reported (not rejected)
    cond_limit: float = 1e12

    # File naming
    input_extension: str = ".dat"
    output_extension: str = ".post.res"

    def __post_init__(self):
        if self.formulation not in FORMULATIONS:
            raise ValueError(
                f"Unknown formulation '{self.formulation}'. "
                f"Choose one of: {', '.join(sorted(FORMULATIONS))}"
            )
        if self.method not in SOLVE_METHODS:
            raise ValueError(
                f"Unknown solve method '{self.method}'. "
                f"Choose one of: {', '.join(SOLVE_METHODS)}"
            )
        if not self.epsilon > 0:
            raise ValueError(f"epsilon must be positive, got {self.epsilon}")
        if not self.cond_limit > 0:
            raise ValueError(f"cond_limit must be positive, got {self.cond_limit}")


# Global config instance
CONFIG = SolverConfig()
