# mini_fem3d/formulations.py
"""
ELEMENT FORMULATIONS: Pluggable Coefficients for the Tetrahedral System
=======================================================================

Every formulation shares the same local structure:

    K_local = c_K × (Bᵀ Aᵀ A B)        (4×4)
    b_local = c_b × [1, 1, 1, 1]       (4)

Only the scalar prefactors c_K and c_b change with the physical model, so
they are the only thing a formulation provides. The assembly, boundary
condition and solve code never needs to know which one is in use.

    heat_transfer     c_K = k·V / J²        c_b = Q·J / 24
    second_equation   c_K = 1 / (3360·J)    c_b = J / 105

where k is the conductivity, Q the heat source, V the element volume and
J the (signed) Jacobian of the element.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class HeatTransfer:
    """
    Steady-state heat conduction: -k ∇²T = Q.

    The stiffness prefactor uses the element volume; the load vector
    spreads Q·J/6 (= Q·V for a positively oriented element) equally
    over the four nodes.
    """
    name: str = "heat_transfer"

    def stiffness_coefficient(self, problem, volume: float, jacobian: float) -> float:
        return problem.k * volume / (jacobian * jacobian)

    def load_coefficient(self, problem, jacobian: float) -> float:
        return problem.Q * jacobian / 24.0


@dataclass(frozen=True)
class SecondEquation:
    """Generic second model equation; ignores the problem constants."""
    name: str = "second_equation"

    def stiffness_coefficient(self, problem, volume: float, jacobian: float) -> float:
        return 1.0 / (3360.0 * jacobian)

    def load_coefficient(self, problem, jacobian: float) -> float:
        return jacobian / 105.0


FORMULATIONS = {
    "heat_transfer": HeatTransfer(),
    "second_equation": SecondEquation(),
}


def get_formulation(name: str):
    try:
        return FORMULATIONS[name]
    except KeyError:
        raise ValueError(
            f"Unknown formulation '{name}'. Choose one of: {', '.join(sorted(FORMULATIONS))}"
        ) from None
