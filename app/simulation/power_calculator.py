"""
simulation/power_calculator.py

Complex power bookkeeping over a solve result.

Every element power is S = Vab * conj(I) with I flowing a -> b, the passive
sign convention: positive real power is absorbed, negative is supplied.
"""

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass
class PowerBalance:
    """Absorbed vs supplied real power, plus the complex total."""

    absorbed: float
    supplied: float
    total: complex

    def is_balanced(self, tolerance: float = 1e-9) -> bool:
        """True when the complex powers sum to ~0 relative to the power scale."""
        scale = max(self.absorbed, self.supplied, 1.0)
        return abs(self.total) <= tolerance * scale


def total_power(power_dict):
    """Sum of all complex powers. Should net close to 0 for a valid solution."""
    return sum(power_dict.values(), complex(0.0, 0.0))


def power_balance(result) -> PowerBalance:
    """
    Summarise a successful SolveResult's element powers.

    Args:
        result: SolveResult from solve_mna()

    Returns:
        PowerBalance. An unsuccessful result yields all zeros.
    """
    if not result.success:
        return PowerBalance(absorbed=0.0, supplied=0.0, total=complex(0.0, 0.0))

    absorbed = 0.0
    supplied = 0.0
    for element_id, s in result.element_powers.items():
        if s.real > 0:
            absorbed += s.real
        else:
            supplied -= s.real

    balance = PowerBalance(absorbed=absorbed, supplied=supplied, total=total_power(result.element_powers))
    logger.debug("Power balance: absorbed=%s supplied=%s total=%s", absorbed, supplied, balance.total)
    return balance
