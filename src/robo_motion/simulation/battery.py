"""
Loaded battery voltage model.

    V_loaded = max(0, V_nominal - R_internal Σ I)
"""

from typing import Iterable


class BatterySim:
    """Battery sag under load."""

    @staticmethod
    def calculate(currents: Iterable[float], nominal_voltage: float = 12.0,
                  resistance: float = 0.02) -> float:
        """
        Battery voltage while supplying ``currents``.

        Args:
            currents: Current drawn by each load [A]
            nominal_voltage: Unloaded battery voltage [V]
            resistance: Internal resistance [Ω]

        Returns:
            Loaded voltage, never below zero [V]
        """
        return max(0.0, nominal_voltage - sum(currents) * resistance)
