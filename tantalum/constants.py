"""
Physical Constants
==================

Constants as exact Quantities. The SI defining constants are exact by
definition; measured values (G) are exact renderings of the published
decimal, not of a float.
"""

from typing import Dict, Tuple

from .errors import UnknownConstant
from .quantity import Quantity

# name -> (value, unit, description)
PHYSICAL_CONSTANTS: Dict[str, Tuple[str, str, str]] = {
    # SI defining constants
    'delta_nu_Cs': ('9192631770', 'Hz', 'caesium hyperfine transition frequency'),
    'c': ('299792458', 'm/s', 'speed of light in vacuum'),
    'h': ('6.62607015e-34', 'J*s', 'Planck constant'),
    'e': ('1.602176634e-19', 'C', 'elementary charge'),
    'k_B': ('1.380649e-23', 'J/K', 'Boltzmann constant'),
    'N_A': ('6.02214076e23', '1/mol', 'Avogadro constant'),

    # Derived exactly from the above
    'R': ('8.31446261815324', 'J/(mol*K)', 'molar gas constant (N_A * k_B)'),
    'F': ('96485.3321233100184', 'C/mol', 'Faraday constant (N_A * e)'),

    # Conventional
    'g': ('9.80665', 'm/s^2', 'standard gravity'),
    'atm': ('101325', 'Pa', 'standard atmosphere'),

    # Measured
    'G': ('6.67430e-11', 'm^3/(kg*s^2)', 'Newtonian constant of gravitation'),
}


def get_constant(name: str) -> Quantity:
    """Get a physical constant as a Quantity."""
    if name not in PHYSICAL_CONSTANTS:
        raise UnknownConstant(f"Unknown constant: {name}. Available: {list(PHYSICAL_CONSTANTS.keys())}")
    value, unit, _ = PHYSICAL_CONSTANTS[name]
    return Quantity(value, unit)


__all__ = ['PHYSICAL_CONSTANTS', 'get_constant']
