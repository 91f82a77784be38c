"""
Plotter modules for different visualization types.
"""

from .vectors import VectorPlotter
from .field_lines import FieldLinePlotter
from .potential import PotentialPlotter

__all__ = ['VectorPlotter', 'FieldLinePlotter', 'PotentialPlotter']
