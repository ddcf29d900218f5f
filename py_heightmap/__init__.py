"""
py-heightmap: tileable diamond-square terrain generation.
"""

from .core import (
    DecayingUniformNoise,
    DiamondSquareGenerator,
    GenerationController,
    HeightGrid,
    normalize,
)

__version__ = "0.1.0"

__all__ = ['DecayingUniformNoise', 'DiamondSquareGenerator', 'GenerationController',
           'HeightGrid', 'normalize', '__version__']
