"""
Core heightmap generation functionality.
"""

from .errors import HeightmapError, InvalidDimensionError, OutOfRangeError, DegenerateRangeError
from .height_grid import HeightGrid
from .noise import NoiseSource, DecayingUniformNoise, ConstantNoise, FunctionNoise, as_noise_source
from .diamond_square import DiamondSquareGenerator, diamond_square
from .normalizer import normalize
from .generation import GenerationController, generate_heightmap

__all__ = ['HeightmapError', 'InvalidDimensionError', 'OutOfRangeError', 'DegenerateRangeError',
           'HeightGrid', 'NoiseSource', 'DecayingUniformNoise', 'ConstantNoise', 'FunctionNoise',
           'as_noise_source', 'DiamondSquareGenerator', 'diamond_square', 'normalize',
           'GenerationController', 'generate_heightmap']
