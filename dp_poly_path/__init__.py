"""DP poly path planning: lattice search, path stitching and obstacle decisions."""

__version__ = "0.1.0"
