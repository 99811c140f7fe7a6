"""Laser-cut box generator: finger-jointed panels, packed sheets, SVG and DXF."""

__version__ = "0.1.0"
