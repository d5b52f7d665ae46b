"""Scan a filesystem tree, lay it out as a 3D scene and pick its nodes."""

__version__ = "0.1.0"