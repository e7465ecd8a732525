"""profqc - consistency quality control for vertical profile observations."""

__version__ = "0.1.0"
