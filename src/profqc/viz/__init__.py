"""Visualization utilities."""

from profqc.viz.profile_plot import ProfilePlot

__all__ = ["ProfilePlot"]
