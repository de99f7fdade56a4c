"""Per-channel histograms and two-point tone curves for RGBA pixel buffers."""

__version__ = "0.1.0"
