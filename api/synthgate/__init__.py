"""SynthSEO request admission gate."""

__version__ = "2.0.0"
