"""
errors.py — Error taxonomy shared by every layer.

Nothing here is fatal: the web layer turns any VisualizerError into a
400 JSON response and the previous state stays as it was.
"""


class VisualizerError(Exception):
    """Base class for every error the visualizer reports to its caller."""


class InvalidInput(VisualizerError):
    """Custom array could not be parsed, or holds non-positive values."""


class UnsupportedOperation(VisualizerError):
    """The chosen algorithm cannot handle this input (radix + negatives)."""


class PlaybackActive(VisualizerError):
    """The array cannot change while a run is being animated."""
