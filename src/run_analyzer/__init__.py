"""Running analysis engine: stream metrics, training load, best efforts and race predictions."""

__version__ = "0.1.0"
