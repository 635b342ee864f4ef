"""EdgeRunner — Kelly criterion calculator for single-bet sizing."""

__version__ = "0.1.0"
