"""Thread-safe gauges and counters, a background file writer, a logger and a load simulator."""

__version__ = "0.1.0"
__all__ = ["logger", "metrics", "simulation"]