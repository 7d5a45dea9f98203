"""RoundCaddy course, caddie and round-history service."""

__version__ = "0.1.0"
