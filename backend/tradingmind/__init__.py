"""Trading Mind: trading-discipline check-ins, plans and reflections."""

__version__ = "1.0.0"
