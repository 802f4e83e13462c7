"""dbtogo: turns database tables into Go code."""

__version__ = "0.1.0"
