"""Portfolio calculation engine: XIRR, FIFO lots, fixed-income compounding and goal projection."""

__version__ = "0.1.0"
