"""ordertrack - track customer orders per user account."""

__version__ = "0.1.0"
