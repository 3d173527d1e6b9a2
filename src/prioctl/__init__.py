"""prioctl: ordering engine and CLI for an Eisenhower-matrix planner."""

__version__ = "0.4.0"
