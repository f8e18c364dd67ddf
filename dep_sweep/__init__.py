"""dep-sweep: find declared npm dependencies a project never uses."""

__version__ = "0.1.0"
