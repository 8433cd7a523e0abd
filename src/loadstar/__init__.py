"""loadstar: a terminal wizard that sets up a developer machine."""

__version__ = "0.1.0"
