"""AI article generation and WordPress bulk publishing."""

__version__ = "0.1.0"
