"""Claude Agent SDK command-line examples with a drink pricing tool."""

__version__ = "1.0.0"
