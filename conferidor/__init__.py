"""Conferidor - lottery receipt verification against official Caixa results."""

__version__ = "1.0.0"
