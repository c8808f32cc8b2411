"""gastos: monthly household expense tracker with a bundled tile-merge game."""

__version__ = "1.0.0"
