"""Lifting log compiler: set-notation parsing and warm-up / work-set classification."""

__version__ = "0.1.0"
