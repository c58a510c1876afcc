"""Rostrum: a phase-driven multi-model debate arena."""

__version__ = "1.0.0"
