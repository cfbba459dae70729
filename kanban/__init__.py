"""Kanban board game: a round-based simulation of a software delivery pipeline."""

__version__ = "0.1.0"
