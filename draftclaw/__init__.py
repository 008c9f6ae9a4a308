"""Draft Claw - Eternal draft assistant."""

__version__ = "0.1.0"
