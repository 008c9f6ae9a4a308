"""Core draft types and constants."""
