"""Core configuration, errors and event primitives."""
