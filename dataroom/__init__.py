"""Data room service: hierarchical document repository API."""
