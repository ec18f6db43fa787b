"""Core utilities and shared infrastructure.

- config: Configuration loading and validation
- constants: Coordinate bounds and indexed-shape defaults
- exceptions: Custom exception hierarchy
"""
