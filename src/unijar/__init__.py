"""Merge Intel and ARM macOS JARs into one universal JAR."""

__version__ = "0.1.0"
