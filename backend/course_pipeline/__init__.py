"""
Course pipeline: running-course feed sync, GPX processing and
road-condition generation.
"""

__version__ = "0.1.0"
