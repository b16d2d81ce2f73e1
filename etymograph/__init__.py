"""
etymograph: discovers and ranks etymological connections between words.
"""

__version__ = "0.1.0"
