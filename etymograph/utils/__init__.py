"""
Utility modules for the etymograph project.
"""

from etymograph.utils.logging_config import setup_logging

__all__ = ['setup_logging']
