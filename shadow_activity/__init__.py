"""
Shadow Git Activity — Mirror commit activity from a private repository
into a public one, without its content.
"""

__version__ = "0.1.0"
