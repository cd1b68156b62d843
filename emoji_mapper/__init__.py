"""
Emoji Mapper.

Turns classifier emoji proposals for an icon catalog into a unique
emoji -> icon mapping, with tie records for manual review.
"""

__version__ = "1.0.0"
