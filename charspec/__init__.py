"""
charspec -- Versioned character schemas, validation and declaration generation.

Usage::

    from charspec.validation import parse_character

    character = parse_character(data)
"""

__version__ = "0.1.0"
