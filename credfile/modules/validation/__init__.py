"""
Validation Module - Black Box Interface

Purpose: Decide whether a username may appear in the users file
Interface: validate_username()
Hidden: Character set and length rules

Callers may pass any callable with the same signature to the parser.
"""

from .username import UsernameValidator, validate_username

__all__ = ["UsernameValidator", "validate_username"]
