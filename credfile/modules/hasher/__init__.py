"""
Hasher Module - Black Box Interface

Purpose: Verify passwords against stored hashes and create new hashes
Interface: Hasher.verify(), Hasher.generate(), get_hasher()
Hidden: Hash algorithms, encodings, format detection

Any object with verify/generate can be handed to the users store instead.
"""

from .hasher import BcryptHasher, Hasher, HtpasswdHasher, get_hasher

__all__ = ["Hasher", "BcryptHasher", "HtpasswdHasher", "get_hasher"]
