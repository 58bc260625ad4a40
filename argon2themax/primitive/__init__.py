"""
Argon2TheMax Hashing Primitive Module.

Provides the argon2-cffi adapter used for timing and verification.
"""

from .argon2_primitive import (
    ARGON2_TYPES,
    Argon2Primitive,
    HashPrimitive,
    generate_salt,
    hash,
    variant_of,
    verify,
)

__all__ = [
    "ARGON2_TYPES",
    "Argon2Primitive",
    "HashPrimitive",
    "generate_salt",
    "hash",
    "variant_of",
    "verify",
]
