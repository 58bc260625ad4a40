"""
Argon2 Hashing Primitive.

Thin adapter over argon2-cffi exposing the operations calibration needs:
- hash / verify with explicit cost parameters
- cryptographically random salts
- variant defaults and hard limits
"""

import logging
import os
from abc import ABC, abstractmethod
from typing import Optional, Union

import argon2
from argon2.exceptions import VerifyMismatchError
from argon2.low_level import Type, hash_secret, hash_secret_raw, verify_secret

from argon2themax.core.schema import CostParameters, ParameterLimits, Variant
from argon2themax.core.space import DEFAULT_SPACE, ParameterSpace

logger = logging.getLogger(__name__)


ARGON2_TYPES = {
    Variant.ARGON2D: Type.D,
    Variant.ARGON2I: Type.I,
    Variant.ARGON2ID: Type.ID,
}

_VARIANTS_BY_TYPE = {t: v for v, t in ARGON2_TYPES.items()}


def _to_bytes(value: Union[str, bytes]) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    return value


class HashPrimitive(ABC):
    """
    Abstract interface for the wrapped password-hashing function.

    Calibration only ever talks to this interface, so tests can substitute
    a deterministic implementation.
    """

    @abstractmethod
    def hash(self, plain: Union[str, bytes], salt: bytes, params: CostParameters) -> bytes:
        """Compute one hash. Raises on invalid parameters or exhausted resources."""
        pass

    @abstractmethod
    def verify(self, digest: Union[str, bytes], plain: Union[str, bytes]) -> bool:
        pass

    @abstractmethod
    def generate_salt(self, length: int) -> bytes:
        pass

    @abstractmethod
    def default_parameters(self, variant: Variant) -> CostParameters:
        pass

    @abstractmethod
    def limits(self) -> ParameterLimits:
        pass


class Argon2Primitive(HashPrimitive):
    """
    argon2-cffi backed primitive.

    Usage:
        primitive = Argon2Primitive()
        salt = primitive.generate_salt(16)
        digest = primitive.hash("hunter2", salt, primitive.default_parameters(Variant.ARGON2ID))
        assert primitive.verify(digest, "hunter2")
    """

    def __init__(self, space: ParameterSpace = DEFAULT_SPACE):
        self.space = space

    def hash(self, plain: Union[str, bytes], salt: bytes, params: CostParameters) -> bytes:
        hasher = hash_secret_raw if params.raw else hash_secret
        return hasher(
            secret=_to_bytes(plain),
            salt=salt,
            type=ARGON2_TYPES[params.variant],
            **params.to_argon2_kwargs(),
        )

    def verify(self, digest: Union[str, bytes], plain: Union[str, bytes]) -> bool:
        """
        Verify an encoded ($argon2...$) digest.

        Only a mismatch yields False; malformed digests and library failures
        propagate.
        """
        encoded = digest.decode("ascii") if isinstance(digest, bytes) else digest
        params = argon2.extract_parameters(encoded)

        try:
            return verify_secret(encoded.encode("ascii"), _to_bytes(plain), params.type)
        except VerifyMismatchError:
            return False

    def generate_salt(self, length: int) -> bytes:
        if length < 1:
            raise ValueError(f"Salt length must be positive, got {length}")
        return os.urandom(length)

    def default_parameters(self, variant: Variant = Variant.ARGON2ID) -> CostParameters:
        return self.space.defaults(variant)

    def limits(self) -> ParameterLimits:
        return self.space.limits


def variant_of(encoded: Union[str, bytes]) -> Variant:
    """Variant recorded in an encoded Argon2 hash."""
    encoded = encoded.decode("ascii") if isinstance(encoded, bytes) else encoded
    return _VARIANTS_BY_TYPE[argon2.extract_parameters(encoded).type]


# ============================================================================
# Module-level Helpers
# ============================================================================

_default_primitive = Argon2Primitive()


def hash(plain: Union[str, bytes], salt: bytes, params: Optional[CostParameters] = None) -> bytes:
    """Hash with the default Argon2 primitive; defaults to argon2id default parameters."""
    return _default_primitive.hash(plain, salt, params or _default_primitive.default_parameters())


def verify(digest: Union[str, bytes], plain: Union[str, bytes]) -> bool:
    return _default_primitive.verify(digest, plain)


def generate_salt(length: int = 16) -> bytes:
    return _default_primitive.generate_salt(length)
