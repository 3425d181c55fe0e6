"""
Group Key
The public RSA key shared by every participant.

Not secret. Anyone holding it can check a combined signature with a
standard RSASSA-PKCS1-v1_5 verifier; nothing in it helps produce one.
"""

from __future__ import annotations

from dataclasses import dataclass

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from threshsig.encoding import resolve_algorithm
from threshsig.errors import InvalidParameterError


@dataclass(frozen=True)
class GroupKey:
    """RSA public key material: modulus n and public exponent e."""
    n: int
    e: int

    def __post_init__(self):
        if self.n < 3:
            raise InvalidParameterError("modulus must be at least 3")
        if self.e < 3 or self.e % 2 == 0:
            raise InvalidParameterError("public exponent must be odd and at least 3")

    @property
    def bit_length(self) -> int:
        return self.n.bit_length()

    @property
    def byte_length(self) -> int:
        """Length of a signature under this key, in bytes."""
        return (self.n.bit_length() + 7) // 8

    def to_public_key(self) -> rsa.RSAPublicKey:
        """Convert to a cryptography RSA public key for external verifiers."""
        return rsa.RSAPublicNumbers(self.e, self.n).public_key()

    @classmethod
    def from_public_key(cls, key: rsa.RSAPublicKey) -> GroupKey:
        numbers = key.public_numbers()
        return cls(n=numbers.n, e=numbers.e)

    @classmethod
    def coerce(cls, key: GroupKey | rsa.RSAPublicKey) -> GroupKey:
        """Accept either a GroupKey or a cryptography public key."""
        if isinstance(key, GroupKey):
            return key
        return cls.from_public_key(key)

    def to_pem(self) -> bytes:
        """SubjectPublicKeyInfo PEM for tools outside this package."""
        return self.to_public_key().public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )

    def verify(
        self,
        message: bytes,
        signature: bytes,
        algorithm: hashes.HashAlgorithm | str | None = None,
    ) -> bool:
        """Check an RSASSA-PKCS1-v1_5 signature with the cryptography library."""
        try:
            self.to_public_key().verify(
                signature, message, padding.PKCS1v15(), resolve_algorithm(algorithm)
            )
            return True
        except (InvalidSignature, ValueError):
            return False
