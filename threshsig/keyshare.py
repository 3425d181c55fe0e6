"""
Key Share
One participant's secret share of the RSA signing exponent.

A KeyShare knows its own exponent s_i, the public modulus and exponent,
and the share count L (which fixes delta = L!). It never holds anything
that belongs to the Dealer, so it can be exported with wrap() and handed
across a trust boundary.

Partial signature:
    x_i = H(m) ^ (2 * delta * s_i) mod n
"""

from __future__ import annotations

from dataclasses import dataclass, field

from cryptography.hazmat.primitives import hashes

from threshsig.config import MAX_SHARES
from threshsig.encoding import message_to_int
from threshsig.errors import InvalidParameterError, MalformedShareError
from threshsig.groupkey import GroupKey
from threshsig.numbers import delta as scaling_factor
from threshsig.sigshare import SigShare
from threshsig import wire


WIRE_MAGIC = b"TSKS"
WIRE_VERSION = 1


@dataclass(frozen=True)
class KeyShare:
    """A single participant's signing credential."""
    index: int             # Evaluation point, 1..l
    secret: int = field(repr=False)  # s_i = f(index), never logged
    n: int                 # Group modulus
    e: int                 # Group public exponent
    l: int                 # Total number of shares
    verifier: int          # Public verification base v (a square mod n)
    verifier_value: int    # v ^ s_i mod n

    def __post_init__(self):
        if not 1 <= self.l <= MAX_SHARES:
            raise InvalidParameterError(f"share count {self.l} out of range")
        if not 1 <= self.index <= self.l:
            raise InvalidParameterError(f"index {self.index} outside [1, {self.l}]")
        if self.secret <= 0:
            raise InvalidParameterError("share exponent must be positive")
        if self.n < 3:
            raise InvalidParameterError("modulus must be at least 3")
        if self.e < 3 or self.e % 2 == 0:
            raise InvalidParameterError("public exponent must be odd and at least 3")
        for name in ("verifier", "verifier_value"):
            if not 1 <= getattr(self, name) < self.n:
                raise InvalidParameterError(f"{name} outside [1, n)")

    @property
    def group_key(self) -> GroupKey:
        return GroupKey(n=self.n, e=self.e)

    @property
    def delta(self) -> int:
        return scaling_factor(self.l)

    def rsasign(self, message: bytes, algorithm: hashes.HashAlgorithm | str | None = None) -> SigShare:
        """
        Produce this participant's partial signature over a message.

        Args:
            message: Raw message bytes.
            algorithm: Digest for the PKCS#1 v1.5 encoding (default SHA-256).
                Every signer and the combiner must agree on it.

        Returns:
            SigShare carrying this share's index.
        """
        x = message_to_int(message, self.n, algorithm)
        value = pow(x, 2 * self.delta * self.secret, self.n)
        return SigShare(index=self.index, value=value)

    def wrap(self) -> bytes:
        """Serialize to the versioned KeyShare wire format."""
        return wire.encode(
            WIRE_MAGIC,
            WIRE_VERSION,
            header=[self.index, self.l],
            fields=[self.secret, self.n, self.e, self.verifier, self.verifier_value],
        )

    @classmethod
    def unwrap(cls, data: bytes) -> KeyShare:
        """
        Rebuild a KeyShare from wrap() output.

        Raises:
            MalformedShareError: If the bytes are not a valid share.
        """
        try:
            (index, l), (secret, n, e, verifier, verifier_value) = wire.decode(
                data, WIRE_MAGIC, WIRE_VERSION, header_count=2, field_count=5
            )
        except wire.WireFormatError as exc:
            raise MalformedShareError(str(exc)) from exc

        try:
            return cls(
                index=index,
                secret=secret,
                n=n,
                e=e,
                l=l,
                verifier=verifier,
                verifier_value=verifier_value,
            )
        except InvalidParameterError as exc:
            raise MalformedShareError(exc.context) from exc
