"""
Signature Shares
Partial signatures and the combiner that turns K of them into one RSA signature.

Combination is Lagrange interpolation in the exponent:

    w = prod_j x_j ^ (2 * lambda_j) = H ^ (4 * delta^2 * d)    (mod n)

and since gcd(e, 4 * delta^2) = 1 there are a, b with a*4*delta^2 + b*e = 1,
so y = w^a * H^b satisfies y^e = H. The private exponent d is never rebuilt.

The combiner does not check individual shares. One bad share gives a
signature that simply fails verification; nothing here raises for it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import rsa

from threshsig.encoding import message_to_int
from threshsig.errors import InsufficientSharesError, InvalidIndexError, InvalidParameterError
from threshsig.groupkey import GroupKey
from threshsig.numbers import delta, egcd
from threshsig.shamir import lagrange_coefficient


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SigShare:
    """A partial signature x_i produced by the KeyShare with the same index."""
    index: int
    value: int

    @staticmethod
    def combine(
        message: bytes,
        sig_shares: list[SigShare],
        k: int,
        l: int,
        group_key: GroupKey | rsa.RSAPublicKey,
        algorithm: hashes.HashAlgorithm | str | None = None,
    ) -> bytes:
        """
        Combine K signature shares into a standard RSA signature.

        Args:
            message: The message every share was computed over.
            sig_shares: At least K shares with distinct indices in [1, l].
                Only the first K are used.
            k: Threshold.
            l: Total number of shares dealt.
            group_key: GroupKey or cryptography RSA public key.
            algorithm: Digest used by the signers (default SHA-256).

        Returns:
            Signature bytes, as long as the modulus.

        Raises:
            InvalidParameterError: Bad k/l or a share value outside [1, n).
            InvalidIndexError: An index outside [1, l] or repeated.
            InsufficientSharesError: Fewer than k shares.
        """
        key = GroupKey.coerce(group_key)
        share_set = SigShareSet.from_shares(sig_shares, k, l, key.n)
        n, e = key.n, key.e

        d = delta(l)
        e_prime = 4 * d * d
        g, a, b = egcd(e_prime, e)
        if g != 1:
            raise InvalidParameterError(f"public exponent {e} is not coprime with 4 * {l}!")

        logger.debug("Combining signature shares %s (k=%d, l=%d)", share_set.indices, k, l)

        x = message_to_int(message, n, algorithm)

        w = 1
        for share in share_set:
            lam = lagrange_coefficient(share_set.indices, share.index, d)
            contribution = pow(share.value, 2 * abs(lam), n)
            if lam < 0:
                contribution = pow(contribution, -1, n)
            w = (w * contribution) % n

        # a or b is negative; pow() inverts modulo n for us
        y = (pow(w, a, n) * pow(x, b, n)) % n
        return y.to_bytes(key.byte_length, "big")


class SigShareSet:
    """
    Exactly K signature shares with distinct indices in [1, L].

    The constructor trusts its input. Use from_shares(), which rejects
    anything the interpolation cannot use.
    """

    def __init__(self, shares: list[SigShare], k: int, l: int):
        self._shares = tuple(shares)
        self.k = k
        self.l = l

    @classmethod
    def from_shares(cls, shares: list[SigShare], k: int, l: int, n: int) -> SigShareSet:
        shares = list(shares)
        if k < 1 or k > l:
            raise InvalidParameterError(f"need 1 <= k <= l, got k={k}, l={l}")

        seen = set()
        for share in shares:
            if not 1 <= share.index <= l:
                raise InvalidIndexError(f"index {share.index} outside [1, {l}]")
            if share.index in seen:
                raise InvalidIndexError(f"index {share.index} appears more than once")
            seen.add(share.index)

        if len(shares) < k:
            raise InsufficientSharesError(f"need {k} shares, got {len(shares)}")

        # Any K will do
        chosen = shares[:k]
        for share in chosen:
            if not 1 <= share.value < n:
                raise InvalidParameterError(f"share {share.index} value outside [1, n)")

        return cls(chosen, k, l)

    @property
    def indices(self) -> list[int]:
        return [s.index for s in self._shares]

    def __iter__(self):
        return iter(self._shares)

    def __len__(self):
        return len(self._shares)
