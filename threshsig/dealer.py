"""
Dealer — Trusted Key Generation
Generates a safe-prime RSA key and deals the private exponent as L shares.

The Dealer is the trust anchor of the scheme: it alone ever sees p, q and d.
Use it in a with-block (or call destroy()) so that this material is
dropped as soon as the shares have been handed out.

Dealing:
  1. Safe primes p = 2p'+1, q = 2q'+1; n = p*q; m = p'*q'
  2. d = e^-1 mod m
  3. f(x) = d + a1*x + ... + a(k-1)*x^(k-1), a_j uniform in [0, m*L)
  4. s_i = f(i) mod (m * L! * 2^margin), for i = 1..L
  5. v = random square mod n; v_i = v^s_i mod n

Python ints are immutable, so "destroy" drops every reference the Dealer
holds; the interpreter reclaims the memory.
"""

from __future__ import annotations

import logging
import threading

from Crypto.Random import get_random_bytes
from Crypto.Util.number import GCD, inverse, isPrime

from threshsig.config import DEFAULT_KEY_SIZE, MAX_SHARES, MIN_KEY_SIZE, DealerConfig
from threshsig.errors import DealerStateError, InvalidParameterError, KeyGenerationError
from threshsig.groupkey import GroupKey
from threshsig.keyshare import KeyShare
from threshsig.numbers import delta, random_square, safe_prime
from threshsig.shamir import interpolate_at_zero, split_exponent


logger = logging.getLogger(__name__)


class Dealer:
    """
    Trusted dealer for a (k, L) threshold RSA key.

    Args:
        key_size: Modulus bit length.
        config: Public exponent, hiding margin and prime search budget.
        randfunc: Callable returning n random bytes. Pass a seeded source
            to make key generation reproducible.

    Raises:
        InvalidParameterError: If key_size or the config is unusable.
    """

    def __init__(
        self,
        key_size: int = DEFAULT_KEY_SIZE,
        config: DealerConfig | None = None,
        randfunc=None,
    ):
        config = config or DealerConfig()

        if key_size < MIN_KEY_SIZE:
            raise InvalidParameterError(f"key size {key_size} is below {MIN_KEY_SIZE} bits")
        e = config.public_exponent
        if e < 3 or e % 2 == 0 or not isPrime(e):
            raise InvalidParameterError(f"public exponent {e} must be an odd prime")
        if config.max_prime_attempts < 1:
            raise InvalidParameterError("max_prime_attempts must be positive")
        if config.security_margin_bits < 0:
            raise InvalidParameterError("security_margin_bits cannot be negative")

        self.key_size = key_size
        self.config = config
        self._randfunc = randfunc or get_random_bytes
        self._lock = threading.Lock()
        self._destroyed = False

        # Dealer-private state
        self._p = None
        self._q = None
        self._m = None
        self._d = None
        self._group_key = None
        self._shares = None

    def __enter__(self) -> Dealer:
        return self

    def __exit__(self, exc_type, exc, tb):
        self.destroy()

    def _generate_primes(self):
        """Find p, q, n = p*q of the exact key size with gcd(e, p'q') == 1."""
        e = self.config.public_exponent
        budget = self.config.max_prime_attempts
        p_bits = (self.key_size + 1) // 2
        q_bits = self.key_size - p_bits

        for _ in range(budget):
            p, p_ = safe_prime(p_bits, budget, self._randfunc)
            q, q_ = safe_prime(q_bits, budget, self._randfunc)
            if p == q:
                continue
            n = p * q
            if n.bit_length() != self.key_size:
                continue
            m = p_ * q_
            if GCD(e, m) != 1:
                continue

            self._p, self._q, self._m = p, q, m
            self._d = inverse(e, m)
            self._group_key = GroupKey(n=n, e=e)
            return

        raise KeyGenerationError(f"no {self.key_size}-bit modulus in {budget} attempts")

    def generate_keys(self, k: int, l: int) -> tuple[GroupKey, list[KeyShare]]:
        """
        Generate the group key (first call only) and deal L key shares.

        A second call reuses the same primes and deals a fresh, independent
        set of shares for the same group key.

        Args:
            k: Threshold, 1 <= k <= l.
            l: Number of shares, smaller than the public exponent.

        Returns:
            (GroupKey, list of L KeyShares ordered by index).

        Raises:
            InvalidParameterError: Bad k or l. Checked before any prime search.
            KeyGenerationError: The safe prime search ran out of attempts.
            DealerStateError: The Dealer was already destroyed.
        """
        e = self.config.public_exponent
        if k < 1:
            raise InvalidParameterError(f"threshold k={k} must be at least 1")
        if k > l:
            raise InvalidParameterError(f"threshold k={k} exceeds share count l={l}")
        if l > MAX_SHARES:
            raise InvalidParameterError(f"share count l={l} exceeds {MAX_SHARES}")
        if l >= e:
            raise InvalidParameterError(f"share count l={l} must be below the public exponent {e}")

        with self._lock:
            if self._destroyed:
                raise DealerStateError("dealer has been destroyed")

            if self._group_key is None:
                logger.info("Generating %d-bit safe-prime RSA modulus", self.key_size)
                self._generate_primes()

            n = self._group_key.n
            m = self._m
            scale = delta(l)
            share_bound = m * scale * (1 << self.config.security_margin_bits)

            exponents = split_exponent(
                self._d,
                threshold=k,
                num_shares=l,
                coeff_bound=m * l,
                share_bound=share_bound,
                randfunc=self._randfunc,
            )

            # delta * d must come back out of any k shares, modulo m
            check = {i: exponents[i - 1] for i in range(1, k + 1)}
            if interpolate_at_zero(check, scale) % m != (scale * self._d) % m:
                raise KeyGenerationError("dealt shares do not interpolate to the private exponent")

            verifier = random_square(n, self._randfunc)
            self._shares = [
                KeyShare(
                    index=i,
                    secret=s,
                    n=n,
                    e=e,
                    l=l,
                    verifier=verifier,
                    verifier_value=pow(verifier, s, n),
                )
                for i, s in enumerate(exponents, start=1)
            ]

            logger.info("Dealt %d key shares with threshold %d", l, k)
            return self._group_key, list(self._shares)

    @property
    def group_key(self) -> GroupKey:
        with self._lock:
            self._require_keys()
            return self._group_key

    @property
    def shares(self) -> list[KeyShare]:
        with self._lock:
            self._require_keys()
            return list(self._shares)

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    def _require_keys(self):
        # Caller holds self._lock
        if self._destroyed:
            raise DealerStateError("dealer has been destroyed")
        if self._shares is None:
            raise DealerStateError("generate_keys() has not been called")

    def destroy(self):
        """Drop all Dealer-private key material. Idempotent."""
        with self._lock:
            self._p = None
            self._q = None
            self._m = None
            self._d = None
            self._group_key = None
            self._shares = None
            self._destroyed = True
        logger.debug("Dealer key material destroyed")
