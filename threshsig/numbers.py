"""
Integer Arithmetic
Safe primes, Bezout coefficients, and random quadratic residues.

Everything works on plain Python ints. Prime testing and random ranges
come from pycryptodome so that a caller-supplied randfunc drives every
random choice, which makes key generation reproducible under a seed.
"""

import logging
from math import factorial

from Crypto.Random import get_random_bytes
from Crypto.Util.number import GCD, getRandomNBitInteger, getRandomRange, isPrime, sieve_base

from threshsig.errors import KeyGenerationError


logger = logging.getLogger(__name__)

# Odd primes below 17 400, for trial division of safe prime candidates
_SMALL_PRIMES = sieve_base[1:2000]


def delta(l: int) -> int:
    """The scaling constant L! that clears Lagrange denominators."""
    return factorial(l)


def egcd(a: int, b: int) -> tuple[int, int, int]:
    """
    Extended Euclid.

    Returns (g, x, y) with a*x + b*y == g == gcd(a, b).
    """
    x, y, u, v = 0, 1, 1, 0
    while a != 0:
        q, r = b // a, b % a
        m, n = x - u * q, y - v * q
        b, a, x, y, u, v = a, r, u, v, m, n
    return b, x, y


def _sieved(p_: int) -> bool:
    """True if neither p' nor 2p' + 1 has a small odd prime factor."""
    for s in _SMALL_PRIMES:
        r = p_ % s
        # r == (s - 1) / 2 means s divides 2p' + 1
        if r == 0 or r == s >> 1:
            return False
    return True


def safe_prime(bits: int, max_attempts: int, randfunc=None) -> tuple[int, int]:
    """
    Find a safe prime p = 2p' + 1 with exactly `bits` bits.

    The two top bits of p are set, so the product of two such primes has
    exactly the sum of their bit lengths. Candidates for p' are odd random
    integers with those bits forced; trial division by small primes weeds
    out most of them before either number sees a primality test.

    Args:
        bits: Bit length of p.
        max_attempts: Candidates p' to try before giving up.
        randfunc: Callable returning n random bytes.

    Returns:
        (p, p') with both prime.

    Raises:
        KeyGenerationError: If no safe prime was found within the budget.
    """
    randfunc = randfunc or get_random_bytes
    for attempt in range(1, max_attempts + 1):
        p_ = getRandomNBitInteger(bits - 1, randfunc) | (1 << (bits - 3)) | 1
        p = 2 * p_ + 1
        if not _sieved(p_):
            continue
        if isPrime(p_, randfunc=randfunc) and isPrime(p, randfunc=randfunc):
            logger.debug("Found %d-bit safe prime after %d candidates", bits, attempt)
            return p, p_

    raise KeyGenerationError(f"no {bits}-bit safe prime in {max_attempts} attempts")


def random_square(n: int, randfunc=None) -> int:
    """Random quadratic residue modulo n, from a base coprime to n."""
    randfunc = randfunc or get_random_bytes
    while True:
        r = getRandomRange(2, n, randfunc)
        if GCD(r, n) == 1:
            return (r * r) % n
