"""
Scheme Configuration
Defaults for key generation and dealing.

Nothing here is mutable process-wide state: a DealerConfig is built once
and handed to the Dealer that uses it.
"""

from dataclasses import dataclass


# Modulus sizes, in bits
DEFAULT_KEY_SIZE = 1024
MIN_KEY_SIZE = 512

# F4. Must be a prime larger than the number of shares, so that it is
# coprime with 4 * L! and the combiner's Bezout step always exists.
PUBLIC_EXPONENT = 65537

# Share indices travel in two bytes on the wire
MAX_SHARES = 0xFFFF

# Statistical hiding margin for the share exponents
SECURITY_MARGIN_BITS = 128

# Random candidates p' tried per safe prime before giving up. A 512-bit
# safe prime takes about 50 000 on average, a 1024-bit one about 200 000.
MAX_PRIME_ATTEMPTS = 2_000_000

# Digest used when the caller does not pick one
DEFAULT_HASH = "sha256"


@dataclass(frozen=True)
class DealerConfig:
    """Tunable values for a Dealer."""
    public_exponent: int = PUBLIC_EXPONENT
    security_margin_bits: int = SECURITY_MARGIN_BITS
    max_prime_attempts: int = MAX_PRIME_ATTEMPTS
