"""
threshsig — Practical Threshold RSA Signatures
Any K of L participants sign together; fewer than K learn nothing about the key.

Three roles:
1. Dealer   — generates a safe-prime RSA key, deals L KeyShares, then is destroyed
2. KeyShare — one participant's secret exponent; produces a SigShare per message
3. SigShare — partial signatures; any K combine into one ordinary RSA signature

The combined signature is plain RSASSA-PKCS1-v1_5. Anyone with the GroupKey
verifies it with a stock RSA verifier; the private exponent is never rebuilt.

Usage:
    from threshsig import Dealer, SigShare
    with Dealer(1024) as dealer:
        group_key, shares = dealer.generate_keys(k=3, l=5)
    sigs = [share.rsasign(b"hello") for share in shares[:3]]
    signature = SigShare.combine(b"hello", sigs, 3, 5, group_key)
    assert group_key.verify(b"hello", signature)
"""

from threshsig.config import DealerConfig, DEFAULT_KEY_SIZE, MIN_KEY_SIZE
from threshsig.dealer import Dealer
from threshsig.errors import (
    ThreshSigError,
    InvalidParameterError,
    KeyGenerationError,
    InsufficientSharesError,
    InvalidIndexError,
    MalformedShareError,
    DealerStateError,
)
from threshsig.groupkey import GroupKey
from threshsig.keyshare import KeyShare
from threshsig.sigshare import SigShare, SigShareSet

__version__ = "0.1.0"
__all__ = [
    "Dealer",
    "DealerConfig",
    "DEFAULT_KEY_SIZE",
    "MIN_KEY_SIZE",
    "GroupKey",
    "KeyShare",
    "SigShare",
    "SigShareSet",
    "ThreshSigError",
    "InvalidParameterError",
    "KeyGenerationError",
    "InsufficientSharesError",
    "InvalidIndexError",
    "MalformedShareError",
    "DealerStateError",
]
