"""
threshsig — Basic Usage Example

Deals a 3-of-5 threshold RSA key, ships the shares as bytes, signs with
two different quorums, and verifies the result with nothing but the
public key.
"""

import logging
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from threshsig import Dealer, KeyShare, SigShare


def main():
    logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s")

    k, l = 3, 5
    message = b"Transfer 10 units to account 42"

    print("=" * 50)
    print(f"  threshsig — {k}-of-{l} Threshold RSA")
    print("=" * 50)

    # The Dealer is trusted only for as long as the with-block lasts
    with Dealer(1024) as dealer:
        group_key, dealt = dealer.generate_keys(k, l)
        wrapped = [share.wrap() for share in dealt]

    print(f"\nGroup modulus: {group_key.bit_length} bits, e = {group_key.e}")
    print(f"Dealt {len(wrapped)} shares ({len(wrapped[0])} bytes each)")
    print(group_key.to_pem().decode())

    # Each participant unwraps only its own share
    participants = {}
    for data in wrapped:
        share = KeyShare.unwrap(data)
        participants[share.index] = share

    for quorum in ([1, 2, 3], [5, 2, 4]):
        sigs = [participants[i].rsasign(message) for i in quorum]
        signature = SigShare.combine(message, sigs, k, l, group_key)
        status = "PASS" if group_key.verify(message, signature) else "FAIL"
        print(f"  [{status}] quorum {quorum}: {signature.hex()[:32]}...")

    # One participant signs something else
    print("\nAttempting to combine with one tampered share...")
    sigs = [participants[i].rsasign(message) for i in [1, 2]]
    sigs.append(participants[3].rsasign(b"Transfer 9999 units to account 13"))
    signature = SigShare.combine(message, sigs, k, l, group_key)
    if group_key.verify(message, signature):
        print("  ERROR: Tampered signature verified!")
    else:
        print("  Correctly rejected: the combiner does not check shares, the verifier does")

    # Below threshold
    try:
        SigShare.combine(message, sigs[:2], k, l, group_key)
    except Exception as e:
        print(f"\nTwo shares are not enough: {e}")


if __name__ == "__main__":
    main()
