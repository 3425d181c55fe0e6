"""
Message Encoding
Hash a message and lay it out as an EMSA-PKCS1-v1_5 block (RFC 8017, 9.2).

Both signers and the combiner must map a message to the same integer below
n, and the final signature has to pass a stock RSASSA-PKCS1-v1_5 verifier,
so the encoding follows the standard exactly.
"""

from cryptography.hazmat.primitives import hashes

from threshsig.config import DEFAULT_HASH
from threshsig.errors import InvalidParameterError


# DER-encoded DigestInfo prefixes, keyed by cryptography's algorithm name
DIGEST_INFO_PREFIXES = {
    "sha1": bytes.fromhex("3021300906052b0e03021a05000414"),
    "sha224": bytes.fromhex("302d300d06096086480165030402040500041c"),
    "sha256": bytes.fromhex("3031300d060960864801650304020105000420"),
    "sha384": bytes.fromhex("3041300d060960864801650304020205000430"),
    "sha512": bytes.fromhex("3051300d060960864801650304020305000440"),
}

_ALGORITHMS = {
    "sha1": hashes.SHA1,
    "sha224": hashes.SHA224,
    "sha256": hashes.SHA256,
    "sha384": hashes.SHA384,
    "sha512": hashes.SHA512,
}


def resolve_algorithm(algorithm: hashes.HashAlgorithm | str | None = None) -> hashes.HashAlgorithm:
    """Turn None, a name, or a hash instance into a supported hash instance."""
    if algorithm is None:
        algorithm = DEFAULT_HASH
    if isinstance(algorithm, str):
        cls = _ALGORITHMS.get(algorithm.lower())
        if cls is None:
            raise InvalidParameterError(f"unsupported digest {algorithm!r}")
        return cls()
    if algorithm.name not in DIGEST_INFO_PREFIXES:
        raise InvalidParameterError(f"unsupported digest {algorithm.name!r}")
    return algorithm


def digest(message: bytes, algorithm: hashes.HashAlgorithm) -> bytes:
    h = hashes.Hash(algorithm)
    h.update(message)
    return h.finalize()


def emsa_pkcs1_v15(message: bytes, em_len: int, algorithm: hashes.HashAlgorithm) -> bytes:
    """
    Build the encoded message 0x00 || 0x01 || PS || 0x00 || DigestInfo.

    Args:
        message: The raw message bytes.
        em_len: Target length in bytes (the modulus byte length).
        algorithm: Resolved hash algorithm.

    Returns:
        em_len bytes.

    Raises:
        InvalidParameterError: If the modulus is too short for this digest.
    """
    t = DIGEST_INFO_PREFIXES[algorithm.name] + digest(message, algorithm)
    if em_len < len(t) + 11:
        raise InvalidParameterError(
            f"{em_len}-byte modulus is too short for a {algorithm.name} encoding"
        )
    padding = b"\xff" * (em_len - len(t) - 3)
    return b"\x00\x01" + padding + b"\x00" + t


def message_to_int(message: bytes, n: int, algorithm: hashes.HashAlgorithm | str | None = None) -> int:
    """The integer H(message) that signers and the combiner exponentiate."""
    algorithm = resolve_algorithm(algorithm)
    em_len = (n.bit_length() + 7) // 8
    return int.from_bytes(emsa_pkcs1_v15(message, em_len, algorithm), "big")
