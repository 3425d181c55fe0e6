"""
Shamir Sharing over the Integers
Split an RSA exponent into L shares where any K can rebuild it in the exponent.

Unlike field Shamir, nothing here is reduced modulo a public prime: the
signers never learn the group order, so interpolation has to happen over
the integers. Lagrange coefficients are rational in general; multiplying
them by delta = L! makes every one of them an exact integer.

The secret itself is never rebuilt. Combiners only ever raise partial
signatures to these coefficients.
"""

from Crypto.Util.number import getRandomRange

from threshsig.errors import InvalidParameterError


def eval_polynomial(coefficients: list[int], x: int) -> int:
    """Evaluate a polynomial at x over the integers (Horner's rule)."""
    result = 0
    for coeff in reversed(coefficients):
        result = result * x + coeff
    return result


def split_exponent(
    secret: int,
    threshold: int,
    num_shares: int,
    coeff_bound: int,
    share_bound: int,
    randfunc=None,
) -> list[int]:
    """
    Split an exponent into integer shares.

    Builds f(x) = secret + a1*x + ... + a(k-1)*x^(k-1) with every a_j drawn
    uniformly from [0, coeff_bound), then returns f(1), ..., f(N), each
    reduced modulo share_bound. share_bound must be a multiple of the group
    order so the reduction is invisible in the exponent.

    Args:
        secret: The constant term f(0).
        threshold: K, the number of shares needed.
        num_shares: N, the number of shares produced.
        coeff_bound: Exclusive upper bound for the random coefficients.
        share_bound: Modulus applied to each evaluated share.
        randfunc: Callable returning n random bytes.

    Returns:
        List of N share exponents; element i-1 belongs to index i.
    """
    coefficients = [secret]
    for _ in range(threshold - 1):
        coefficients.append(getRandomRange(0, coeff_bound, randfunc))

    shares = []
    for i in range(1, num_shares + 1):
        shares.append(eval_polynomial(coefficients, i) % share_bound)

    coefficients.clear()
    return shares


def lagrange_coefficient(indices: list[int], j: int, delta: int) -> int:
    """
    Integer Lagrange coefficient at x=0, scaled by delta.

    lambda_j = delta * prod_{m != j} (0 - i_m) / (i_j - i_m)

    The division is exact because every denominator divides L! when the
    indices are distinct and drawn from [1, L].
    """
    numerator = delta
    denominator = 1
    for m in indices:
        if m == j:
            continue
        numerator *= -m
        denominator *= j - m

    quotient, remainder = divmod(numerator, denominator)
    if remainder != 0:
        raise InvalidParameterError(f"delta does not clear the denominator for index {j}")
    return quotient


def interpolate_at_zero(points: dict[int, int], delta: int) -> int:
    """
    Return delta * f(0) from K points of f, over the integers.

    Only the Dealer uses this, to check its own dealing. Signers never
    see more than one exponent.
    """
    indices = list(points)
    return sum(lagrange_coefficient(indices, j, delta) * y for j, y in points.items())
