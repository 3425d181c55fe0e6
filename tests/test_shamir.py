"""
Tests for integer Shamir sharing and the arithmetic helpers behind it.
"""

import itertools
import random
import sys
from math import factorial
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from threshsig.errors import InvalidParameterError, KeyGenerationError, ThreshSigError
from threshsig.numbers import delta, egcd, random_square, safe_prime
from threshsig.shamir import eval_polynomial, interpolate_at_zero, lagrange_coefficient, split_exponent


def test_eval_polynomial():
    """Horner evaluation matches the naive sum."""
    print("Testing polynomial evaluation...", end=" ")
    coefficients = [7, 3, 0, 5]
    for x in range(0, 10):
        expected = 7 + 3 * x + 5 * x ** 3
        assert eval_polynomial(coefficients, x) == expected
    assert eval_polynomial([], 4) == 0
    print("PASS")


def test_lagrange_coefficients_are_integers():
    """delta = L! clears every denominator for any K distinct indices."""
    print("Testing Lagrange coefficients over the integers...", end=" ")
    l = 7
    d = factorial(l)
    checked = 0
    for k in range(1, l + 1):
        for combo in itertools.combinations(range(1, l + 1), k):
            indices = list(combo)
            for j in indices:
                lagrange_coefficient(indices, j, d)
                checked += 1
    assert checked > 0
    print(f"PASS ({checked} coefficients)")


def test_lagrange_without_delta_fails():
    """Without the L! scaling, some coefficients are not integers."""
    print("Testing Lagrange without scaling...", end=" ")
    try:
        lagrange_coefficient([1, 3], 1, 1)
        print("FAIL (should have raised InvalidParameterError)")
        assert False
    except InvalidParameterError as e:
        assert isinstance(e, ThreshSigError)
    print("PASS")


def test_interpolation_any_k_points():
    """Any K shares give back delta * secret exactly."""
    print("Testing interpolation from any K shares...", end=" ")
    secret = random.getrandbits(256)
    k, l = 4, 7
    d = delta(l)
    shares = split_exponent(
        secret, threshold=k, num_shares=l,
        coeff_bound=2 ** 300, share_bound=2 ** 2048,
    )
    assert len(shares) == l

    combinations_tested = 0
    for combo in itertools.combinations(range(1, l + 1), k):
        points = {i: shares[i - 1] for i in combo}
        assert interpolate_at_zero(points, d) == d * secret, f"Failed with {combo}"
        combinations_tested += 1

    # 7 choose 4 = 35 combinations
    assert combinations_tested == 35
    print(f"PASS ({combinations_tested} combinations)")


def test_interpolation_modulo_group_order():
    """Reducing shares mod a multiple of m keeps interpolation correct mod m."""
    print("Testing interpolation after share reduction...", end=" ")
    m = 1019 * 1031
    secret = 424242 % m
    k, l = 3, 6
    d = delta(l)
    shares = split_exponent(
        secret, threshold=k, num_shares=l,
        coeff_bound=m * l, share_bound=m * d * 2 ** 16,
    )
    for share in shares:
        assert 0 <= share < m * d * 2 ** 16

    for combo in itertools.combinations(range(1, l + 1), k):
        points = {i: shares[i - 1] for i in combo}
        assert interpolate_at_zero(points, d) % m == (d * secret) % m
    print("PASS")


def test_fewer_than_k_points_miss():
    """K-1 shares do not interpolate to the secret."""
    print("Testing K-1 shares...", end=" ")
    secret = random.getrandbits(128)
    k, l = 3, 5
    d = delta(l)
    shares = split_exponent(secret, k, l, coeff_bound=2 ** 200, share_bound=2 ** 1024)
    points = {1: shares[0], 2: shares[1]}
    assert interpolate_at_zero(points, d) != d * secret
    print("PASS")


def test_egcd():
    """Bezout coefficients satisfy a*x + b*y == gcd."""
    print("Testing extended GCD...", end=" ")
    for a, b in [(3, 7), (240, 46), (4 * factorial(13) ** 2, 65537), (17, 1)]:
        g, x, y = egcd(a, b)
        assert a * x + b * y == g
        assert a % g == 0 and b % g == 0
    assert egcd(4 * factorial(13) ** 2, 65537)[0] == 1
    print("PASS")


def test_safe_prime():
    """Safe primes have the requested size and both halves are prime."""
    print("Testing safe prime search...", end=" ")
    from Crypto.Util.number import isPrime

    p, p_ = safe_prime(64, max_attempts=20_000)
    assert p == 2 * p_ + 1
    assert p.bit_length() == 64
    assert p >> 62 == 0b11
    assert isPrime(p) and isPrime(p_)
    print("PASS")


def test_safe_prime_seeded():
    """A seeded search is repeatable and counts every candidate."""
    print("Testing seeded safe prime search...", end=" ")
    first = safe_prime(256, max_attempts=2_000_000, randfunc=random.Random(11).randbytes)
    second = safe_prime(256, max_attempts=2_000_000, randfunc=random.Random(11).randbytes)
    assert first == second
    p, p_ = first
    assert p.bit_length() == 256 and p >> 254 == 0b11
    assert p % 3 == 2 and p_ % 3 == 2

    # One candidate almost never suffices at this size
    try:
        safe_prime(256, max_attempts=1, randfunc=random.Random(7).randbytes)
        print("FAIL (should have raised KeyGenerationError)")
        assert False
    except KeyGenerationError:
        pass
    print("PASS")


def test_safe_prime_budget_exhausted():
    """A zero attempt budget surfaces as KeyGenerationError."""
    print("Testing safe prime budget...", end=" ")
    try:
        safe_prime(64, max_attempts=0)
        print("FAIL (should have raised KeyGenerationError)")
        assert False
    except KeyGenerationError:
        pass
    print("PASS")


def test_random_square():
    """The verification base is a quadratic residue coprime to n."""
    print("Testing random square...", end=" ")
    from math import gcd

    p, q = 1019, 1031
    n = p * q
    for _ in range(20):
        v = random_square(n)
        assert gcd(v, n) == 1
        # Euler's criterion modulo each prime factor
        assert pow(v, (p - 1) // 2, p) == 1
        assert pow(v, (q - 1) // 2, q) == 1
    print("PASS")


def main():
    print("=" * 50)
    print("  Integer Shamir Sharing Tests")
    print("=" * 50)
    print()

    tests = [
        test_eval_polynomial,
        test_lagrange_coefficients_are_integers,
        test_lagrange_without_delta_fails,
        test_interpolation_any_k_points,
        test_interpolation_modulo_group_order,
        test_fewer_than_k_points_miss,
        test_egcd,
        test_safe_prime,
        test_safe_prime_seeded,
        test_safe_prime_budget_exhausted,
        test_random_square,
    ]

    passed = 0
    failed = 0

    for test in tests:
        try:
            test()
            passed += 1
        except Exception as e:
            print(f"FAIL: {e}")
            import traceback
            traceback.print_exc()
            failed += 1

    print()
    print(f"Results: {passed} passed, {failed} failed")
    return failed == 0


if __name__ == "__main__":
    success = main()
    sys.exit(0 if success else 1)
