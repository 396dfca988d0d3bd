"""
Elliptic-curve group operations consumed by the proofs.

A thin wrapper over the `ecdsa` package: scalar multiplication, point
addition, and the coordinate view used for hashing and serialization.
The point at infinity is represented by `ecdsa.ellipticcurve.INFINITY` and
hashed / serialized as the coordinates (0, 0).
"""

from typing import Optional, Tuple, Union
import secrets

from ecdsa import SECP256k1
from ecdsa.curves import Curve
from ecdsa.ellipticcurve import INFINITY, Point as AffinePoint, PointJacobi

Point = Union[PointJacobi, AffinePoint]


class ECOperations:
    """Group operations on a short Weierstrass curve (secp256k1 by default)."""

    def __init__(self, curve: Curve = SECP256k1):
        self.curve = curve
        self.G: PointJacobi = curve.generator
        self.n: int = curve.order
        self.p: int = curve.curve.p()
        self.b: int = curve.curve.b()

    @staticmethod
    def is_infinity(point: Optional[Point]) -> bool:
        return point is None or point == INFINITY

    def scalar_mult(self, k: int, point: Optional[Point] = None) -> Point:
        """Computes k*P (k*G when no point is given); k is reduced mod n."""
        base = self.G if point is None else point
        k = int(k) % self.n
        if k == 0 or self.is_infinity(base):
            return INFINITY
        return base * k

    def point_add(self, a: Point, b: Point) -> Point:
        if self.is_infinity(a):
            return b
        if self.is_infinity(b):
            return a
        return a + b

    def random_scalar(self) -> int:
        """Returns a uniformly random non-zero scalar."""
        return secrets.randbelow(self.n - 1) + 1

    def coords(self, point: Point) -> Tuple[int, int]:
        """Affine coordinates of a point; (0, 0) for the point at infinity."""
        if self.is_infinity(point):
            return 0, 0
        if isinstance(point, PointJacobi):
            point = point.to_affine()
        return int(point.x()), int(point.y())

    def equal(self, a: Point, b: Point) -> bool:
        return self.coords(a) == self.coords(b)

    def point_from_coords(self, x: int, y: int) -> Point:
        """
        Rebuilds a point from affine coordinates.

        Raises:
            ValueError: if (x, y) is not on the curve.
        """
        if x == 0 and y == 0:
            return INFINITY
        if not (0 <= x < self.p and 0 <= y < self.p):
            raise ValueError("point coordinates out of field range")
        if not self.curve.curve.contains_point(x, y):
            raise ValueError("point is not on the curve")
        return PointJacobi(self.curve.curve, x, y, 1, self.n)

    def hash_inputs(self) -> Tuple[int, int, int]:
        """Curve identity bound into every Fiat-Shamir challenge."""
        return self.b, self.n, self.p


# Shared read-only instance for callers that do not pick a curve.
DEFAULT_EC = ECOperations()
