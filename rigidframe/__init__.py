"""
rigidframe: 4x4 homogeneous transformation matrices with Euler angle and
quaternion conversions.

Matrices are stored column-major as 16 floats. Euler angles are in degrees and
quaternions are (x, y, z, w).
"""

__version__ = version = "0.1.0"

# exposing the public API of the package
from rigidframe.euler_order import EulerOrder, InvalidEulerOrderError
from rigidframe.scalar import clamp, degrees, radians, round_decimal
from rigidframe.transform_matrix import TransformMatrix

__all__ = [
    "TransformMatrix",
    "EulerOrder",
    "InvalidEulerOrderError",
    "clamp",
    "degrees",
    "radians",
    "round_decimal",
]
