# euler_order.py

from enum import Enum
from typing import Union


class InvalidEulerOrderError(ValueError):
    """Raised when a rotation order is not one of the `EulerOrder` members."""

    def __init__(self, order: object):
        self.order = order
        super().__init__(f"Unrecognized euler order {order!r}")


class EulerOrder(Enum):
    """
    Sequence of elementary rotations used to build or decompose a rotation.

    The first letter is the outermost factor of the matrix product, so XYZ
    builds Rx @ Ry @ Rz. ZYZ is the repeated-axis (proper Euler) sequence.
    """
    XYZ = 0
    YXZ = 1
    ZXY = 2
    ZYX = 3
    YZX = 4
    XZY = 5
    ZYZ = 6

    @classmethod
    def coerce(cls, order: Union["EulerOrder", str]) -> "EulerOrder":
        """
        Resolve an `EulerOrder` member or its exact name.

        Raises:
            InvalidEulerOrderError: if `order` names no member.
        """
        if isinstance(order, cls):
            return order
        if isinstance(order, str):
            member = cls.__members__.get(order)
            if member is not None:
                return member
        raise InvalidEulerOrderError(order)
