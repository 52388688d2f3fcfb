# transform_matrix.py

import logging
from collections.abc import Sequence
from numpy import array as np_array
from numpy import array2string as np_array2string
from numpy import array_equal as np_array_equal
from numpy import float64 as np_float64
from numpy import ndarray
from typing import Iterable, List, Optional, Tuple, Union

from rigidframe.euler_order import EulerOrder
from rigidframe.geometry import (
    BRANCH_FULL,
    euler_to_rotation,
    matrix_multiply,
    quaternion_multiply,
    quaternion_to_rotation,
    rotation_to_euler,
    rotation_to_quaternion,
)

logger = logging.getLogger(__name__)

# preallocate the identity for performance
_IDENTITY = np_array(
    [1.0, 0.0, 0.0, 0.0,
     0.0, 1.0, 0.0, 0.0,
     0.0, 0.0, 1.0, 0.0,
     0.0, 0.0, 0.0, 1.0],
    dtype=np_float64,
)

# element indices returned by to_3x3; index 2 appears twice
_INDICES_3X3 = (0, 1, 2, 4, 5, 6, 2, 6, 10)

OrderLike = Union[EulerOrder, str]


def _as_elements(values: Iterable[float]) -> ndarray:
    if not isinstance(values, (Sequence, ndarray)):
        # numpy reads a generator as a single object, not as its items
        values = list(values)
    elements = np_array(values, dtype=np_float64)
    if elements.shape != (16,):
        raise ValueError(
            f"Expected 16 elements, got array of shape {elements.shape}")
    return elements


def _check_matrix(other: object) -> None:
    if not isinstance(other, TransformMatrix):
        raise TypeError(
            f"Expected a TransformMatrix, got {type(other).__name__}")


class TransformMatrix:
    """
    A 4x4 homogeneous transformation stored as 16 floats in column-major order.

    Element i is row i % 4, column i // 4: the rotation block occupies
    0, 1, 2, 4, 5, 6, 8, 9, 10 and the translation occupies 12, 13, 14.

    Setters (`set_*`, `multiply`, `transform`, `rotate`) modify this matrix and
    return it so calls can be chained. `multiplied`, `apply_quaternion`,
    `rotated`, `clone` and the `@` operator return a new matrix and leave this
    one unchanged. No two instances ever share storage.
    """
    __slots__ = ("_elements",)

    def __init__(self, elements: Optional[Iterable[float]] = None):
        if elements is None:
            self._elements = _IDENTITY.copy()
        else:
            self._elements = _as_elements(elements)

    @classmethod
    def identity(cls) -> "TransformMatrix":
        """
        Create an identity TransformMatrix.

        Returns:
            A new TransformMatrix with no rotation and no translation.
        """
        return cls()

    @classmethod
    def from_array(cls, values: Iterable[float]) -> "TransformMatrix":
        """
        Create a TransformMatrix from 16 column-major values.

        Raises:
            ValueError: if `values` does not hold exactly 16 numbers.
        """
        return cls(values)

    @classmethod
    def from_translation(cls, x: float, y: float, z: float) -> "TransformMatrix":
        """Create a pure translation."""
        return cls().set_position(x, y, z)

    @classmethod
    def from_euler(cls, x: float, y: float, z: float, order: OrderLike = EulerOrder.XYZ) -> "TransformMatrix":
        """Create a pure rotation from Euler angles in degrees."""
        return cls().set_rotation(x, y, z, order)

    @classmethod
    def from_quaternion(cls, x: float, y: float, z: float, w: float) -> "TransformMatrix":
        """Create a pure rotation from an (x, y, z, w) quaternion."""
        return cls().set_rotation_from_quaternion(x, y, z, w)

    #########
    # Getters
    #

    @property
    def elements(self) -> ndarray:
        """
        A copy of the 16 column-major elements.

        Returns:
            A new 1D float64 array; writing to it does not affect this matrix.
        """
        return self._elements.copy()

    def to_array(self) -> ndarray:
        """
        Convert the matrix to a flat array.

        Returns:
            A new 1D array of 16 floats in column-major order.
        """
        return self._elements.copy()

    def to_list(self) -> List[float]:
        """
        Convert the matrix to a list of floats.

        Returns:
            A list of 16 floats in column-major order.
        """
        return self._elements.tolist()

    def to_3x3(self) -> ndarray:
        """
        Extract nine elements of the rotation block.

        The elements are taken from indices 0, 1, 2, 4, 5, 6, 2, 6, 10 in that
        order. Slot 6 repeats element 2 rather than holding element 8; callers
        depend on this layout.

        Returns:
            A new 1D array of 9 floats.
        """
        return self._elements[list(_INDICES_3X3)]

    #########
    # Setters
    #

    def set_from_array(self, values: Iterable[float]) -> "TransformMatrix":
        """
        Replace all 16 elements, copying them in column-major order.

        Nothing is validated beyond the element count, so any affine or
        projective matrix can be stored.

        Raises:
            ValueError: if `values` does not hold exactly 16 numbers. The matrix
                is left unchanged.
        """
        self._elements = _as_elements(values)
        return self

    def set_position(self, x: float, y: float, z: float) -> "TransformMatrix":
        """
        Overwrite the translation (elements 12, 13, 14).

        Returns:
            self, with the rotation block and bottom row untouched.
        """
        self._elements[12] = x
        self._elements[13] = y
        self._elements[14] = z
        return self

    def set_rotation(self, x: float, y: float, z: float, order: OrderLike = EulerOrder.XYZ) -> "TransformMatrix":
        """
        Overwrite the rotation block from Euler angles in degrees.

        For ZYZ, a y angle of 0 or of a half turn (y rounds to 3.1416 rad at
        four decimals) collapses the rotation onto the z axis. Only elements
        0, 1, 4 and 5 are written in that case; elements 2, 6, 8, 9 and 10
        keep whatever they held.

        Args:
            x: rotation about X in degrees (the first Z rotation for ZYZ).
            y: rotation about Y in degrees.
            z: rotation about Z in degrees (the second Z rotation for ZYZ).
            order: an EulerOrder or its name.

        Returns:
            self with the updated rotation.

        Raises:
            InvalidEulerOrderError: if `order` is not supported. The matrix is
                left unchanged.
        """
        order = EulerOrder.coerce(order)
        branch = euler_to_rotation(
            self._elements, float(x), float(y), float(z), order.value)
        if branch != BRANCH_FULL:
            logger.debug(
                "Degenerate %s rotation (%s, %s, %s): only in-plane elements written",
                order.name, x, y, z)
        return self

    def set_rotation_from_quaternion(self, x: float, y: float, z: float, w: float) -> "TransformMatrix":
        """
        Overwrite the rotation block from an (x, y, z, w) quaternion.

        The quaternion is not normalized; pass a unit quaternion for a pure
        rotation.

        Returns:
            self with the updated rotation.
        """
        quaternion_to_rotation(
            self._elements, float(x), float(y), float(z), float(w))
        return self

    #########
    # Composition
    #

    def multiplied(self, other: "TransformMatrix") -> "TransformMatrix":
        """
        Compose this matrix with another.

        Args:
            other: the transform applied first.

        Returns:
            A new TransformMatrix equal to self @ other.

        Raises:
            TypeError: if `other` is not a TransformMatrix.
        """
        _check_matrix(other)
        return self.__class__(matrix_multiply(self._elements, other._elements))

    def multiply(self, other: "TransformMatrix") -> "TransformMatrix":
        """
        Replace this matrix with self @ other.

        Returns:
            self.

        Raises:
            TypeError: if `other` is not a TransformMatrix. The matrix is left
                unchanged.
        """
        _check_matrix(other)
        self._elements = matrix_multiply(self._elements, other._elements)
        return self

    def transform(self, other: "TransformMatrix") -> "TransformMatrix":
        """Alias for `multiply`."""
        return self.multiply(other)

    def apply_quaternion(self, x: float, y: float, z: float, w: float) -> "TransformMatrix":
        """
        Rotate by an (x, y, z, w) quaternion.

        The current rotation is extracted as a quaternion q and combined with
        the argument p as q * p. The result is a new pure rotation: the
        translation, scale and bottom row of this matrix are not carried over.

        Returns:
            A new TransformMatrix.
        """
        product = quaternion_multiply(
            rotation_to_quaternion(self._elements),
            np_array([x, y, z, w], dtype=np_float64),
        )
        return self.__class__().set_rotation_from_quaternion(*product)

    def rotated(self, x: float, y: float, z: float, order: OrderLike = EulerOrder.XYZ) -> "TransformMatrix":
        """
        Rotate by Euler angles in degrees.

        Returns:
            A new TransformMatrix, see `apply_quaternion`.
        """
        qx, qy, qz, qw = self.__class__.from_euler(x, y, z, order).to_quaternion()
        return self.apply_quaternion(qx, qy, qz, qw)

    def rotate(self, x: float, y: float, z: float, order: OrderLike = EulerOrder.XYZ) -> "TransformMatrix":
        """
        Rotate this matrix in place by Euler angles in degrees.

        The matrix is replaced by the result of `rotated`, so any translation
        it held is lost.

        Returns:
            self.
        """
        self._elements = self.rotated(x, y, z, order)._elements
        return self

    #########
    # Conversions
    #

    def to_quaternion(self) -> ndarray:
        """
        Extract the rotation as a quaternion.

        Returns:
            A 4-element array (x, y, z, w). It is not normalized, so a scaled
            rotation block gives a scaled quaternion.
        """
        return rotation_to_quaternion(self._elements)

    def to_euler(self, order: OrderLike = EulerOrder.XYZ) -> Tuple[float, float, float]:
        """
        Extract the rotation as Euler angles in degrees.

        Near gimbal lock (the middle angle at +-90 degrees, or 0/180 for ZYZ)
        the decomposition is not unique; one outer angle is reported as 0.

        Returns:
            A 3-element tuple (x, y, z).

        Raises:
            InvalidEulerOrderError: if `order` is not supported.
        """
        order = EulerOrder.coerce(order)
        return rotation_to_euler(self._elements, order.value)

    def clone(self) -> "TransformMatrix":
        """
        Create a copy of this matrix.

        Returns:
            A new TransformMatrix with its own copy of the elements.
        """
        return self.__class__(self._elements)

    def copy(self) -> "TransformMatrix":
        """Alias for `clone`."""
        return self.clone()

    #########
    # Dunder methods
    #

    def __matmul__(self, other: "TransformMatrix") -> "TransformMatrix":
        """
        Compose transforms: `self @ other` applies `other` first, then `self`.
        """
        if not isinstance(other, TransformMatrix):
            return NotImplemented
        return self.multiplied(other)

    def __eq__(self, other: object) -> bool:
        """
        True if `other` is a TransformMatrix with exactly the same elements.
        """
        if not isinstance(other, TransformMatrix):
            return NotImplemented
        return np_array_equal(self._elements, other._elements)

    def __repr__(self) -> str:
        """
        Class name and the matrix in row-major reading order.
        """
        cls = self.__class__.__name__
        mat = np_array2string(self._elements.reshape(4, 4).T,
                              precision=6, separator=', ')
        return f"{cls}(\n{mat}\n)"

    def __str__(self) -> str:
        return self.__repr__()

    def __copy__(self) -> "TransformMatrix":
        return self.clone()

    def __deepcopy__(self, memo) -> "TransformMatrix":
        # the elements are plain floats, so a copy is already deep
        return self.clone()

    def __reduce__(self):
        """
        Pickle support: reduces to (class, (elements,))
        """
        return (self.__class__, (self._elements.tolist(),))
