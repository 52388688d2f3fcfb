# geometry.py
#
# numba kernels operating on flat, column-major 4x4 matrices. Element i sits at
# row i % 4, column i // 4, so the rotation block is
#
#     m11 m12 m13     [0] [4] [8]
#     m21 m22 m23  =  [1] [5] [9]
#     m31 m32 m33     [2] [6] [10]
#
# and the translation is [12] [13] [14].

import math
import numpy as np
from numpy import float64 as np_float64
from numpy import ndarray
from numba import njit
from rigidframe.scalar import clamp, degrees, radians, round_decimal

from numba.core.errors import NumbaPerformanceWarning
import warnings
warnings.filterwarnings("ignore", category=NumbaPerformanceWarning)

# |element| at or above this switches euler extraction to the gimbal-lock branch
GIMBAL_THRESHOLD = 0.9999999

# a ZYZ middle angle (radians) that rounds to this is treated as a half turn
ZYZ_FLIP_ANGLE = 3.1416
ZYZ_FLIP_DECIMALS = 4

# rotation orders, matching EulerOrder values
ORDER_XYZ = 0
ORDER_YXZ = 1
ORDER_ZXY = 2
ORDER_ZYX = 3
ORDER_YZX = 4
ORDER_XZY = 5
ORDER_ZYZ = 6

# which branch euler_to_rotation took
BRANCH_FULL = 0
BRANCH_ZYZ_ALIGNED = 1
BRANCH_ZYZ_FLIPPED = 2


@njit(cache=True)
def euler_to_rotation(elements: ndarray, x: float, y: float, z: float, order: int) -> int:
    """
    Write the rotation block of `elements` from Euler angles in degrees.

    Only elements 0, 1, 2, 4, 5, 6, 8, 9 and 10 are written. For ZYZ with a
    middle angle of 0 or a half turn the rotation collapses onto the z axis
    and only elements 0, 1, 4 and 5 are written; the rest keep their values.

    Parameters:
        elements (ndarray): 16-element column-major matrix, modified in place.
        x, y, z (float): rotation angles in degrees. For ZYZ these are the
            first z angle, the y angle and the second z angle.
        order (int): one of the ORDER_* codes.

    Returns:
        int: BRANCH_FULL, BRANCH_ZYZ_ALIGNED or BRANCH_ZYZ_FLIPPED.
    """
    ax, ay, az = radians(x), radians(y), radians(z)
    cx, sx = math.cos(ax), math.sin(ax)
    cy, sy = math.cos(ay), math.sin(ay)
    cz, sz = math.cos(az), math.sin(az)

    if order == ORDER_XYZ:
        ae, af, be, bf = cx * cz, cx * sz, sx * cz, sx * sz

        elements[0] = cy * cz
        elements[4] = -cy * sz
        elements[8] = sy

        elements[1] = af + be * sy
        elements[5] = ae - bf * sy
        elements[9] = -sx * cy

        elements[2] = bf - ae * sy
        elements[6] = be + af * sy
        elements[10] = cx * cy

    elif order == ORDER_YXZ:
        ce, cf, de, df = cy * cz, cy * sz, sy * cz, sy * sz

        elements[0] = ce + df * sx
        elements[4] = de * sx - cf
        elements[8] = cx * sy

        elements[1] = cx * sz
        elements[5] = cx * cz
        elements[9] = -sx

        elements[2] = cf * sx - de
        elements[6] = df + ce * sx
        elements[10] = cx * cy

    elif order == ORDER_ZXY:
        ce, cf, de, df = cy * cz, cy * sz, sy * cz, sy * sz

        elements[0] = ce - df * sx
        elements[4] = -cx * sz
        elements[8] = de + cf * sx

        elements[1] = cf + de * sx
        elements[5] = cx * cz
        elements[9] = df - ce * sx

        elements[2] = -cx * sy
        elements[6] = sx
        elements[10] = cx * cy

    elif order == ORDER_ZYX:
        ae, af, be, bf = cx * cz, cx * sz, sx * cz, sx * sz

        elements[0] = cy * cz
        elements[4] = be * sy - af
        elements[8] = ae * sy + bf

        elements[1] = cy * sz
        elements[5] = bf * sy + ae
        elements[9] = af * sy - be

        elements[2] = -sy
        elements[6] = sx * cy
        elements[10] = cx * cy

    elif order == ORDER_YZX:
        ac, ad, bc, bd = cx * cy, cx * sy, sx * cy, sx * sy

        elements[0] = cy * cz
        elements[4] = bd - ac * sz
        elements[8] = bc * sz + ad

        elements[1] = sz
        elements[5] = cx * cz
        elements[9] = -sx * cz

        elements[2] = -sy * cz
        elements[6] = ad * sz + bc
        elements[10] = ac - bd * sz

    elif order == ORDER_XZY:
        ac, ad, bc, bd = cx * cy, cx * sy, sx * cy, sx * sy

        elements[0] = cy * cz
        elements[4] = -sz
        elements[8] = sy * cz

        elements[1] = ac * sz + bd
        elements[5] = cx * cz
        elements[9] = ad * sz - bc

        elements[2] = bc * sz - ad
        elements[6] = sx * cz
        elements[10] = bd * sz + ac

    elif order == ORDER_ZYZ:
        if sy == 0.0:
            elements[0] = cx * cz - sx * sz
            elements[4] = -cz * sx - cx * sz

            elements[1] = cz * sx + cx * sz
            elements[5] = cx * cz - sx * sz
            return BRANCH_ZYZ_ALIGNED

        if round_decimal(ay, ZYZ_FLIP_DECIMALS) == ZYZ_FLIP_ANGLE:
            elements[0] = -cx * cz - sx * sz
            elements[4] = -cz * sx + cx * sz

            elements[1] = -cz * sx + cx * sz
            elements[5] = cx * cz + sx * sz
            return BRANCH_ZYZ_FLIPPED

        elements[0] = cx * cy * cz - sx * sz
        elements[4] = -cz * sx - cy * cx * sz
        elements[8] = cx * sy

        elements[1] = sx * cy * cz + cx * sz
        elements[5] = cx * cz - cy * sx * sz
        elements[9] = sx * sy

        elements[2] = -sy * cz
        elements[6] = sy * sz
        elements[10] = cy

    else:
        raise ValueError("Unrecognized euler order")

    return BRANCH_FULL


@njit(cache=True)
def quaternion_to_rotation(elements: ndarray, x: float, y: float, z: float, w: float) -> None:
    """
    Write the rotation block of `elements` from an (x, y, z, w) quaternion.

    The quaternion is used as given; a non-unit quaternion yields a scaled block.
    """
    x2, y2, z2 = x + x, y + y, z + z
    xx, xy, xz = x * x2, x * y2, x * z2
    yy, yz, zz = y * y2, y * z2, z * z2
    wx, wy, wz = w * x2, w * y2, w * z2

    elements[0] = 1.0 - (yy + zz)
    elements[1] = xy + wz
    elements[2] = xz - wy

    elements[4] = xy - wz
    elements[5] = 1.0 - (xx + zz)
    elements[6] = yz + wx

    elements[8] = xz + wy
    elements[9] = yz - wx
    elements[10] = 1.0 - (xx + yy)


@njit(cache=True)
def rotation_to_quaternion(elements: ndarray) -> ndarray:
    """
    Extract an (x, y, z, w) quaternion from the rotation block.

    Branches on the trace, then on the largest diagonal element, so the
    square root argument never approaches zero. The result is not normalized.
    """
    m11, m12, m13 = elements[0], elements[4], elements[8]
    m21, m22, m23 = elements[1], elements[5], elements[9]
    m31, m32, m33 = elements[2], elements[6], elements[10]

    trace = m11 + m22 + m33

    if trace > 0.0:
        s = 0.5 / math.sqrt(trace + 1.0)
        w = 0.25 / s
        x = (m32 - m23) * s
        y = (m13 - m31) * s
        z = (m21 - m12) * s
    elif m11 > m22 and m11 > m33:
        s = 2.0 * math.sqrt(1.0 + m11 - m22 - m33)
        w = (m32 - m23) / s
        x = 0.25 * s
        y = (m12 + m21) / s
        z = (m13 + m31) / s
    elif m22 > m33:
        s = 2.0 * math.sqrt(1.0 + m22 - m11 - m33)
        w = (m13 - m31) / s
        x = (m12 + m21) / s
        y = 0.25 * s
        z = (m23 + m32) / s
    else:
        s = 2.0 * math.sqrt(1.0 + m33 - m11 - m22)
        w = (m21 - m12) / s
        x = (m13 + m31) / s
        y = (m23 + m32) / s
        z = 0.25 * s

    out = np.empty(4, dtype=np_float64)
    out[0], out[1], out[2], out[3] = x, y, z, w
    return out


@njit(cache=True)
def rotation_to_euler(elements: ndarray, order: int) -> tuple[float, float, float]:
    """
    Decompose the rotation block into Euler angles in degrees.

    The middle angle comes from the asin of a clamped element. When that
    element's magnitude reaches GIMBAL_THRESHOLD the two outer axes line up,
    one outer angle is reported as 0 and the other absorbs the whole rotation.

    Parameters:
        elements (ndarray): 16-element column-major matrix.
        order (int): one of the ORDER_* codes.

    Returns:
        tuple[float, float, float]: (x, y, z) in degrees.
    """
    m11, m12, m13 = elements[0], elements[4], elements[8]
    m21, m22, m23 = elements[1], elements[5], elements[9]
    m31, m32, m33 = elements[2], elements[6], elements[10]

    x = 0.0
    y = 0.0
    z = 0.0
    if order == ORDER_XYZ:
        y = math.asin(clamp(m13, -1.0, 1.0))
        if abs(m13) < GIMBAL_THRESHOLD:
            x = math.atan2(-m23, m33)
            z = math.atan2(-m12, m11)
        else:
            x = math.atan2(m32, m22)
            z = 0.0

    elif order == ORDER_YXZ:
        x = math.asin(-clamp(m23, -1.0, 1.0))
        if abs(m23) < GIMBAL_THRESHOLD:
            y = math.atan2(m13, m33)
            z = math.atan2(m21, m22)
        else:
            y = math.atan2(-m31, m11)
            z = 0.0

    elif order == ORDER_ZXY:
        x = math.asin(clamp(m32, -1.0, 1.0))
        if abs(m32) < GIMBAL_THRESHOLD:
            y = math.atan2(-m31, m33)
            z = math.atan2(-m12, m22)
        else:
            y = 0.0
            z = math.atan2(m21, m11)

    elif order == ORDER_ZYX:
        y = math.asin(-clamp(m31, -1.0, 1.0))
        if abs(m31) < GIMBAL_THRESHOLD:
            x = math.atan2(m32, m33)
            z = math.atan2(m21, m11)
        else:
            x = 0.0
            z = math.atan2(-m12, m22)

    elif order == ORDER_YZX:
        z = math.asin(clamp(m21, -1.0, 1.0))
        if abs(m21) < GIMBAL_THRESHOLD:
            x = math.atan2(-m23, m22)
            y = math.atan2(-m31, m11)
        else:
            x = 0.0
            y = math.atan2(m13, m33)

    elif order == ORDER_XZY:
        z = math.asin(-clamp(m12, -1.0, 1.0))
        if abs(m12) < GIMBAL_THRESHOLD:
            x = math.atan2(m32, m22)
            y = math.atan2(m13, m11)
        else:
            x = math.atan2(-m23, m33)
            y = 0.0

    elif order == ORDER_ZYZ:
        if m33 < 1.0:
            if m33 > -1.0:
                x = math.atan2(m23, m13)
                y = math.acos(m33)
                z = math.atan2(m32, -m31)
            else:
                x = -math.atan2(m21, m22)
                y = math.pi
                z = 0.0
        else:
            x = math.atan2(m21, m22)
            y = 0.0
            z = 0.0

    else:
        raise ValueError("Invalid euler order")

    return degrees(x), degrees(y), degrees(z)


@njit(cache=True)
def quaternion_multiply(a: ndarray, b: ndarray) -> ndarray:
    """Hamilton product a * b of two (x, y, z, w) quaternions."""
    ax, ay, az, aw = a[0], a[1], a[2], a[3]
    bx, by, bz, bw = b[0], b[1], b[2], b[3]

    out = np.empty(4, dtype=np_float64)
    out[0] = ax * bw + aw * bx + ay * bz - az * by
    out[1] = ay * bw + aw * by + az * bx - ax * bz
    out[2] = az * bw + aw * bz + ax * by - ay * bx
    out[3] = aw * bw - ax * bx - ay * by - az * bz
    return out


@njit(cache=True)
def matrix_multiply(a: ndarray, b: ndarray) -> ndarray:
    """Product a @ b of two column-major 4x4 matrices, as a new flat array."""
    out = np.empty(16, dtype=np_float64)
    for col in range(4):
        for row in range(4):
            out[col * 4 + row] = (
                a[row] * b[col * 4]
                + a[4 + row] * b[col * 4 + 1]
                + a[8 + row] * b[col * 4 + 2]
                + a[12 + row] * b[col * 4 + 3]
            )
    return out
