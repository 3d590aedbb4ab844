"""Small vector and quaternion helpers used by the geometry baker.

Vectors are plain tuples ``(x, y, z)``; quaternions are ``(x, y, z, w)``.
"""

from __future__ import annotations

import math

Vec2 = tuple[float, float]
Vec3 = tuple[float, float, float]
Quat = tuple[float, float, float, float]

ZERO: Vec3 = (0.0, 0.0, 0.0)
ONE: Vec3 = (1.0, 1.0, 1.0)
IDENTITY: Quat = (0.0, 0.0, 0.0, 1.0)


def mul(a: Vec3, b: Vec3) -> Vec3:
    """Component-wise product."""
    return (a[0] * b[0], a[1] * b[1], a[2] * b[2])


def add(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


def length(v: Vec3) -> float:
    return math.sqrt(v[0] * v[0] + v[1] * v[1] + v[2] * v[2])


def normalize(v: Vec3) -> Vec3:
    """Return *v* scaled to unit length, or the zero vector if *v* is tiny."""
    n = length(v)
    if n <= 1e-5:
        return ZERO
    return (v[0] / n, v[1] / n, v[2] / n)


def mirror_x(v: Vec3) -> Vec3:
    return (-v[0], v[1], v[2])


def quat_mul(a: Quat, b: Quat) -> Quat:
    """Hamilton product ``a * b`` (apply *b* first, then *a*)."""
    ax, ay, az, aw = a
    bx, by, bz, bw = b
    return (
        aw * bx + ax * bw + ay * bz - az * by,
        aw * by - ax * bz + ay * bw + az * bx,
        aw * bz + ax * by - ay * bx + az * bw,
        aw * bw - ax * bx - ay * by - az * bz,
    )


def rotate(q: Quat, v: Vec3) -> Vec3:
    """Rotate *v* about the origin by unit quaternion *q*."""
    qx, qy, qz, qw = q
    vx, vy, vz = v
    # t = 2 * cross(q.xyz, v)
    tx = 2.0 * (qy * vz - qz * vy)
    ty = 2.0 * (qz * vx - qx * vz)
    tz = 2.0 * (qx * vy - qy * vx)
    return (
        vx + qw * tx + (qy * tz - qz * ty),
        vy + qw * ty + (qz * tx - qx * tz),
        vz + qw * tz + (qx * ty - qy * tx),
    )


def quat_from_euler(x: float, y: float, z: float) -> Quat:
    """Quaternion from Euler angles in degrees, applied Z, then X, then Y."""
    hx, hy, hz = (math.radians(a) / 2.0 for a in (x, y, z))
    qx: Quat = (math.sin(hx), 0.0, 0.0, math.cos(hx))
    qy: Quat = (0.0, math.sin(hy), 0.0, math.cos(hy))
    qz: Quat = (0.0, 0.0, math.sin(hz), math.cos(hz))
    return quat_mul(quat_mul(qy, qx), qz)


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def face_order(scale: Vec3) -> int:
    """Winding sign for a world scale: ``clamp(trunc(sx * sz), -1, 1)``."""
    return int(clamp(math.trunc(scale[0] * scale[2]), -1, 1))
