from __future__ import annotations

import math
from typing import Tuple

Vector3 = Tuple[float, float, float]
# (w, x, y, z)
Quaternion = Tuple[float, float, float, float]

ZERO: Vector3 = (0.0, 0.0, 0.0)


def add(a: Vector3, b: Vector3) -> Vector3:
    return (a[0]+b[0], a[1]+b[1], a[2]+b[2])


def sub(a: Vector3, b: Vector3) -> Vector3:
    return (a[0]-b[0], a[1]-b[1], a[2]-b[2])


def scale(v: Vector3, k: float) -> Vector3:
    return (v[0]*k, v[1]*k, v[2]*k)


def dot(a: Vector3, b: Vector3) -> float:
    return a[0]*b[0] + a[1]*b[1] + a[2]*b[2]


def cross(a: Vector3, b: Vector3) -> Vector3:
    return (
        a[1]*b[2] - a[2]*b[1],
        a[2]*b[0] - a[0]*b[2],
        a[0]*b[1] - a[1]*b[0],
    )


def norm(a: Vector3) -> float:
    return math.sqrt(dot(a, a))


def distance(a: Vector3, b: Vector3) -> float:
    return norm(sub(a, b))


def normalize(v: Vector3, eps: float = 1e-15) -> Vector3:
    """Unit vector along v; the zero vector if |v| is below eps."""
    n = norm(v)
    if n < eps:
        return ZERO
    return (v[0]/n, v[1]/n, v[2]/n)


def lerp(a: Vector3, b: Vector3, t: float) -> Vector3:
    return (
        a[0] + (b[0] - a[0]) * t,
        a[1] + (b[1] - a[1]) * t,
        a[2] + (b[2] - a[2]) * t,
    )


def angle_between(a: Vector3, b: Vector3) -> float:
    na = norm(a)
    nb = norm(b)
    if na == 0.0 or nb == 0.0:
        return math.pi / 2
    c = dot(a, b) / (na * nb)
    # clamp for numeric stability
    c = max(-1.0, min(1.0, c))
    return math.acos(c)


def rot3(angle_rad: float, v: Vector3) -> Vector3:
    c = math.cos(angle_rad)
    s = math.sin(angle_rad)
    x, y, z = v
    return (c * x - s * y, s * x + c * y, z)


def rot1(angle_rad: float, v: Vector3) -> Vector3:
    c = math.cos(angle_rad)
    s = math.sin(angle_rad)
    x, y, z = v
    return (x, c * y - s * z, s * y + c * z)


def rotate_about_axis(v: Vector3, axis: Vector3, angle_rad: float) -> Vector3:
    """
    Rodrigues rotation of v about a unit axis by angle_rad (right-handed).
    """
    c = math.cos(angle_rad)
    s = math.sin(angle_rad)
    k_cross_v = cross(axis, v)
    k_dot_v = dot(axis, v)
    return (
        v[0]*c + k_cross_v[0]*s + axis[0]*k_dot_v*(1.0 - c),
        v[1]*c + k_cross_v[1]*s + axis[1]*k_dot_v*(1.0 - c),
        v[2]*c + k_cross_v[2]*s + axis[2]*k_dot_v*(1.0 - c),
    )


def orbital_plane_to_inertial(
    r_plane: Vector3,
    node_rad: float,
    inc_rad: float,
    argp_rad: float,
) -> Vector3:
    """
    Rotate a vector from the orbital plane (x toward perihelion) into the
    reference frame: R3(node) * R1(inc) * R3(argp).

    Args:
        r_plane: Vector in the orbital plane frame
        node_rad: Longitude of ascending node (radians)
        inc_rad: Inclination (radians)
        argp_rad: Argument of perihelion (radians)

    Returns:
        The same vector expressed in the reference frame
    """
    r_temp = rot3(argp_rad, r_plane)
    r_temp = rot1(inc_rad, r_temp)
    return rot3(node_rad, r_temp)


def quat_from_axis_angle(axis: Vector3, angle_rad: float) -> Quaternion:
    ax, ay, az = normalize(axis)
    h = 0.5 * angle_rad
    s = math.sin(h)
    return (math.cos(h), ax * s, ay * s, az * s)


def quat_multiply(q: Quaternion, r: Quaternion) -> Quaternion:
    w1, x1, y1, z1 = q
    w2, x2, y2, z2 = r
    return (
        w1*w2 - x1*x2 - y1*y2 - z1*z2,
        w1*x2 + x1*w2 + y1*z2 - z1*y2,
        w1*y2 - x1*z2 + y1*w2 + z1*x2,
        w1*z2 + x1*y2 - y1*x2 + z1*w2,
    )


def quat_rotate(q: Quaternion, v: Vector3) -> Vector3:
    w, x, y, z = q
    p: Quaternion = (0.0, v[0], v[1], v[2])
    conj: Quaternion = (w, -x, -y, -z)
    _w, rx, ry, rz = quat_multiply(quat_multiply(q, p), conj)
    return (rx, ry, rz)
