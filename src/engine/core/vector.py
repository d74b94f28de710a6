"""
3D ベクトル演算（シーン中核の最下層モジュール）

本モジュールは、シーン全体で使用する不変ベクトル型 `Vector3` と、その純関数群
（加減算・スカラー倍・内積・正規化・軸回転）を提供する。

回転の約束事:
- 各軸回転は右手系。例として `(1, 0, 0)` を Z 軸に `π/2` 回転すると `(0, 1, 0)`。
- オイラー角の合成は常に X→Y→Z の順（`rotate_z(rotate_y(rotate_x(v, e.x), e.y), e.z)`）。
  この順序は描画結果の再現性に直結するため変更しないこと。

正規化の約束事:
- ゼロベクトルの `normalize` はゼロベクトルを返す（ゼロ除算にしない）。
  放射方向を求める箇所（爆散の中心片など）で下流の計算を全域的に保つため。

一括版:
- `rotate_points(points, euler)` は `(N, 3)` 配列に同じ式・同じ順序で回転を適用する。
  直方体の 8 頂点の変換で使用する（行ごとの結果は `rotate()` と一致）。
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable

import numpy as np


@dataclass(frozen=True, slots=True)
class Vector3:
    """不変の 3 成分ベクトル。演算はすべて新しいインスタンスを返す。"""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @classmethod
    def from_iterable(cls, values: Iterable[float]) -> "Vector3":
        """3 要素の反復可能オブジェクトから生成する（非有限値は `ValueError`）。"""
        items = [float(v) for v in values]
        if len(items) != 3:
            raise ValueError(f"Vector3 には 3 要素が必要です: {items!r}")
        if not all(math.isfinite(v) for v in items):
            raise ValueError(f"Vector3 の成分は有限値である必要があります: {items!r}")
        return cls(items[0], items[1], items[2])

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=np.float64)

    # 演算子糖衣
    def __add__(self, other: "Vector3") -> "Vector3":
        return add(self, other)

    def __sub__(self, other: "Vector3") -> "Vector3":
        return subtract(self, other)

    def __mul__(self, s: float) -> "Vector3":
        return scale(self, s)

    __rmul__ = __mul__

    def __neg__(self) -> "Vector3":
        return Vector3(-self.x, -self.y, -self.z)


ZERO = Vector3(0.0, 0.0, 0.0)


def add(a: Vector3, b: Vector3) -> Vector3:
    return Vector3(a.x + b.x, a.y + b.y, a.z + b.z)


def subtract(a: Vector3, b: Vector3) -> Vector3:
    return Vector3(a.x - b.x, a.y - b.y, a.z - b.z)


def scale(v: Vector3, s: float) -> Vector3:
    return Vector3(v.x * s, v.y * s, v.z * s)


def dot(a: Vector3, b: Vector3) -> float:
    return a.x * b.x + a.y * b.y + a.z * b.z


def length(v: Vector3) -> float:
    return math.sqrt(dot(v, v))


def normalize(v: Vector3) -> Vector3:
    """単位ベクトル化。長さ 0 のベクトルはゼロベクトルをそのまま返す。"""
    n = length(v)
    if n == 0.0:
        return ZERO
    return Vector3(v.x / n, v.y / n, v.z / n)


def rotate_x(v: Vector3, angle: float) -> Vector3:
    c, s = math.cos(angle), math.sin(angle)
    return Vector3(v.x, v.y * c - v.z * s, v.y * s + v.z * c)


def rotate_y(v: Vector3, angle: float) -> Vector3:
    c, s = math.cos(angle), math.sin(angle)
    return Vector3(v.x * c + v.z * s, v.y, -v.x * s + v.z * c)


def rotate_z(v: Vector3, angle: float) -> Vector3:
    c, s = math.cos(angle), math.sin(angle)
    return Vector3(v.x * c - v.y * s, v.x * s + v.y * c, v.z)


def rotate(v: Vector3, euler: Vector3) -> Vector3:
    """オイラー角 `euler`（ラジアン）で回転する。適用順は X→Y→Z 固定。"""
    return rotate_z(rotate_y(rotate_x(v, euler.x), euler.y), euler.z)


def rotate_points(points: np.ndarray, euler: Vector3) -> np.ndarray:
    """`(N, 3)` 配列を X→Y→Z の順に回転した新しい配列を返す（float64）。

    Parameters
    ----------
    points : np.ndarray
        形状 `(N, 3)` の座標配列。
    euler : Vector3
        各軸回転角（ラジアン）。

    Returns
    -------
    np.ndarray
        回転後の `(N, 3)` 配列（入力は変更しない）。
    """
    c = np.array(points, dtype=np.float64, copy=True)
    if c.ndim != 2 or c.shape[1] != 3:
        raise ValueError(f"points は形状 (N, 3) である必要があります: {c.shape}")

    # X 回転
    cx, sx = math.cos(euler.x), math.sin(euler.x)
    y_new = c[:, 1] * cx - c[:, 2] * sx
    z_new = c[:, 1] * sx + c[:, 2] * cx
    c[:, 1], c[:, 2] = y_new, z_new

    # Y 回転
    cy, sy = math.cos(euler.y), math.sin(euler.y)
    x_new = c[:, 0] * cy + c[:, 2] * sy
    z_new = -c[:, 0] * sy + c[:, 2] * cy
    c[:, 0], c[:, 2] = x_new, z_new

    # Z 回転
    cz, sz = math.cos(euler.z), math.sin(euler.z)
    x_new = c[:, 0] * cz - c[:, 1] * sz
    y_new = c[:, 0] * sz + c[:, 1] * cz
    c[:, 0], c[:, 1] = x_new, y_new
    return c


def rotate_point_sets(points: np.ndarray, eulers: np.ndarray) -> np.ndarray:
    """`(F, N, 3)` の点群を、群ごとのオイラー角 `(F, 3)` で X→Y→Z の順に回転する。

    `rotate_points` を多数の直方体へまとめて適用するための一括版。
    """
    c = np.array(points, dtype=np.float64, copy=True)
    e = np.asarray(eulers, dtype=np.float64)
    if c.ndim != 3 or c.shape[2] != 3:
        raise ValueError(f"points は形状 (F, N, 3) である必要があります: {c.shape}")
    if e.shape != (c.shape[0], 3):
        raise ValueError(f"eulers は形状 ({c.shape[0]}, 3) である必要があります: {e.shape}")

    cos = np.cos(e)[:, None, :]
    sin = np.sin(e)[:, None, :]

    # X 回転
    cx, sx = cos[..., 0], sin[..., 0]
    y_new = c[..., 1] * cx - c[..., 2] * sx
    z_new = c[..., 1] * sx + c[..., 2] * cx
    c[..., 1], c[..., 2] = y_new, z_new

    # Y 回転
    cy, sy = cos[..., 1], sin[..., 1]
    x_new = c[..., 0] * cy + c[..., 2] * sy
    z_new = -c[..., 0] * sy + c[..., 2] * cy
    c[..., 0], c[..., 2] = x_new, z_new

    # Z 回転
    cz, sz = cos[..., 2], sin[..., 2]
    x_new = c[..., 0] * cz - c[..., 1] * sz
    y_new = c[..., 0] * sz + c[..., 1] * cz
    c[..., 0], c[..., 1] = x_new, y_new
    return c


__all__ = [
    "Vector3",
    "ZERO",
    "add",
    "subtract",
    "scale",
    "dot",
    "length",
    "normalize",
    "rotate_x",
    "rotate_y",
    "rotate_z",
    "rotate",
    "rotate_points",
    "rotate_point_sets",
]
