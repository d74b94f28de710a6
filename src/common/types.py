"""
どこで: `common` の型定義。
何を: Vec2/Vec3/RGB などの軽量エイリアス（組込みジェネリックで記述）。
なぜ: 依存の少ない場所に配置して循環と分散定義を避けるため。
"""

Vec2 = tuple[float, float]
Vec3 = tuple[float, float, float]

# 色: 0–1 の浮動小数（シーン内部）と 0–255 の整数（描画出力）を区別する
RGB01 = tuple[float, float, float]
RGB8 = tuple[int, int, int]
RGBA8 = tuple[int, int, int, float]  # alpha のみ 0–1


__all__ = ["Vec2", "Vec3", "RGB01", "RGB8", "RGBA8"]
