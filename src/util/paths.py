"""
どこで: `util.paths`。
何を: スクリーンショット保存先ディレクトリの生成と解決ユーティリティを提供する。
なぜ: ランタイムから簡潔に保存先を扱え、並行呼び出しでも安全に作成できるようにするため。
"""

from __future__ import annotations

import os
from pathlib import Path

from .utils import _find_project_root


def ensure_screenshots_dir() -> Path:
    """スクリーンショット出力先 `data/screenshot/` を作成して返す。

    - 環境変数 `SHB_DATA_DIR` があればその配下、なければプロジェクトルート直下に作成する。
    - 既存の場合もそのまま Path を返す。
    - 並行呼び出しに対して `exist_ok=True` で安全。
    """
    env = os.getenv("SHB_DATA_DIR")
    root = Path(env) if env else _find_project_root(Path(__file__).parent) / "data"
    out = root / "screenshot"
    out.mkdir(parents=True, exist_ok=True)
    return out
