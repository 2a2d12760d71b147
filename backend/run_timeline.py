"""
ScorePlayer 时间线开发期启动脚本（未 `pip install -e .` 时使用）。

定位：
- 启动时把 `backend/src` 加到 `sys.path`，再转交给 `scoreplayer_backend.cli`。

用法：
  python backend/run_timeline.py path/to/score.musicxml --indent 2
"""

from __future__ import annotations

import sys
from pathlib import Path


def main() -> int:
    backend_dir = Path(__file__).resolve().parent
    src_dir = backend_dir / "src"
    if not src_dir.exists():
        raise RuntimeError(f"找不到后端源码目录：{src_dir}")

    sys.path.insert(0, str(src_dir))

    from scoreplayer_backend.cli import main as cli_main

    return cli_main(sys.argv[1:])


if __name__ == "__main__":
    raise SystemExit(main())
