"""
路径定位工具。

定位：
- 规则表等随包分发的数据文件放在 `scoreplayer_backend/data/` 下，运行期只从这里读取。
"""

from __future__ import annotations

from pathlib import Path


def package_root() -> Path:
    return Path(__file__).resolve().parents[1]


def data_dir() -> Path:
    return package_root() / "data"


def default_voice_labels_path() -> Path:
    return data_dir() / "voice_labels.yaml"
