"""
时间线构建选项（TimelineOptions）与 YAML 配置加载。

约定：
- 默认值保证与历史输出逐位一致（固定 3 拍小节推进、120 BPM、单线程）。
- 选项非法时由 pydantic 抛出 ValidationError；配置文件结构不对时抛 ValueError。
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field

from .domain.voice_labels import VoiceLabelRule, default_voice_label_rules, load_voice_label_rules


MeasureAdvance = Literal["fixed", "time_signature"]


class TimelineOptions(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    default_tempo_bpm: int = Field(default=120, gt=0)
    # fixed：每小节固定推进 fixed_measure_beats 拍（默认 3，即按 3/4 拍处理，不看拍号）。
    # time_signature：按最近一次声明的拍号推进 beats * 4 / beat-type 拍。
    measure_advance: MeasureAdvance = "fixed"
    fixed_measure_beats: float = Field(default=3.0, gt=0)
    max_workers: int = Field(default=1, ge=1, le=32)
    voice_labels_path: str | None = None

    def voice_label_rules(self) -> tuple[VoiceLabelRule, ...]:
        if self.voice_labels_path is None:
            return default_voice_label_rules()
        return load_voice_label_rules(Path(self.voice_labels_path))


def load_options(path: Path) -> TimelineOptions:
    raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    if raw is None:
        return TimelineOptions()
    if not isinstance(raw, dict):
        raise ValueError(f"配置文件顶层必须是 dict：{path}")
    return TimelineOptions.model_validate(raw)
