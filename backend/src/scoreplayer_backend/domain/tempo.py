"""
全曲速度（tempo BPM）提取。

约定：
- 取文档中第一个 `<sound tempo="…">`（文档顺序，不限定 part/measure）；
  没有时退而取第一个 `<metronome><per-minute>`。
- `<sound tempo>` 优先于 metronome，即使 metronome 在文档中出现得更早。
- 小数向零截断；缺失、不可解析或 <= 0 时使用默认值（120）。
- 全曲只取一个速度；逐小节变速不建模。
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET

from ..utils.xml_text import parse_number


logger = logging.getLogger(__name__)

DEFAULT_TEMPO_BPM = 120


def _first_sound_tempo(root: ET.Element) -> str | None:
    for sound in root.iter("sound"):
        tempo = sound.get("tempo")
        if tempo is not None:
            return tempo
    return None


def _first_metronome_per_minute(root: ET.Element) -> str | None:
    for metronome in root.iter("metronome"):
        per_minute = metronome.findtext("per-minute")
        if per_minute is not None:
            return per_minute
    return None


def extract_tempo_bpm(root: ET.Element, *, default_bpm: int = DEFAULT_TEMPO_BPM) -> int:
    raw = _first_sound_tempo(root)
    if raw is None:
        raw = _first_metronome_per_minute(root)

    value = parse_number(raw)
    if value is None or int(value) <= 0:
        logger.debug("tempo marking missing or unusable (%r); using default %d", raw, default_bpm)
        return default_bpm
    return int(value)
