"""
MusicXML pitch 解析与绝对音高（MIDI note number）转换。

定位：
- 时间线上的每个 NoteEvent 都携带绝对音高（MIDI）；本模块提供 MusicXML <pitch> → MIDI 的最小实现。

约束：
- 与编辑器侧不同，回放侧不做“正确地失败”：缺字段走默认值，未知 step 视为 C。
- 不做范围裁剪；极端 octave/alter 会得到 0..127 之外的值，原样交给调用方。
"""

from __future__ import annotations

from dataclasses import dataclass
import xml.etree.ElementTree as ET

from ..utils.xml_text import parse_int


STEP_TO_SEMITONE = {
    "C": 0,
    "D": 2,
    "E": 4,
    "F": 5,
    "G": 7,
    "A": 9,
    "B": 11,
}

DEFAULT_OCTAVE = 4


@dataclass(frozen=True)
class MusicXmlPitch:
    """MusicXML pitch 三元组（step/alter/octave）。"""

    step: str
    octave: int = DEFAULT_OCTAVE
    alter: int = 0

    def to_midi(self) -> int:
        """转换为 MIDI note number（C4=60）。"""

        # MusicXML octave 定义：C4 为中央 C；MIDI 以 C-1=0，因此 midi = (octave+1)*12 + pc
        offset = STEP_TO_SEMITONE.get(self.step.strip().upper(), 0)
        return 12 * (int(self.octave) + 1) + offset + int(self.alter)


def pitch_from_element(pitch_el: ET.Element) -> MusicXmlPitch:
    step = (pitch_el.findtext("step") or "C").strip() or "C"
    octave = parse_int(pitch_el.findtext("octave"), default=DEFAULT_OCTAVE)
    alter = parse_int(pitch_el.findtext("alter"), default=0)
    return MusicXmlPitch(step=step, octave=octave, alter=alter)
