"""
MusicXML 读取：把文档文本解析为“回放所需的最小结构”（part → measure → note）。

定位：
- 这是时间线重建的输入层：只保留 Timeline Builder 会用到的字段，其余元素（direction、barline、
  backup/forward 等导航标记）在这里就被丢弃。
- 输出为不可变 dataclass，便于按 part 独立（甚至并行）处理。

边界：
- 只有“不是良构 XML”才算失败（ParseError）；缺字段一律按默认值处理，不在这里报错。
- 只支持 score-partwise 的层级（part 下直接是 measure）。
"""

from __future__ import annotations

from dataclasses import dataclass
import xml.etree.ElementTree as ET

from .errors import ParseError
from .pitch import MusicXmlPitch, pitch_from_element
from .voice_labels import PartDeclaration
from ..utils.xml_text import parse_int, parse_number, strip


DEFAULT_VOICE = "1"


@dataclass(frozen=True)
class ScoreTime:
    """小节拍号（time signature）。"""

    beats: float
    beat_type: float

    def quarter_beats(self) -> float:
        return self.beats * 4 / self.beat_type


@dataclass(frozen=True)
class ScoreNote:
    voice: str
    duration_ticks: int
    is_chord: bool
    is_rest: bool
    pitch: MusicXmlPitch | None


@dataclass(frozen=True)
class ScoreMeasure:
    divisions: int | None
    time: ScoreTime | None
    notes: tuple[ScoreNote, ...]


@dataclass(frozen=True)
class ScorePart:
    part_id: str
    measures: tuple[ScoreMeasure, ...]


@dataclass(frozen=True)
class ScoreView:
    declarations: tuple[PartDeclaration, ...]
    parts: tuple[ScorePart, ...]


def parse_musicxml(xml: str | bytes) -> ET.Element:
    if not xml.strip():
        raise ParseError("MusicXML 为空")
    try:
        return ET.fromstring(xml)
    except ET.ParseError as e:
        raise ParseError(f"MusicXML 不是良构 XML：{e}") from e


def _read_declarations(root: ET.Element) -> tuple[PartDeclaration, ...]:
    out: list[PartDeclaration] = []
    for sp in root.iter("score-part"):
        name = sp.findtext(".//part-name")
        out.append(PartDeclaration(part_id=sp.get("id") or "", name=name or None))
    return tuple(out)


def _read_divisions(measure: ET.Element) -> int | None:
    # 非正数/不可解析的 divisions 视为未声明，沿用上一小节的值。
    d = parse_int(measure.findtext("attributes/divisions"), default=0)
    return d if d > 0 else None


def _read_time(measure: ET.Element) -> ScoreTime | None:
    time_el = measure.find("attributes/time")
    if time_el is None:
        return None
    beats = parse_number(time_el.findtext("beats"))
    beat_type = parse_number(time_el.findtext("beat-type"))
    if beats is None or beat_type is None or beats <= 0 or beat_type <= 0:
        return None
    return ScoreTime(beats=beats, beat_type=beat_type)


def _read_note(note: ET.Element) -> ScoreNote:
    pitch_el = note.find("pitch")
    return ScoreNote(
        voice=strip(note.findtext("voice")) or DEFAULT_VOICE,
        duration_ticks=parse_int(note.findtext("duration"), default=0),
        is_chord=note.find("chord") is not None,
        is_rest=note.find("rest") is not None,
        pitch=pitch_from_element(pitch_el) if pitch_el is not None else None,
    )


def _read_measure(measure: ET.Element) -> ScoreMeasure:
    # 只看 measure 的直接子元素，保持文档顺序；backup/forward 不影响时间线。
    notes = tuple(_read_note(el) for el in measure if el.tag == "note")
    return ScoreMeasure(
        divisions=_read_divisions(measure),
        time=_read_time(measure),
        notes=notes,
    )


def read_score_view(root: ET.Element) -> ScoreView:
    parts: list[ScorePart] = []
    for part in root.iter("part"):
        measures = tuple(_read_measure(m) for m in part.iter("measure"))
        parts.append(ScorePart(part_id=part.get("id") or "", measures=measures))
    return ScoreView(declarations=_read_declarations(root), parts=tuple(parts))
