"""
回放时间线（ScoreTimeline）数据结构。

定位：
- 这是本后端对外的唯一产物：扁平的、带绝对时间戳的音符事件列表 + 总时长 + 速度。
- notes 的顺序是文档遍历顺序（part → measure → note），**不是**按开始时间排序。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class NoteEvent:
    id: str
    voice: str
    start_time_seconds: float
    duration_seconds: float
    midi_pitch: int
    part_id: str = ""
    # 以全音符为单位的乐谱位置（beats / 4），供谱面光标同步使用。
    start_whole: float = 0.0
    end_whole: float = 0.0

    @property
    def end_time_seconds(self) -> float:
        return self.start_time_seconds + self.duration_seconds


@dataclass(frozen=True)
class ScoreTimeline:
    notes: tuple[NoteEvent, ...]
    total_duration_seconds: float
    tempo_bpm: int
    part_durations_seconds: dict[str, float] = field(default_factory=dict)

    def voices(self) -> list[str]:
        """按首次出现顺序返回时间线中的声部标签。"""

        seen: dict[str, None] = {}
        for n in self.notes:
            seen.setdefault(n.voice, None)
        return list(seen)


def note_event_to_dict(note: NoteEvent) -> dict[str, Any]:
    return {
        "id": note.id,
        "voice": note.voice,
        "part_id": note.part_id,
        "start_time_seconds": note.start_time_seconds,
        "duration_seconds": note.duration_seconds,
        "midi_pitch": note.midi_pitch,
        "start_whole": note.start_whole,
        "end_whole": note.end_whole,
    }


def timeline_to_dict(timeline: ScoreTimeline) -> dict[str, Any]:
    return {
        "tempo_bpm": timeline.tempo_bpm,
        "total_duration_seconds": timeline.total_duration_seconds,
        "part_durations_seconds": dict(timeline.part_durations_seconds),
        "voices": timeline.voices(),
        "notes": [note_event_to_dict(n) for n in timeline.notes],
    }
