"""
Timeline Builder：MusicXML score view → 回放时间线（ScoreTimeline）。

定位：
- 这是回放链路的核心：按文档顺序扫描 part → measure → note，为每个 (part, voice) 维护一个独立的
  时间游标，产出带绝对开始时间/时长（秒）的 NoteEvent。
- tempo 与声部标签在扫描前一次性算好，扫描期间只读。

游标规则（每个 part 独立，part 结束即丢弃）：
- divisions 初始为 1；小节声明新值后一直沿用到下次声明。
- measure_start 初始为 0 拍；每个小节结束后推进一个小节长度，并把该 part 内**所有已出现**的
  voice 游标重置到新的 measure_start（各声部在小节线处重新对齐）。
- 新出现的 voice：游标与 prev_start 都初始化为当前 measure_start。
- 休止符（非 chord）：游标前进 duration，不产出事件；chord 休止符什么都不做。
- chord 音：开始时间 = 该 voice 的 prev_start（叠在上一个非 chord 音上），不推进游标。
- 普通音：开始时间 = 游标；prev_start = 开始时间；之后游标前进 duration。
- 有 pitch 才产出事件；无 pitch 的非休止音被静默丢弃（仍然推进游标）。

小节长度：
- 默认固定 3 拍（即总是按 3/4 拍处理，不看文档拍号），与历史输出保持一致。
- measure_advance="time_signature" 时改为按最近声明的拍号计算。

并行：
- part 之间没有共享状态；max_workers > 1 时用线程池逐 part 构建，合并在调用线程上按文档顺序进行，
  事件 id 也在合并时统一分配，因此结果与串行完全一致。
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, replace
import logging
from pathlib import Path
from typing import Iterable

from ..config import TimelineOptions
from ..domain.musicxml_score import ScorePart, ScoreTime, ScoreView, parse_musicxml, read_score_view
from ..domain.tempo import extract_tempo_bpm
from ..domain.timeline import NoteEvent, ScoreTimeline
from ..domain.voice_labels import build_part_voice_map


logger = logging.getLogger(__name__)

VoiceKey = tuple[str, str]


@dataclass
class VoiceCursor:
    time_beats: float
    prev_start_beats: float


@dataclass(frozen=True)
class PartTimeline:
    """单个 part 的构建结果；notes 的 id 尚未分配（在合并时统一编号）。"""

    part_id: str
    notes: tuple[NoteEvent, ...]
    duration_seconds: float


def beats_to_seconds(beats: float, tempo_bpm: int) -> float:
    return beats * 60 / tempo_bpm


def _measure_length_beats(time: ScoreTime | None, options: TimelineOptions) -> float:
    if options.measure_advance == "time_signature" and time is not None:
        return time.quarter_beats()
    return options.fixed_measure_beats


def part_duration_seconds(notes: Iterable[NoteEvent]) -> float:
    return max((n.end_time_seconds for n in notes), default=0.0)


def build_part_timeline(
    part: ScorePart,
    *,
    voice: str,
    tempo_bpm: int,
    options: TimelineOptions,
) -> PartTimeline:
    cursors: dict[VoiceKey, VoiceCursor] = {}
    notes: list[NoteEvent] = []
    divisions = 1
    current_time: ScoreTime | None = None
    measure_start_beats = 0.0
    dropped = 0

    for measure in part.measures:
        if measure.divisions is not None:
            divisions = measure.divisions
        if measure.time is not None:
            current_time = measure.time

        for note in measure.notes:
            key = (part.part_id, note.voice)
            cursor = cursors.get(key)
            if cursor is None:
                cursor = VoiceCursor(time_beats=measure_start_beats, prev_start_beats=measure_start_beats)
                cursors[key] = cursor

            duration_beats = note.duration_ticks / divisions

            if note.is_rest:
                if not note.is_chord:
                    cursor.time_beats += duration_beats
                continue

            if note.is_chord:
                start_beats = cursor.prev_start_beats
            else:
                start_beats = cursor.time_beats
                cursor.prev_start_beats = start_beats

            if note.pitch is not None:
                notes.append(
                    NoteEvent(
                        id="",
                        voice=voice,
                        start_time_seconds=beats_to_seconds(start_beats, tempo_bpm),
                        duration_seconds=beats_to_seconds(duration_beats, tempo_bpm),
                        midi_pitch=note.pitch.to_midi(),
                        part_id=part.part_id,
                        start_whole=start_beats / 4,
                        end_whole=(start_beats + duration_beats) / 4,
                    )
                )
            else:
                dropped += 1

            if not note.is_chord:
                cursor.time_beats += duration_beats

        # 小节线：推进 measure_start，并让所有已出现的 voice 在此对齐。
        measure_start_beats += _measure_length_beats(current_time, options)
        for c in cursors.values():
            c.time_beats = measure_start_beats

    duration = part_duration_seconds(notes)
    logger.debug(
        "part %s (%s): measures=%d voices=%d notes=%d dropped_unpitched=%d duration=%.3fs",
        part.part_id,
        voice,
        len(part.measures),
        len(cursors),
        len(notes),
        dropped,
        duration,
    )
    return PartTimeline(part_id=part.part_id, notes=tuple(notes), duration_seconds=duration)


def aggregate_total_duration(part_durations: Iterable[float]) -> float:
    return max(part_durations, default=0.0)


def merge_part_timelines(parts: Iterable[PartTimeline], *, tempo_bpm: int) -> ScoreTimeline:
    notes: list[NoteEvent] = []
    part_durations: dict[str, float] = {}
    counter = 0
    for pt in parts:
        for n in pt.notes:
            notes.append(replace(n, id=f"{n.voice}-{counter}"))
            counter += 1
        # 同 id 的 part 重复出现时取较长者。
        part_durations[pt.part_id] = max(part_durations.get(pt.part_id, 0.0), pt.duration_seconds)

    return ScoreTimeline(
        notes=tuple(notes),
        total_duration_seconds=aggregate_total_duration(part_durations.values()),
        tempo_bpm=tempo_bpm,
        part_durations_seconds=part_durations,
    )


def build_timeline_from_view(view: ScoreView, *, tempo_bpm: int, options: TimelineOptions) -> ScoreTimeline:
    voice_map = build_part_voice_map(view.declarations, rules=options.voice_label_rules())

    def build(part: ScorePart) -> PartTimeline:
        voice = voice_map.get(part.part_id) or part.part_id
        return build_part_timeline(part, voice=voice, tempo_bpm=tempo_bpm, options=options)

    if options.max_workers > 1 and len(view.parts) > 1:
        with ThreadPoolExecutor(max_workers=options.max_workers) as pool:
            # map 保持输入顺序，合并结果与串行一致。
            part_timelines = list(pool.map(build, view.parts))
    else:
        part_timelines = [build(p) for p in view.parts]

    return merge_part_timelines(part_timelines, tempo_bpm=tempo_bpm)


def build_score_timeline(xml: str | bytes, *, options: TimelineOptions | None = None) -> ScoreTimeline:
    opts = options or TimelineOptions()
    root = parse_musicxml(xml)
    tempo_bpm = extract_tempo_bpm(root, default_bpm=opts.default_tempo_bpm)
    view = read_score_view(root)
    timeline = build_timeline_from_view(view, tempo_bpm=tempo_bpm, options=opts)
    logger.info(
        "timeline built: parts=%d notes=%d tempo=%d total=%.3fs",
        len(view.parts),
        len(timeline.notes),
        tempo_bpm,
        timeline.total_duration_seconds,
    )
    return timeline


def build_score_timeline_from_path(path: Path, *, options: TimelineOptions | None = None) -> ScoreTimeline:
    return build_score_timeline(Path(path).read_bytes(), options=options)
