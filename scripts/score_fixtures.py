"""
测试用的手写 MusicXML 片段构造工具（scripts/test_*.py 共用）。

约定：
- note(...) / rest(...) / backup(...) 生成 measure 的子元素；measure(...) 包一层 <measure>；
  score(...) 生成完整的 score-partwise 文档。
"""

from __future__ import annotations

from pathlib import Path
import sys


REPO_ROOT = Path(__file__).resolve().parents[1]


def ensure_backend_src_on_path(repo_root: Path = REPO_ROOT) -> None:
    src_dir = repo_root / "backend" / "src"
    if not src_dir.exists():
        raise RuntimeError(f"找不到 backend/src：{src_dir}")
    if str(src_dir) not in sys.path:
        sys.path.insert(0, str(src_dir))


def note(
    step: str | None = "C",
    octave: int | None = 4,
    *,
    alter: int | None = None,
    duration: int | None = 1,
    voice: str | None = None,
    chord: bool = False,
) -> str:
    out = "<note>"
    if chord:
        out += "<chord/>"
    if step is not None:
        out += f"<pitch><step>{step}</step>"
        if alter is not None:
            out += f"<alter>{alter}</alter>"
        if octave is not None:
            out += f"<octave>{octave}</octave>"
        out += "</pitch>"
    if duration is not None:
        out += f"<duration>{duration}</duration>"
    if voice is not None:
        out += f"<voice>{voice}</voice>"
    return out + "</note>"


def unpitched(*, duration: int = 1, voice: str | None = None) -> str:
    out = "<note><unpitched><display-step>E</display-step><display-octave>4</display-octave></unpitched>"
    out += f"<duration>{duration}</duration>"
    if voice is not None:
        out += f"<voice>{voice}</voice>"
    return out + "</note>"


def rest(*, duration: int = 1, voice: str | None = None, chord: bool = False) -> str:
    out = "<note>"
    if chord:
        out += "<chord/>"
    out += f"<rest/><duration>{duration}</duration>"
    if voice is not None:
        out += f"<voice>{voice}</voice>"
    return out + "</note>"


def backup(duration: int) -> str:
    return f"<backup><duration>{duration}</duration></backup>"


def forward(duration: int) -> str:
    return f"<forward><duration>{duration}</duration></forward>"


def measure(*children: str, number: int = 1, divisions: int | None = None, time: tuple[int, int] | None = None) -> str:
    attrs = ""
    if divisions is not None:
        attrs += f"<divisions>{divisions}</divisions>"
    if time is not None:
        attrs += f"<time><beats>{time[0]}</beats><beat-type>{time[1]}</beat-type></time>"
    out = f'<measure number="{number}">'
    if attrs:
        out += f"<attributes>{attrs}</attributes>"
    return out + "".join(children) + "</measure>"


def score(parts: list[tuple[str, str | None, list[str]]], *, tempo: str | None = None) -> str:
    """parts: [(part_id, part_name 或 None, [measure_xml, ...]), ...]"""

    part_list = ""
    for part_id, name, _ in parts:
        part_list += f'<score-part id="{part_id}">'
        if name is not None:
            part_list += f"<part-name>{name}</part-name>"
        part_list += "</score-part>"

    bodies = ""
    for i, (part_id, _, measures) in enumerate(parts):
        body = "".join(measures)
        if tempo is not None and i == 0:
            # 速度放在第一个 part 第一小节的 direction 里（常见写法）。
            direction = f'<direction><sound tempo="{tempo}"/></direction>'
            if "</attributes>" in body:
                body = body.replace("</attributes>", "</attributes>" + direction, 1)
            else:
                body = direction + body
        bodies += f'<part id="{part_id}">{body}</part>'

    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<score-partwise version="3.1">'
        f"<part-list>{part_list}</part-list>"
        f"{bodies}"
        "</score-partwise>"
    )
