"""
声部标签（VoiceId）：把 part-list 中声明的 part-name 归类为面向用户的声部名。

定位：
- 回放端按声部做混音（音量/静音/独奏），需要稳定的人类可读声部名，而不是 MusicXML 的 P1/P2。
- 归类规则是一张**有序**决策表（data/voice_labels.yaml），第一条命中即生效；优先级可审计、可单测。

约束：
- 规则表本身必须合法，不合法即失败（ValueError）。
- 对具体 part 的归类永不失败：未命中时回退到原始 part-name，再回退到 part id。
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Iterable

import yaml

from ..utils.paths import default_voice_labels_path


@dataclass(frozen=True)
class VoiceLabelRule:
    label: str
    contains: tuple[str, ...]

    def matches(self, lowered_name: str) -> bool:
        return any(s in lowered_name for s in self.contains)


@dataclass(frozen=True)
class PartDeclaration:
    """part-list 中的一条 <score-part> 声明。"""

    part_id: str
    name: str | None = None


def _as_rule(raw: Any, *, where: str) -> VoiceLabelRule:
    if not isinstance(raw, dict):
        raise ValueError(f"VoiceLabels: {where} 必须是 dict")
    label = raw.get("label")
    if not isinstance(label, str) or not label.strip():
        raise ValueError(f"VoiceLabels: {where}.label 必须是非空字符串")
    contains = raw.get("contains")
    if not isinstance(contains, list) or not contains:
        raise ValueError(f"VoiceLabels: {where}.contains 必须是非空 list[str]")
    subs: list[str] = []
    for s in contains:
        if not isinstance(s, str) or not s:
            raise ValueError(f"VoiceLabels: {where}.contains 含非法子串：{s!r}")
        subs.append(s.lower())
    return VoiceLabelRule(label=label, contains=tuple(subs))


def load_voice_label_rules(path: Path) -> tuple[VoiceLabelRule, ...]:
    raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise ValueError("VoiceLabels: 顶层必须是 dict")
    rules = raw.get("rules")
    if not isinstance(rules, list) or not rules:
        raise ValueError("VoiceLabels: 缺少 rules list")
    return tuple(_as_rule(r, where=f"rules[{i}]") for i, r in enumerate(rules))


@lru_cache(maxsize=1)
def default_voice_label_rules() -> tuple[VoiceLabelRule, ...]:
    return load_voice_label_rules(default_voice_labels_path())


def classify_part_name(name: str | None, part_id: str, rules: Iterable[VoiceLabelRule]) -> str:
    lowered = (name or "").lower()
    for rule in rules:
        if rule.matches(lowered):
            return rule.label
    if name:
        return name
    return part_id


def build_part_voice_map(
    declarations: Iterable[PartDeclaration],
    *,
    rules: Iterable[VoiceLabelRule] | None = None,
) -> dict[str, str]:
    rule_list = tuple(rules) if rules is not None else default_voice_label_rules()
    mapping: dict[str, str] = {}
    for decl in declarations:
        mapping[decl.part_id] = classify_part_name(decl.name, decl.part_id, rule_list)
    return mapping
