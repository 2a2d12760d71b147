"""
ScorePlayer 时间线命令行工具：读取 MusicXML 文件，输出时间线 JSON。

用法：
  scoreplayer-timeline path/to/score.musicxml
  scoreplayer-timeline score.musicxml --measure-advance time_signature --indent 2

可选参数：
  --config options.yaml       从 YAML 加载 TimelineOptions（命令行参数优先）
  --tempo-default 100         文档未声明速度时使用的 BPM
  --workers 4                 按 part 并行构建
  --log-level debug           日志级别（日志输出到 stderr）
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

import yaml

from .config import TimelineOptions, load_options
from .domain.timeline import timeline_to_dict
from .engines.timeline_builder import build_score_timeline_from_path


logger = logging.getLogger("scoreplayer_backend.cli")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="scoreplayer-timeline", add_help=True)
    parser.add_argument("file", type=Path)
    parser.add_argument("--config", type=Path, default=None)
    parser.add_argument("--tempo-default", type=int, default=None)
    parser.add_argument("--measure-advance", choices=["fixed", "time_signature"], default=None)
    parser.add_argument("--workers", type=int, default=None)
    parser.add_argument("--indent", type=int, default=None)
    parser.add_argument("--log-level", default="warning")
    return parser


def _resolve_options(args: argparse.Namespace) -> TimelineOptions:
    base = load_options(args.config) if args.config is not None else TimelineOptions()
    overrides = {
        "default_tempo_bpm": args.tempo_default,
        "measure_advance": args.measure_advance,
        "max_workers": args.workers,
    }
    merged = base.model_dump()
    merged.update({k: v for k, v in overrides.items() if v is not None})
    return TimelineOptions.model_validate(merged)


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if not args.file.is_file():
        logger.error("找不到 MusicXML 文件：%s", args.file)
        return 2

    try:
        options = _resolve_options(args)
        timeline = build_score_timeline_from_path(args.file, options=options)
    except (ValueError, OSError, yaml.YAMLError) as e:
        # ParseError 与 pydantic 的 ValidationError 都是 ValueError 子类。
        logger.error("无法生成时间线：%s", e)
        return 2

    json.dump(timeline_to_dict(timeline), sys.stdout, ensure_ascii=False, indent=args.indent)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
