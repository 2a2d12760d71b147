from __future__ import annotations


class ParseError(ValueError):
    """文档无法按 MusicXML 标记解析（非良构 XML、空输入）。不返回部分时间线。"""
