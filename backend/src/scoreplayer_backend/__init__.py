"""
ScorePlayer 后端代码根包。

定位：
- 把上传的 MusicXML 乐谱转换为扁平的、带绝对时间戳的音符事件列表（ScoreTimeline），供前端按声部回放。
- 纯转换：文档文本进，时间线数据出；不做渲染、合成、持久化或网络传输。
- 入口：`scoreplayer_backend.engines.timeline_builder.build_score_timeline`。
"""
