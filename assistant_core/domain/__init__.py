"""领域层模型与协议。

包含：
- models: 统一的 ChatTurn / NormalizedRequest / ProviderReply 模型。
- history: 历史消息归一化与文本化。
- exceptions: 业务异常类型定义。
"""
