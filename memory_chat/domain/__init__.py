"""领域层模型与协议。

包含：
- models: 会话摘要、消息、开启会话响应等数据结构。
- exceptions: 业务异常类型定义。
- faults: 供错误分类器使用的带判别字段的故障变体。
"""
