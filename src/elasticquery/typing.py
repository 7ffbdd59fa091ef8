"""elasticquery 类型定义模块."""

from typing import Any, Dict, List, Union

# JSON 标量
JSONScalar = Union[None, bool, int, float, str]

# 通用 JSON 值（原始字典查询与泛型响应均使用该结构）
JSONValue = Union[JSONScalar, List["JSONValue"], Dict[str, "JSONValue"]]

# JSON 对象
JSONObject = Dict[str, JSONValue]

# 原始查询字典类型，绕过类型化查询原语，尽力而为
RawQuery = Dict[str, Any]
