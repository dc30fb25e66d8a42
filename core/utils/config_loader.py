"""
core.utils.config_loader: 配置文件读取（当前为 YAML）。

禁止引用 modules 下的任何内容。
"""

from pathlib import Path
from typing import Any, Dict, Union

import yaml

from core.logger import get_logger

_logger = get_logger(__name__)


def load_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    """
    读取 YAML 配置文件并返回字典。

    输入：
    - path: 文件路径，可为 str 或 Path。

    输出：
    - 解析得到的字典；文件为空或仅包含空文档时返回空字典。

    异常：
    - FileNotFoundError: 路径不存在；
    - ValueError: 顶层结构不是键值对映射（如整个文件是一个列表）；
    - yaml.YAMLError: 解析失败时由 PyYAML 抛出。
    """
    path = Path(path)
    if not path.exists():
        msg = f"YAML 文件不存在：{path}"
        _logger.error(msg)
        raise FileNotFoundError(msg)
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"YAML 顶层应为键值对映射，当前为 {type(data).__name__}：{path}")
    return data
