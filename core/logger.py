# core/logger.py
# 统一日志入口：按模块名获取 logger，首次获取时挂载控制台 handler

from __future__ import annotations

import logging
from typing import Optional

_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """
    获取带统一格式的 logger。

    输入：
        name: logger 名称，通常传入 __name__；
        level: 可选日志级别；None 时保留已有级别（首次获取默认为 INFO）。
    输出：
        logging.Logger 对象；同名 logger 重复获取不会重复挂载 handler。
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False
        logger.setLevel(logging.INFO)
    if level is not None:
        logger.setLevel(level)
    return logger
