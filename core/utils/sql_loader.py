"""
core.utils.sql_loader
----------------------

SQL 文件读取工具：
- 按目录列出 .sql 文件（可选递归）；
- 读取单个 .sql 文件内容（自动去掉 UTF-8 BOM）。

注意：
- 读取的 SQL 原样返回，不做裁剪或校验，校验交给服务端；
- 禁止引用 modules 下的任何内容。
"""

from __future__ import annotations

from pathlib import Path
from typing import List


def list_sql_files(sql_dir: str | Path, recursive: bool = False) -> List[Path]:
    """
    列出指定目录下的所有 .sql 文件。

    输入：
        sql_dir: 含 .sql 文件的目录路径（字符串或 Path）；
        recursive: 是否递归子目录，默认否。
    输出：
        List[Path]: 按路径排序的 .sql 文件 Path 列表。
    异常：
        FileNotFoundError: 目录不存在时抛出；
        NotADirectoryError: 路径存在但不是目录时抛出。
    """
    dir_path = Path(sql_dir)
    if not dir_path.exists():
        raise FileNotFoundError(f"SQL 目录不存在：{dir_path.absolute()}")
    if not dir_path.is_dir():
        raise NotADirectoryError(f"传入路径不是目录：{dir_path.absolute()}")

    pattern = "**/*.sql" if recursive else "*.sql"
    return sorted(p for p in dir_path.glob(pattern) if p.is_file())


def read_sql_file(path: str | Path) -> str:
    """读取单个 .sql 文件（utf-8，兼容带 BOM 的文件），返回原始文本。"""
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"SQL 文件不存在：{file_path.absolute()}")
    if file_path.is_dir():
        raise IsADirectoryError(f"期望为文件但得到目录：{file_path.absolute()}")

    return file_path.read_text(encoding="utf-8-sig")
