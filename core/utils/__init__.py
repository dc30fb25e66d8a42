# core.utils: 通用工具（配置加载、SQL 文件读取等）
# 禁止引用 modules 下的任何内容

from core.utils.config_loader import load_yaml
from core.utils.sql_loader import list_sql_files, read_sql_file

__all__ = ["load_yaml", "list_sql_files", "read_sql_file"]
