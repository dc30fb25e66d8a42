"""
scripts/run_sql_export.py
-------------------------

读取指定目录下 *.sql 中的 SQL，通过数据服务的 /api/query 接口执行，
将每个结果（Arrow 解码后）保存为 {filename}_res.csv。

使用方式（示例）：
1. 在 configs/client_local.yaml 中配置数据服务地址（api.base_url 等）；
2. 修改本脚本中的 SQL_DIR 为待执行的 SQL 目录；
3. 在项目根目录下运行：
   python -m scripts.run_sql_export
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

# 将项目根目录加入 sys.path，保证 from core.xxx 可被解析（无论从何处执行脚本）
_project_root = Path(__file__).resolve().parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from core.db import HttpTransport, QueryError, QueryExecutor, load_client_config  # noqa: E402
from core.utils import list_sql_files, load_yaml, read_sql_file  # noqa: E402


def _load_client_yaml() -> Dict[str, Any]:
    """
    从 configs/client_local.yaml 读取数据服务客户端配置。

    输入：
        无。
    输出：
        dict：解析后的配置字典。
    异常：
        FileNotFoundError: 配置文件不存在时抛出。
    """
    config_path = _project_root / "configs" / "client_local.yaml"
    if not config_path.exists():
        raise FileNotFoundError(
            f"客户端配置不存在：{config_path}。"
            f"请根据示例创建并填写数据服务地址。"
        )
    return load_yaml(config_path)


def run_for_directory(
    sql_dir: str | Path,
    executor: QueryExecutor,
    output_dir: Optional[str | Path] = None,
) -> Dict[str, List[str]]:
    """
    执行目录下全部 .sql 文件，并将结果导出为 *_res.csv。

    输入：
        sql_dir: 含 .sql 文件的目录；
        executor: 已配置好的 QueryExecutor；
        output_dir: 结果输出目录，None 时写入 sql_dir 的上一级目录。
    输出：
        dict：{"success": [文件名...], "failed": [文件名...]}。
    说明：
        单个 SQL 失败（QueryError）只记录并继续，不中断整个批次。
    """
    sql_path_dir = Path(sql_dir)
    out_dir = Path(output_dir) if output_dir is not None else sql_path_dir.parent
    out_dir.mkdir(parents=True, exist_ok=True)

    sql_files = list_sql_files(sql_path_dir)
    result: Dict[str, List[str]] = {"success": [], "failed": []}
    if not sql_files:
        print(f"[提示] 目录中未找到任何 .sql 文件：{sql_path_dir}")
        return result

    total = len(sql_files)
    print(f"[开始] SQL 目录：{sql_path_dir}，待运行 SQL 文件数：{total}")

    for idx, sql_path in enumerate(sql_files, start=1):
        sql_text = read_sql_file(sql_path)
        print(f"[执行] 第 {idx}/{total} 个：{sql_path.name}")
        outcome = executor.execute(sql_text)
        if isinstance(outcome, QueryError):
            print(f"[失败] 第 {idx} 个：{sql_path.name}，错误：{outcome.message}")
            result["failed"].append(sql_path.name)
            continue

        out_path = out_dir / f"{sql_path.stem}_res.csv"
        outcome.to_dataframe().to_csv(out_path, index=False)
        print(f"[完成] 第 {idx} 个：{sql_path.name}，{outcome.row_count} 行")
        result["success"].append(sql_path.name)

    success_files = result["success"]
    failed_files = result["failed"]
    print(f"[总结] 共 {total} 个 SQL 文件，成功 {len(success_files)} 个，失败 {len(failed_files)} 个。")
    if success_files:
        print(f"[成功列表] {', '.join(success_files)}")
    if failed_files:
        print(f"[失败列表] {', '.join(failed_files)}")
    return result


if __name__ == "__main__":
    # ---------- 使用前请修改下面变量 ----------
    # 待执行的 SQL 目录，结果 CSV 写到其上一级目录。
    SQL_DIR = ""

    if not SQL_DIR:
        raise ValueError(
            "请先在 scripts/run_sql_export.py 中设置 SQL_DIR，"
            "然后再运行本脚本。"
        )

    client_cfg = load_client_config(_load_client_yaml())
    with HttpTransport(client_cfg) as transport:
        run_for_directory(SQL_DIR, QueryExecutor(transport))
