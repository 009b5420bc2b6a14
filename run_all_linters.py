#!/usr/bin/env python3
"""執行格式化檢查、靜態分析與測試。

用法：
    python run_all_linters.py          # 只檢查
    python run_all_linters.py --fix    # 先以 black/isort 格式化，再檢查
    python run_all_linters.py --no-tests
"""

from __future__ import annotations

import argparse
from pathlib import Path
import subprocess
import sys

ROOT = Path(__file__).parent
SOURCE_DIRS = ["app", "core", "infrastructure", "main.py"]
TEST_DIRS = ["tests"]


def run_step(cmd: list[str], description: str) -> tuple[bool, str]:
    """執行單一步驟，回傳 (是否成功, 輸出)。"""
    print(f"\n{'=' * 60}")
    print(f"{description}: {' '.join(cmd)}")
    print("=" * 60)

    try:
        result = subprocess.run(cmd, capture_output=True, text=True, check=False, cwd=ROOT)
    except OSError as e:
        print(f"❌ 無法執行: {e}")
        return False, str(e)

    output = (result.stdout + result.stderr).strip()
    ok = result.returncode == 0
    print("✅ 成功" if ok else "❌ 失敗")
    if output:
        print(output)
    return ok, output


def build_steps(fix: bool, with_tests: bool) -> list[tuple[list[str], str]]:
    py = sys.executable
    targets = SOURCE_DIRS + TEST_DIRS
    steps: list[tuple[list[str], str]] = []
    if fix:
        steps.append(([py, "-m", "black", *targets], "Black 格式化"))
        steps.append(([py, "-m", "isort", *targets], "isort 匯入排序"))
    else:
        steps.append(([py, "-m", "black", "--check", *targets], "Black 格式化檢查"))
        steps.append(([py, "-m", "isort", "--check-only", *targets], "isort 匯入排序檢查"))
    steps.append(([py, "-m", "ruff", "check", *targets], "Ruff 靜態檢查"))
    steps.append(([py, "-m", "pylint", *SOURCE_DIRS], "Pylint 靜態分析"))
    if with_tests:
        steps.append(([py, "-m", "pytest", "-q", *TEST_DIRS], "pytest 測試"))
    return steps


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="執行 linter 與測試")
    parser.add_argument("--fix", action="store_true", help="先自動格式化")
    parser.add_argument("--no-tests", action="store_true", help="略過 pytest")
    args = parser.parse_args(argv)

    results = [
        (description, *run_step(cmd, description))
        for cmd, description in build_steps(args.fix, not args.no_tests)
    ]

    print(f"\n{'=' * 60}")
    print("總結")
    print("=" * 60)
    for description, ok, _ in results:
        print(f"{description}: {'✅ 通過' if ok else '❌ 失敗'}")

    failed = [description for description, ok, _ in results if not ok]
    print(f"\n整體結果: {'❌ 有錯誤' if failed else '✅ 全部通過'}")
    return 1 if failed else 0


if __name__ == "__main__":
    raise SystemExit(main())
