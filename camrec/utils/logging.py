#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""日志配置模块：日志文件记录全部级别，控制台支持彩色/纯文本/JSON。"""

import os
import sys
import json
import logging
import datetime
from typing import Any, Dict, Optional

import colorama

# Windows 控制台需要 colorama 转换 ANSI 转义
colorama.just_fix_windows_console()

LEVEL_COLORS = {
    logging.DEBUG: colorama.Fore.LIGHTBLACK_EX,
    logging.INFO: colorama.Fore.GREEN,
    logging.WARNING: colorama.Fore.YELLOW,
    logging.ERROR: colorama.Fore.RED,
    logging.CRITICAL: colorama.Back.RED,
}

# 通过 extra= 传入的 Hook 上下文
CONTEXT_KEYS = ("hook", "mode", "exit")


def _resolve_level(level: Any) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def record_context(record: logging.LogRecord) -> Dict[str, Any]:
    """提取记录上携带的 Hook 上下文字段"""
    context = {}
    for key in CONTEXT_KEYS:
        value = getattr(record, key, None)
        if value not in (None, ""):
            context[key] = value
    return context


class _HookFormatter(logging.Formatter):
    """在消息尾部追加 (hook=... mode=... exit=...)"""

    time_format = "%Y-%m-%d %H:%M:%S"

    def timestamp(self, record: logging.LogRecord) -> str:
        return datetime.datetime.fromtimestamp(record.created).strftime(self.time_format)

    def message(self, record: logging.LogRecord) -> str:
        context = record_context(record)
        if not context:
            return record.getMessage()
        tail = " ".join(f"{key}={value}" for key, value in context.items())
        return f"{record.getMessage()} ({tail})"


class ConsoleFormatter(_HookFormatter):
    time_format = "%H:%M:%S"

    def __init__(self, enable_color: bool = False):
        super().__init__()
        self.enable_color = enable_color

    def format(self, record: logging.LogRecord) -> str:
        line = f"[{self.timestamp(record)}] {record.levelname:<5} {self.message(record)}"
        if not self.enable_color:
            return line
        return f"{LEVEL_COLORS.get(record.levelno, '')}{line}{colorama.Style.RESET_ALL}"


class FileFormatter(_HookFormatter):
    def format(self, record: logging.LogRecord) -> str:
        line = f"{self.timestamp(record)} | {record.levelname:<7} | {record.name} | {self.message(record)}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class JsonFormatter(logging.Formatter):
    """JSON 行格式，便于采集或 CI 解析。"""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": datetime.datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "name": record.name,
            "msg": record.getMessage(),
            **record_context(record),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def _console_formatter(plain: bool, json_console: bool) -> logging.Formatter:
    if json_console:
        return JsonFormatter()
    isatty = getattr(sys.stdout, "isatty", None)
    return ConsoleFormatter(enable_color=not plain and bool(isatty and isatty()))


def setup_logging(
    log_folder: str,
    level: Any = "INFO",
    plain: bool = False,
    json_console: bool = False,
    console_level: Optional[Any] = None,
) -> str:
    """
    配置根 logger：日志文件记录 DEBUG 及以上，控制台按 level 过滤。

    Args:
        log_folder: 日志文件夹路径
        level: 日志级别（字符串或数字）
        plain: 控制台禁用彩色
        json_console: 控制台使用 JSON 行输出
        console_level: 控制台单独的级别，默认为 level

    Returns:
        本次运行的日志文件路径
    """
    os.makedirs(log_folder, exist_ok=True)
    log_file = os.path.join(
        log_folder, f"camrec_{datetime.datetime.now():%Y%m%d%H%M%S}.log"
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(logging.DEBUG)

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(FileFormatter())
    root.addHandler(file_handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(_resolve_level(console_level or level))
    console_handler.setFormatter(_console_formatter(plain, json_console))
    root.addHandler(console_handler)

    root.log(_resolve_level(level), f"日志初始化完成: {log_file}")
    return log_file
