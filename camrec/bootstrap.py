#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
启动准备模块

统一处理控制台编码、日志初始化、信号处理。
"""

import sys
import io
import logging
from typing import Any, Dict

from camrec.core.events import ExitNotifier
from camrec.utils.logging import setup_logging
from camrec.utils.process import setup_signal_handlers


def enforce_utf8_windows() -> None:
    """在 Windows 强制 stdout/stderr 使用 UTF-8，避免中文乱码"""
    if sys.platform != 'win32':
        return
    if sys.stdout.encoding != 'utf-8':
        sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding='utf-8', errors='replace')
    if sys.stderr.encoding != 'utf-8':
        sys.stderr = io.TextIOWrapper(sys.stderr.buffer, encoding='utf-8', errors='replace')


def prepare_environment(config: Dict[str, Any], exit_notifier: ExitNotifier) -> str:
    """
    启动前统一准备工作

    Args:
        config: 已加载并应用 CLI 覆盖的配置
        exit_notifier: 信号处理器发布强制退出事件所用的分发器

    Returns:
        日志文件路径
    """
    enforce_utf8_windows()

    # 信号处理需尽早注册
    setup_signal_handlers(exit_notifier)

    log_cfg = config.get("logging", {})
    log_file = setup_logging(
        config["paths"]["log"],
        level=log_cfg.get("level", "INFO"),
        plain=log_cfg.get("plain", False),
        json_console=log_cfg.get("json_console", False),
    )

    if config.get("config_file"):
        logging.info(f"已加载配置文件: {config['config_file']}")

    return log_file
