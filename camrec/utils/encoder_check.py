#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
编码器可用性检测

在程序启动时检测各 Hook 配置的可执行文件是否存在
"""

import os
import shutil
import logging
from typing import Dict, Iterable, Tuple

from camrec.config.hooks import EncoderInfo
from camrec.core.encoder import resolve_executable

logger = logging.getLogger("EncoderCheck")


def check_hook_executable(info: EncoderInfo) -> Tuple[bool, str]:
    """
    检测单个 Hook 的可执行文件是否可用

    Args:
        info: Hook 描述

    Returns:
        (是否可用, 错误信息)
    """
    if not info.exe_name:
        return False, "未配置可执行文件名"

    exe = resolve_executable(info)
    if info.exe_path:
        if os.path.isfile(exe) and os.access(exe, os.X_OK):
            return True, ""
        # Windows 下配置里通常省略 .exe
        if shutil.which(info.exe_name, path=info.exe_path):
            return True, ""
        return False, f"可执行文件不存在: {exe}"

    if shutil.which(exe):
        return True, ""
    return False, f"{exe} 未安装或不在 PATH 中"


def detect_available_hooks(hooks: Iterable[EncoderInfo]) -> Dict[str, Tuple[bool, str]]:
    """
    检测所有 Hook，重复的 hookId 只检测第一个

    Returns:
        hookId -> (是否可用, 错误信息)
    """
    results: Dict[str, Tuple[bool, str]] = {}
    for info in hooks:
        if info.hook_id in results:
            continue
        available, error = check_hook_executable(info)
        results[info.hook_id] = (available, error)
        if available:
            logger.info(f"✓ {info.hook_id}: {resolve_executable(info)}")
        else:
            logger.warning(f"✗ {info.hook_id}: {error}")
    return results
