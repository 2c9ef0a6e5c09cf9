#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
编码器调用模块

根据 Hook 构建并执行外部编码器命令
"""

import os
import shlex
import subprocess
import logging
from typing import List, Optional, Tuple

from camrec.config.hooks import EncoderInfo

# 编码器输出中的已知错误
KNOWN_ERRORS = [
    "Unknown encoder",
    "No such file or directory",
    "Invalid argument",
    "Permission denied",
    "Could not find video device",
]


def resolve_executable(info: EncoderInfo) -> str:
    """拼接可执行文件路径，未配置目录时直接使用文件名（依赖 PATH）"""
    if info.exe_path:
        return os.path.join(info.exe_path, info.exe_name)
    return info.exe_name


def split_arguments(arguments: str, posix: Optional[bool] = None) -> List[str]:
    """
    按 shell 规则拆分参数字符串

    Windows 下不按 POSIX 规则处理反斜杠，并去掉每个参数外层的一对双引号，
    避免引号被 subprocess 再次转义后传给编码器。

    Args:
        arguments: 参数字符串
        posix: 是否使用 POSIX 规则，默认根据当前系统判断

    Returns:
        参数列表
    """
    if posix is None:
        posix = os.name != "nt"
    if posix:
        return shlex.split(arguments)

    tokens = []
    for token in shlex.split(arguments, posix=False):
        if len(token) >= 2 and token[0] == token[-1] == '"':
            token = token[1:-1]
        tokens.append(token)
    return tokens


def build_hook_command(info: EncoderInfo) -> List[str]:
    """
    构建 Hook 对应的命令列表

    Args:
        info: Hook 描述

    Returns:
        可直接传给 subprocess 的命令列表
    """
    cmd = [resolve_executable(info)]
    if info.arguments:
        cmd.extend(split_arguments(info.arguments))
    return cmd


def format_command(cmd: List[str]) -> str:
    return " ".join(f'"{arg}"' if " " in str(arg) else str(arg) for arg in cmd)


def execute_hook(cmd: List[str], timeout: Optional[float] = None) -> Tuple[bool, Optional[str]]:
    """
    执行编码器命令并检查错误

    Args:
        cmd: 命令列表
        timeout: 超时时间（秒），None 表示不限制

    Returns:
        (成功标志, 错误信息)
    """
    from camrec.utils.process import (
        register_process,
        unregister_process,
        is_shutdown_requested,
    )

    if is_shutdown_requested():
        return False, "程序正在退出"

    logging.debug(f"编码器命令: {format_command(cmd)}")

    try:
        process = subprocess.Popen(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            universal_newlines=True,
            encoding="utf-8",
            errors="replace",
        )
    except OSError as e:
        return False, str(e)

    register_process(process)
    try:
        _, stderr = process.communicate(timeout=timeout)
    except subprocess.TimeoutExpired:
        process.kill()
        process.communicate()
        return False, f"编码器执行超时 ({timeout}s)"
    finally:
        unregister_process(process)

    if process.returncode != 0:
        for error_pattern in KNOWN_ERRORS:
            if error_pattern in stderr:
                return False, error_pattern
        return False, stderr[-500:] if len(stderr) > 500 else stderr

    return True, None
