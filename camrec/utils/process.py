#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
进程管理模块

管理编码器子进程，收到中断信号时通知强制退出并清理所有进程
"""

import signal
import logging
import threading
from typing import Optional, Set

from camrec.core.events import AppExitType, ExitNotifier

# 全局进程集合和锁
_encoder_processes: Set = set()
_process_lock = threading.Lock()
_shutdown_requested = False


def register_process(process) -> None:
    """
    注册一个编码器进程到全局集合

    Args:
        process: subprocess.Popen 对象
    """
    with _process_lock:
        _encoder_processes.add(process)


def unregister_process(process) -> None:
    with _process_lock:
        _encoder_processes.discard(process)


def is_shutdown_requested() -> bool:
    return _shutdown_requested


def reset_shutdown_state() -> None:
    global _shutdown_requested
    _shutdown_requested = False


def terminate_all_processes() -> None:
    """
    终止所有注册的编码器进程
    """
    global _shutdown_requested
    _shutdown_requested = True

    with _process_lock:
        processes = list(_encoder_processes)

    if not processes:
        return

    logging.info(f"正在终止 {len(processes)} 个编码器进程...")

    for process in processes:
        try:
            if process.poll() is None:  # 进程仍在运行
                process.terminate()
                logging.debug(f"已发送 SIGTERM 到进程 {process.pid}")
        except OSError as e:
            logging.warning(f"终止进程时出错: {e}")

    # 等待进程退出，如果超时则强制杀死
    for process in processes:
        try:
            if process.poll() is None:
                process.wait(timeout=3)
        except Exception:
            try:
                process.kill()
                logging.debug(f"已发送 SIGKILL 到进程 {process.pid}")
            except OSError as e:
                logging.warning(f"强制结束进程失败: {e}")

    logging.info("所有编码器进程已终止")


def setup_signal_handlers(exit_notifier: Optional[ExitNotifier] = None) -> None:
    """
    设置信号处理器，捕获 SIGINT (Ctrl+C) 和 SIGTERM

    Args:
        exit_notifier: 收到信号时发布 FORCED 退出事件
    """

    def signal_handler(signum, frame):
        sig_name = "SIGINT" if signum == signal.SIGINT else "SIGTERM"
        logging.warning(f"收到 {sig_name} 信号，正在清理...")
        terminate_all_processes()
        if exit_notifier is not None:
            exit_notifier.publish(AppExitType.FORCED)
        raise KeyboardInterrupt()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)
