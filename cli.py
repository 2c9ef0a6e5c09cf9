#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
CAM Recorder 配置工具 - CLI 入口

命令行参数解析和运行模式选择
"""

import os
import sys
import logging
import argparse
from typing import Any, Dict, List, Optional

# 确保可以导入 camrec 模块
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from camrec.config import Configuration, load_config, apply_cli_overrides
from camrec.config.defaults import (
    DEFAULT_BASE_DIR,
    DEFAULT_SETTINGS_FILE,
    DEFAULT_LOG_FOLDER,
    HOOK_FILE,
    EXIT_OK,
    EXIT_FAILED,
    EXIT_INTERRUPTED,
)
from camrec.core.events import AppExitType, ExitNotifier
from camrec.core.encoder import build_hook_command, execute_hook, format_command
from camrec.bootstrap import prepare_environment
from camrec.utils.encoder_check import detect_available_hooks
from camrec.utils.process import terminate_all_processes


def parse_arguments(argv: Optional[List[str]] = None):
    """解析命令行参数"""
    parser = argparse.ArgumentParser(
        description='CAM Recorder - 编码器 Hook 配置工具',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f'''
使用示例:
  # 列出 {HOOK_FILE} 中的所有 Hook
  python main.py --list

  # 预览某个 Hook 的命令（不实际执行）
  python main.py --hook record --dry-run

  # 修改帧率（正常退出时保存）
  python main.py --set-fps 30
        '''
    )

    parser.add_argument('--config', type=str, default=None,
                        help='程序配置文件路径 (YAML 格式)')
    parser.add_argument('--base-dir', default=DEFAULT_BASE_DIR,
                        help=f'{HOOK_FILE} 所在目录 (默认: {DEFAULT_BASE_DIR})')
    parser.add_argument('--settings', default=DEFAULT_SETTINGS_FILE,
                        help=f'视频设置文件路径 (默认: {DEFAULT_SETTINGS_FILE})')
    parser.add_argument('-l', '--log', default=DEFAULT_LOG_FOLDER,
                        help=f'日志文件夹路径 (默认: {DEFAULT_LOG_FOLDER})')

    # 运行模式
    parser.add_argument('--list', action='store_true',
                        help='列出已配置的 Hook')
    parser.add_argument('--check', action='store_true',
                        help='检测 Hook 可执行文件是否可用')
    parser.add_argument('--hook', type=str, default=None,
                        help='执行指定 hookId 的编码器命令')
    parser.add_argument('--dry-run', action='store_true',
                        help='仅显示命令，不实际执行')
    parser.add_argument('--timeout', type=float, default=None,
                        help='编码器执行超时（秒）')

    # 视频设置
    parser.add_argument('--set-output', type=str, default=None,
                        help='设置视频输出目录')
    parser.add_argument('--set-fps', type=int, default=None,
                        help='设置录制帧率')
    parser.add_argument('--set-bitmaps', type=str, default=None,
                        help='设置截图目录')

    # 日志
    parser.add_argument('-v', '--verbose', action='count', default=0,
                        help='输出调试日志')
    parser.add_argument('-q', '--quiet', action='count', default=0,
                        help='减少日志输出 (-q WARNING, -qq ERROR)')
    parser.add_argument('--plain', action='store_true',
                        help='控制台禁用彩色输出')
    parser.add_argument('--json-logs', action='store_true',
                        help='控制台输出 JSON 行日志')

    return parser.parse_args(argv)


def list_hooks(configuration: Configuration) -> int:
    """打印已配置的 Hook"""
    hooks = configuration.hooks
    if not hooks:
        logging.warning("没有已配置的 Hook")
        return EXIT_FAILED

    logging.info("=" * 60)
    for hook in hooks:
        logging.info(f"{hook.hook_id} [{hook.mode}]: {format_command(build_hook_command(hook))}")
    logging.info("=" * 60)
    return EXIT_OK


def check_hooks(configuration: Configuration) -> int:
    """检测 Hook 可执行文件"""
    results = detect_available_hooks(configuration.hooks)
    if not results:
        logging.warning("没有已配置的 Hook")
        return EXIT_FAILED
    return EXIT_OK if all(available for available, _ in results.values()) else EXIT_FAILED


def run_hook(configuration: Configuration, hook_id: str, config: Dict[str, Any]) -> int:
    """执行指定 Hook"""
    hook = configuration.get_hook(hook_id)
    if hook is None:
        logging.error(f"未找到 Hook: {hook_id}")
        return EXIT_FAILED

    cmd = build_hook_command(hook)
    exec_cfg = config.get("execution", {})
    if exec_cfg.get("dry_run"):
        logging.info(f"[DRY-RUN] {format_command(cmd)}", extra={"hook": hook.hook_id, "mode": hook.mode})
        return EXIT_OK

    logging.info(f"启动编码器: {hook.exe_name}", extra={"hook": hook.hook_id, "mode": hook.mode})
    success, error = execute_hook(cmd, timeout=exec_cfg.get("timeout"))
    if not success:
        logging.error(f"编码器执行失败: {error}", extra={"hook": hook.hook_id})
        return EXIT_FAILED

    logging.info("编码器执行完成", extra={"hook": hook.hook_id})
    return EXIT_OK


def apply_video_overrides(configuration: Configuration, args) -> None:
    """将命令行中的视频设置写入当前配置"""
    settings = configuration.video_configuration
    if args.set_output is not None:
        settings.output_location = args.set_output
    if args.set_fps is not None:
        settings.fps = args.set_fps
    if args.set_bitmaps is not None:
        settings.bitmap_location = args.set_bitmaps
    configuration.video_configuration = settings


def main(argv: Optional[List[str]] = None) -> int:
    """主函数"""
    args = parse_arguments(argv)
    exit_notifier = ExitNotifier()

    try:
        config = load_config(args.config)
        config = apply_cli_overrides(config, args)

        prepare_environment(config, exit_notifier)

        configuration = Configuration(
            exit_notifier,
            base_dir=config["paths"]["base_dir"],
            settings_path=config["paths"]["settings"],
        )
        apply_video_overrides(configuration, args)

        if args.hook:
            code = run_hook(configuration, args.hook, config)
        elif args.check:
            code = check_hooks(configuration)
        elif args.list:
            code = list_hooks(configuration)
        else:
            code = EXIT_OK

        exit_notifier.publish(AppExitType.NORMAL if code == EXIT_OK else AppExitType.ERROR)
        return code

    except KeyboardInterrupt:
        logging.warning("用户中断操作")
        terminate_all_processes()
        exit_notifier.publish(AppExitType.FORCED)
        return EXIT_INTERRUPTED
    except Exception as e:
        logging.critical(f"程序执行过程中发生严重错误: {e}", exc_info=True)
        exit_notifier.publish(AppExitType.ERROR)
        return EXIT_FAILED


if __name__ == "__main__":
    sys.exit(main())
