#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
配置加载器

- Configuration: 加载 Hooks.config 中的编码器 Hook，持有视频设置，正常退出时保存
- load_config / apply_cli_overrides: 程序配置，优先级 命令行参数 > 配置文件 > 程序默认值
"""

import os
import copy
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from camrec.config.defaults import (
    DEFAULT_CONFIG,
    DEFAULT_BASE_DIR,
    DEFAULT_SETTINGS_FILE,
    DEFAULT_LOG_FOLDER,
    HOOK_FILE,
    VAR_VIDEO_LOCATION,
    VAR_FPS,
    VAR_BITMAPS,
)
from camrec.config.hooks import EncoderInfo, parse_hook_file
from camrec.config.video_settings import VideoSettings
from camrec.core.events import AppExitType, ExitNotifier
from camrec.core.variables import VARIABLES, VariableTable

logger = logging.getLogger("Configuration")


class Configuration:
    """Hook 与视频设置的配置入口"""

    def __init__(
        self,
        exit_notifier: ExitNotifier,
        base_dir: Optional[str] = None,
        settings_path: Optional[str] = None,
        variables: Optional[VariableTable] = None,
    ):
        self._exit_notifier = exit_notifier
        self._exit_notifier.subscribe(self._save_configuration_settings)

        self._variables = variables if variables is not None else VARIABLES
        self.video_configuration = VideoSettings.load(settings_path or DEFAULT_SETTINGS_FILE)
        self._setup_application_variables()

        self.hook_file = os.path.join(base_dir or DEFAULT_BASE_DIR, HOOK_FILE)
        if not os.path.exists(self.hook_file):
            raise FileNotFoundError(f"找不到配置文件: {self.hook_file}")

        hooks = parse_hook_file(self.hook_file, self._variables.snapshot())
        self._configured_hooks: Tuple[EncoderInfo, ...] = tuple(hooks)
        logger.info(f"已加载 {len(self._configured_hooks)} 个 Hook: {self.hook_file}")

    @property
    def video_configuration(self) -> VideoSettings:
        return self._video_configuration

    @video_configuration.setter
    def video_configuration(self, value: VideoSettings) -> None:
        self._video_configuration = value

    @property
    def hooks(self) -> Tuple[EncoderInfo, ...]:
        return self._configured_hooks

    def get_hook(self, hook_id: str) -> Optional[EncoderInfo]:
        """
        按 hookId 查找 Hook，存在重复时返回第一个

        Args:
            hook_id: Hook 标识

        Returns:
            EncoderInfo，未找到返回 None
        """
        if not self._configured_hooks:
            logger.info("没有可用的 Hook！")
            return None

        for hook in self._configured_hooks:
            if hook.hook_id == hook_id:
                logger.info(f"找到 Hook: {hook_id}", extra={"hook": hook_id, "mode": hook.mode})
                return hook

        logger.info(f"没有配置 hookId 为 {hook_id} 的 Hook")
        return None

    def _setup_application_variables(self) -> None:
        settings = self.video_configuration
        self._variables.push(VAR_VIDEO_LOCATION, settings.output_location)
        self._variables.push(VAR_FPS, settings.fps)
        self._variables.push(VAR_BITMAPS, settings.bitmap_location)

    def _save_configuration_settings(self, exit_type: AppExitType) -> None:
        if exit_type is AppExitType.NORMAL:
            path = self.video_configuration.save()
            logger.debug(f"视频设置已保存: {path}", extra={"exit": exit_type.value})
        else:
            logger.info(
                "程序非正常退出，不保存配置",
                extra={"exit": exit_type.value},
            )


def find_default_config() -> Optional[str]:
    """
    查找默认配置文件

    按以下顺序查找:
    1. 当前目录下的 camrec.yaml
    2. 用户目录下的 .camrec/config.yaml

    Returns:
        找到的配置文件路径，如果没找到返回 None
    """
    local_config = Path.cwd() / "camrec.yaml"
    if local_config.exists():
        return str(local_config)

    home_config = Path.home() / ".camrec" / "config.yaml"
    if home_config.exists():
        return str(home_config)

    return None


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    深度合并两个字典，override 中的值会覆盖 base 中的值

    Args:
        base: 基础字典
        override: 覆盖字典

    Returns:
        合并后的字典
    """
    result = copy.deepcopy(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    加载程序配置文件

    Args:
        config_path: 配置文件路径，如果为 None 则使用默认路径

    Returns:
        配置字典
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    if config_path is None:
        config_path = find_default_config()

    if config_path and os.path.exists(config_path):
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                file_config = yaml.safe_load(f) or {}
            if not isinstance(file_config, dict):
                logging.warning(f"配置文件格式不正确: {config_path}，使用默认配置")
                return config
            config = deep_merge(config, file_config)
            # 日志尚未初始化，由 prepare_environment 记录来源
            config["config_file"] = config_path
            return config
        except (OSError, yaml.YAMLError) as e:
            logging.warning(f"加载配置文件失败: {e}，使用默认配置")
            return config

    return config


def apply_cli_overrides(config: Dict[str, Any], args) -> Dict[str, Any]:
    """
    将命令行参数覆盖到配置中

    Args:
        config: 配置字典
        args: 命令行参数

    Returns:
        更新后的配置字典
    """
    paths = config.setdefault("paths", {})
    if getattr(args, 'base_dir', None) and args.base_dir != DEFAULT_BASE_DIR:
        paths["base_dir"] = args.base_dir
    if getattr(args, 'settings', None) and args.settings != DEFAULT_SETTINGS_FILE:
        paths["settings"] = args.settings
    if getattr(args, 'log', None) and args.log != DEFAULT_LOG_FOLDER:
        paths["log"] = args.log

    log_cfg = config.setdefault("logging", {})
    if getattr(args, 'verbose', 0):
        log_cfg["level"] = "DEBUG"
    elif getattr(args, 'quiet', 0):
        log_cfg["level"] = "WARNING" if args.quiet == 1 else "ERROR"
    if getattr(args, 'plain', False):
        log_cfg["plain"] = True
    if getattr(args, 'json_logs', False):
        log_cfg["json_console"] = True

    exec_cfg = config.setdefault("execution", {})
    if getattr(args, 'dry_run', False):
        exec_cfg["dry_run"] = True
    if getattr(args, 'timeout', None):
        exec_cfg["timeout"] = args.timeout

    return config
