#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
默认配置常量

定义程序的默认配置值、Hook 文件名和变量名
"""

# ============================================================
# Hook 配置
# ============================================================
HOOK_FILE = "Hooks.config"
HOOK_SECTION = "hook"

# ============================================================
# 路径配置
# ============================================================
DEFAULT_BASE_DIR = "."
DEFAULT_SETTINGS_FILE = "./video_settings.yaml"
DEFAULT_LOG_FOLDER = "./logs"

# ============================================================
# 视频设置默认值
# ============================================================
DEFAULT_OUTPUT_LOCATION = "./videos"
DEFAULT_FPS = 15
DEFAULT_BITMAP_LOCATION = "./bitmaps"

# ============================================================
# 变量名（用于参数展开）
# ============================================================
VAR_VIDEO_LOCATION = "VIDEO_LOCATION"
VAR_FPS = "FPS"
VAR_BITMAPS = "BITMAPS"

# ============================================================
# 程序退出码
# ============================================================
EXIT_OK = 0
EXIT_FAILED = 1
EXIT_INTERRUPTED = 130

# ============================================================
# 默认配置字典（用于 YAML 配置合并）
# ============================================================
DEFAULT_CONFIG = {
    "paths": {
        "base_dir": DEFAULT_BASE_DIR,
        "settings": DEFAULT_SETTINGS_FILE,
        "log": DEFAULT_LOG_FOLDER,
    },
    "logging": {
        "level": "INFO",
        "plain": False,
        "json_console": False,
    },
    "execution": {
        "dry_run": False,
        "timeout": None,
    },
}
