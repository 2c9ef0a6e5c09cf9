# 配置模块
"""Hook 配置、视频设置和程序配置"""

from camrec.config.hooks import EncoderInfo, parse_hook_file
from camrec.config.video_settings import VideoSettings
from camrec.config.loader import Configuration, load_config, apply_cli_overrides, deep_merge
from camrec.config.defaults import DEFAULT_CONFIG, HOOK_FILE

__all__ = [
    "EncoderInfo",
    "parse_hook_file",
    "VideoSettings",
    "Configuration",
    "load_config",
    "apply_cli_overrides",
    "deep_merge",
    "DEFAULT_CONFIG",
    "HOOK_FILE",
]
