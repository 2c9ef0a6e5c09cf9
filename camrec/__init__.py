# CAM Recorder - 配置加载
"""
camrec 包

主要模块:
- config: Hook 配置、视频设置、程序配置加载
- core: 变量展开、退出事件、编码器调用
- utils: 日志、进程管理、可执行文件检测
"""

__version__ = "1.0.0"

from camrec.config import Configuration, EncoderInfo, VideoSettings, load_config, apply_cli_overrides
from camrec.core import AppExitType, ExitNotifier, expand_variables

__all__ = [
    "__version__",
    "Configuration",
    "EncoderInfo",
    "VideoSettings",
    "load_config",
    "apply_cli_overrides",
    "AppExitType",
    "ExitNotifier",
    "expand_variables",
]
