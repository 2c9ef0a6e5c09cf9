# 工具模块
"""通用工具函数"""

from camrec.utils.logging import setup_logging

__all__ = [
    "setup_logging",
]
