# 核心模块
"""变量展开、退出事件和编码器调用"""

from camrec.core.variables import VARIABLES, VariableTable, expand_variables
from camrec.core.events import AppExitType, ExitNotifier

__all__ = [
    "VARIABLES",
    "VariableTable",
    "expand_variables",
    "AppExitType",
    "ExitNotifier",
]
