#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
变量展开模块

维护 名称→值 的变量表，并将参数字符串中的 ${NAME} / %NAME% 占位符替换为变量值
"""

import re
import logging
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

logger = logging.getLogger("Variables")

# ${NAME} 或 %NAME%，% 形式的结尾 % 只在变量已定义时消耗
_PLACEHOLDER = re.compile(r"\$\{(?P<brace>[A-Za-z_][A-Za-z0-9_]*)\}|%(?P<pct>[A-Za-z_][A-Za-z0-9_]*)(?=%)")


class VariableTable:
    """变量表，值统一以字符串保存"""

    def __init__(self, initial: Optional[Mapping[str, Any]] = None):
        self._values: Dict[str, str] = {}
        if initial:
            for name, value in initial.items():
                self.push(name, value)

    def push(self, name: str, value: Any) -> None:
        """写入变量，同名变量会被覆盖"""
        self._values[name] = "" if value is None else str(value)

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self._values.get(name, default)

    def clear(self) -> None:
        self._values.clear()

    def snapshot(self) -> Mapping[str, str]:
        """返回当前变量的只读副本"""
        return MappingProxyType(dict(self._values))

    def __contains__(self, name: str) -> bool:
        return name in self._values

    def __len__(self) -> int:
        return len(self._values)


# 进程级默认变量表
VARIABLES = VariableTable()


def expand_variables(text: str, variables: Mapping[str, str]) -> str:
    """
    展开字符串中的变量占位符

    未知变量保持原样输出。

    Args:
        text: 含占位符的字符串
        variables: 变量映射

    Returns:
        展开后的字符串
    """
    if not text:
        return text

    parts = []
    pos = 0
    while True:
        match = _PLACEHOLDER.search(text, pos)
        if match is None:
            break
        parts.append(text[pos:match.start()])
        name = match.group("brace") or match.group("pct")
        pos = match.end()
        if name in variables:
            parts.append(variables[name])
            if match.group("pct"):
                pos += 1
        else:
            # 未定义的 %NAME 不吞掉结尾的 %，它可能是下一个占位符的开头
            logger.debug(f"未定义的变量: {name}，保持原样")
            parts.append(match.group(0))

    parts.append(text[pos:])
    return "".join(parts)
