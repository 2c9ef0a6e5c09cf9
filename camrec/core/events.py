#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
程序退出通知

退出时按退出类型通知订阅者，每个订阅者最多被调用一次
"""

import logging
from enum import Enum
from typing import Callable, List

logger = logging.getLogger("Events")


class AppExitType(Enum):
    """程序退出类型"""

    NORMAL = "normal"
    FORCED = "forced"
    ERROR = "error"


ExitCallback = Callable[[AppExitType], None]


class ExitNotifier:
    """退出事件分发器"""

    def __init__(self):
        self._subscribers: List[ExitCallback] = []

    def subscribe(self, callback: ExitCallback) -> None:
        self._subscribers.append(callback)

    def publish(self, exit_type: AppExitType) -> int:
        """
        通知所有订阅者，通知后即移除

        单个订阅者抛出异常不影响其他订阅者。

        Args:
            exit_type: 退出类型

        Returns:
            被调用的订阅者数量
        """
        subscribers, self._subscribers = self._subscribers, []
        logger.debug(f"发布退出事件: {exit_type.value}，订阅者 {len(subscribers)} 个")

        for callback in subscribers:
            try:
                callback(exit_type)
            except Exception as e:
                logger.error(f"退出回调执行失败: {e}", exc_info=True)

        return len(subscribers)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)
