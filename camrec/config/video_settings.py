#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
视频设置

录制输出目录、帧率、截图目录，使用 YAML 文件持久化
"""

import os
import logging
from dataclasses import dataclass, asdict, fields
from typing import Any, Dict, Optional

import yaml

from camrec.config.defaults import (
    DEFAULT_OUTPUT_LOCATION,
    DEFAULT_FPS,
    DEFAULT_BITMAP_LOCATION,
    DEFAULT_SETTINGS_FILE,
)

logger = logging.getLogger("VideoSettings")


@dataclass
class VideoSettings:
    """视频录制设置"""

    output_location: str = DEFAULT_OUTPUT_LOCATION
    fps: int = DEFAULT_FPS
    bitmap_location: str = DEFAULT_BITMAP_LOCATION
    path: Optional[str] = None

    @classmethod
    def load(cls, path: str = DEFAULT_SETTINGS_FILE) -> "VideoSettings":
        """
        从 YAML 文件加载设置

        文件不存在或为空时使用默认值，未知字段忽略。

        Args:
            path: 设置文件路径

        Returns:
            VideoSettings 实例
        """
        settings = cls(path=path)
        if not os.path.exists(path):
            logger.debug(f"视频设置文件不存在，使用默认值: {path}")
            return settings

        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            logger.warning(f"视频设置文件格式不正确（应为键值映射），使用默认值: {path}")
            return settings

        settings.update(data)
        logger.info(f"已加载视频设置: {path}")
        return settings

    def update(self, data: Dict[str, Any]) -> None:
        known = {f.name for f in fields(self) if f.name != "path"}
        for key, value in data.items():
            if key not in known:
                logger.debug(f"忽略未知视频设置项: {key}")
                continue
            if key == "fps":
                value = int(value)
            setattr(self, key, value)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data.pop("path")
        return data

    def save(self, path: Optional[str] = None) -> str:
        """
        保存设置到 YAML 文件

        Args:
            path: 目标路径，默认为加载时的路径

        Returns:
            实际写入的文件路径
        """
        target = path or self.path or DEFAULT_SETTINGS_FILE
        parent = os.path.dirname(os.path.abspath(target))
        os.makedirs(parent, exist_ok=True)

        with open(target, "w", encoding="utf-8") as f:
            yaml.safe_dump(self.to_dict(), f, allow_unicode=True, sort_keys=False)

        self.path = target
        return target
