#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Hook 配置文件解析

Hooks.config 为 XML 格式，沿用 .NET 应用配置的结构:

    <configuration>
      <hook>
        <commands>
          <command hookId="record" mode="video">
            <executable name="ffmpeg" exeLocation="C:\\tools\\ffmpeg\\bin"/>
            <arguments commandLine="-framerate ${FPS} -i ${BITMAPS}\\%d.png ..."/>
          </command>
        </commands>
      </hook>
    </configuration>
"""

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import List, Mapping, Optional

from camrec.config.defaults import HOOK_SECTION
from camrec.core.variables import expand_variables

logger = logging.getLogger("Hooks")


@dataclass(frozen=True)
class EncoderInfo:
    """一个 Hook 对应的编码器调用描述"""

    hook_id: str
    mode: str
    exe_name: str
    exe_path: str
    arguments: str


def _find_hook_section(root: ET.Element) -> Optional[ET.Element]:
    # 允许根节点本身就是 <hook>
    if root.tag == HOOK_SECTION:
        return root
    return root.find(HOOK_SECTION)


def _parse_command(element: ET.Element, variables: Mapping[str, str]) -> Optional[EncoderInfo]:
    hook_id = element.get("hookId")
    if not hook_id:
        logger.warning("忽略缺少 hookId 的 command 配置")
        return None

    executable = element.find("executable")
    arguments = element.find("arguments")
    command_line = arguments.get("commandLine", "") if arguments is not None else ""

    return EncoderInfo(
        hook_id=hook_id,
        mode=element.get("mode", ""),
        exe_name=executable.get("name", "") if executable is not None else "",
        exe_path=executable.get("exeLocation", "") if executable is not None else "",
        arguments=expand_variables(command_line, variables),
    )


def parse_hook_file(path: str, variables: Mapping[str, str]) -> List[EncoderInfo]:
    """
    解析 Hook 配置文件

    hook 段缺失或结构不正确时记录错误并返回空列表；
    XML 本身无法解析时抛出 ParseError。

    Args:
        path: 配置文件路径
        variables: 参数展开使用的变量映射

    Returns:
        按文件顺序排列的 EncoderInfo 列表
    """
    try:
        root = ET.parse(path).getroot()
    except ET.ParseError as e:
        logger.error(f"Hook 配置文件格式错误: {path}: {e}")
        raise

    section = _find_hook_section(root)
    commands = section.find("commands") if section is not None else None
    if commands is None:
        logger.error("未配置任何 Hook！FFmpeg 没有可用的命令，录制可能无法工作！")
        return []

    hooks: List[EncoderInfo] = []
    for element in commands:
        if element.tag != "command":
            continue
        info = _parse_command(element, variables)
        if info is not None:
            hooks.append(info)
            logger.debug(
                f"已加载 Hook: {info.hook_id}",
                extra={"hook": info.hook_id, "mode": info.mode},
            )

    return hooks
