#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
pytest 配置文件
"""

import os
import sys
import logging
import textwrap

import pytest

# 添加项目根目录到 Python 路径
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from camrec.core.variables import VariableTable
from camrec.core.events import ExitNotifier
from camrec.utils import process


SAMPLE_HOOKS = """\
<?xml version="1.0" encoding="utf-8"?>
<configuration>
  <configSections>
    <section name="hook" type="CAM.Configuration.Hook, CAM.Configuration"/>
  </configSections>
  <hook>
    <commands>
      <command hookId="record" mode="video">
        <executable name="ffmpeg" exeLocation="/opt/ffmpeg/bin"/>
        <arguments commandLine="-framerate ${FPS} -i ${BITMAPS}/%d.png ${VIDEO_LOCATION}/out.mp4"/>
      </command>
      <command hookId="probe" mode="info">
        <executable name="ffprobe" exeLocation=""/>
        <arguments commandLine="-hide_banner -version"/>
      </command>
      <command hookId="record" mode="audio">
        <executable name="sox" exeLocation="/usr/bin"/>
        <arguments commandLine="-d out.wav"/>
      </command>
    </commands>
  </hook>
</configuration>
"""


def write_hooks(directory, content: str) -> str:
    """在目录中写入 Hooks.config"""
    path = os.path.join(str(directory), "Hooks.config")
    with open(path, "w", encoding="utf-8") as f:
        f.write(textwrap.dedent(content))
    return path


@pytest.fixture
def hooks_dir(tmp_path):
    """包含示例 Hooks.config 的目录"""
    write_hooks(tmp_path, SAMPLE_HOOKS)
    return tmp_path


@pytest.fixture
def variables():
    """独立的变量表，避免污染进程级变量表"""
    return VariableTable()


@pytest.fixture
def exit_notifier():
    return ExitNotifier()


@pytest.fixture
def settings_path(tmp_path):
    return str(tmp_path / "settings" / "video_settings.yaml")


@pytest.fixture(autouse=True)
def restore_logging_and_process_state():
    """测试结束后恢复根 logger 的 handler 和进程退出状态"""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
    process.reset_shutdown_state()
