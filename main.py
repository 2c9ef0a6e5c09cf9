#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
CAM Recorder 配置工具 - 主入口
"""

import sys

from cli import main


if __name__ == "__main__":
    sys.exit(main())
