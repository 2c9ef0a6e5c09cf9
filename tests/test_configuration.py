#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Hook 配置加载测试
"""

import logging
import xml.etree.ElementTree as ET

import pytest

from camrec.config.loader import Configuration
from camrec.config.hooks import EncoderInfo
from camrec.config.video_settings import VideoSettings
from camrec.core.events import AppExitType
from camrec.core.variables import VARIABLES

from conftest import write_hooks


def make_configuration(exit_notifier, base_dir, settings_path, variables):
    return Configuration(
        exit_notifier,
        base_dir=str(base_dir),
        settings_path=settings_path,
        variables=variables,
    )


class TestConstruction:
    """构造过程测试"""

    def test_loads_hooks_in_file_order(self, exit_notifier, hooks_dir, settings_path, variables):
        """测试 N 个 command 生成 N 个 Hook 且保持文件顺序"""
        configuration = make_configuration(exit_notifier, hooks_dir, settings_path, variables)

        assert [h.hook_id for h in configuration.hooks] == ["record", "probe", "record"]
        assert [h.mode for h in configuration.hooks] == ["video", "info", "audio"]

    def test_hook_fields(self, exit_notifier, hooks_dir, settings_path, variables):
        """测试 Hook 字段与展开后的参数"""
        configuration = make_configuration(exit_notifier, hooks_dir, settings_path, variables)

        assert configuration.hooks[0] == EncoderInfo(
            hook_id="record",
            mode="video",
            exe_name="ffmpeg",
            exe_path="/opt/ffmpeg/bin",
            arguments="-framerate 15 -i ./bitmaps/%d.png ./videos/out.mp4",
        )

    def test_arguments_without_placeholders_unchanged(self, exit_notifier, hooks_dir, settings_path, variables):
        """测试不含占位符的参数原样保留"""
        configuration = make_configuration(exit_notifier, hooks_dir, settings_path, variables)

        assert configuration.hooks[1].arguments == "-hide_banner -version"

    def test_arguments_use_persisted_settings(self, exit_notifier, hooks_dir, settings_path, variables):
        """测试参数展开使用已保存的视频设置"""
        VideoSettings(output_location="/data/rec", fps=30, bitmap_location="/data/bmp").save(settings_path)

        configuration = make_configuration(exit_notifier, hooks_dir, settings_path, variables)

        assert configuration.hooks[0].arguments == "-framerate 30 -i /data/bmp/%d.png /data/rec/out.mp4"

    def test_registers_application_variables(self, exit_notifier, hooks_dir, settings_path, variables):
        """测试构造时写入三个程序变量"""
        make_configuration(exit_notifier, hooks_dir, settings_path, variables)

        assert variables.get("VIDEO_LOCATION") == "./videos"
        assert variables.get("FPS") == "15"
        assert variables.get("BITMAPS") == "./bitmaps"

    def test_default_variable_table_is_process_wide(self, exit_notifier, hooks_dir, settings_path):
        """测试未指定变量表时写入进程级变量表"""
        VARIABLES.clear()
        try:
            Configuration(exit_notifier, base_dir=str(hooks_dir), settings_path=settings_path)
            assert VARIABLES.get("FPS") == "15"
        finally:
            VARIABLES.clear()

    def test_subscribes_to_exit_notifier(self, exit_notifier, hooks_dir, settings_path, variables):
        """测试构造时订阅退出事件"""
        make_configuration(exit_notifier, hooks_dir, settings_path, variables)

        assert exit_notifier.subscriber_count == 1

    def test_missing_hook_file_is_fatal(self, exit_notifier, tmp_path, settings_path, variables):
        """测试缺少 Hooks.config 时构造失败"""
        with pytest.raises(FileNotFoundError, match="Hooks.config"):
            make_configuration(exit_notifier, tmp_path, settings_path, variables)

    def test_malformed_xml_is_fatal(self, exit_notifier, tmp_path, settings_path, variables):
        """测试 XML 无法解析时构造失败"""
        write_hooks(tmp_path, "<configuration><hook>")

        with pytest.raises(ET.ParseError):
            make_configuration(exit_notifier, tmp_path, settings_path, variables)

    def test_missing_hook_section_leaves_empty(self, exit_notifier, tmp_path, settings_path, variables, caplog):
        """测试缺少 hook 段时记录错误并返回空集合"""
        write_hooks(tmp_path, "<configuration><appSettings/></configuration>")

        with caplog.at_level(logging.ERROR):
            configuration = make_configuration(exit_notifier, tmp_path, settings_path, variables)

        assert configuration.hooks == ()
        assert any(r.levelno == logging.ERROR for r in caplog.records)

    def test_hook_section_without_commands_leaves_empty(self, exit_notifier, tmp_path, settings_path, variables):
        """测试 hook 段结构不正确时返回空集合"""
        write_hooks(tmp_path, "<configuration><hook><command hookId='x'/></hook></configuration>")

        configuration = make_configuration(exit_notifier, tmp_path, settings_path, variables)

        assert configuration.hooks == ()

    def test_scalar_settings_file_does_not_break_construction(self, exit_notifier, hooks_dir, tmp_path, variables):
        """测试视频设置文件为标量时仍能完成构造"""
        settings_file = tmp_path / "scalar.yaml"
        settings_file.write_text("42\n", encoding="utf-8")

        configuration = make_configuration(exit_notifier, hooks_dir, str(settings_file), variables)

        assert configuration.video_configuration.fps == 15
        assert len(configuration.hooks) == 3


class TestGetHook:
    """Hook 查找测试"""

    def test_returns_first_match_for_duplicates(self, exit_notifier, hooks_dir, settings_path, variables):
        """测试重复 hookId 返回第一个"""
        configuration = make_configuration(exit_notifier, hooks_dir, settings_path, variables)

        hook = configuration.get_hook("record")
        assert hook is configuration.hooks[0]
        assert hook.mode == "video"

    def test_returns_matching_hook(self, exit_notifier, hooks_dir, settings_path, variables):
        configuration = make_configuration(exit_notifier, hooks_dir, settings_path, variables)

        assert configuration.get_hook("probe").exe_name == "ffprobe"

    def test_no_match_returns_none(self, exit_notifier, hooks_dir, settings_path, variables, caplog):
        """测试未匹配的 hookId 返回 None"""
        configuration = make_configuration(exit_notifier, hooks_dir, settings_path, variables)

        with caplog.at_level(logging.INFO):
            assert configuration.get_hook("missing") is None
        assert "missing" in caplog.text

    def test_empty_collection_returns_none(self, exit_notifier, tmp_path, settings_path, variables):
        """测试空集合对任意 hookId 返回 None"""
        write_hooks(tmp_path, "<configuration/>")
        configuration = make_configuration(exit_notifier, tmp_path, settings_path, variables)

        assert configuration.get_hook("record") is None
        assert configuration.get_hook("") is None


class TestExitNotification:
    """退出时保存视频设置测试"""

    @pytest.fixture
    def configuration(self, exit_notifier, hooks_dir, settings_path, variables):
        return make_configuration(exit_notifier, hooks_dir, settings_path, variables)

    def test_normal_exit_saves_once(self, configuration, exit_notifier, monkeypatch):
        """测试正常退出保存一次"""
        calls = []
        monkeypatch.setattr(configuration.video_configuration, "save", lambda: calls.append(1) or "x")

        exit_notifier.publish(AppExitType.NORMAL)
        exit_notifier.publish(AppExitType.NORMAL)

        assert calls == [1]

    @pytest.mark.parametrize("exit_type", [AppExitType.FORCED, AppExitType.ERROR])
    def test_abnormal_exit_does_not_save(self, configuration, exit_notifier, monkeypatch, exit_type):
        """测试强制/错误退出不保存"""
        calls = []
        monkeypatch.setattr(configuration.video_configuration, "save", lambda: calls.append(1))

        exit_notifier.publish(exit_type)

        assert calls == []

    def test_normal_exit_persists_modified_settings(self, configuration, exit_notifier, settings_path):
        """测试修改后的设置在正常退出时写入文件"""
        settings = configuration.video_configuration
        settings.fps = 60
        configuration.video_configuration = settings

        exit_notifier.publish(AppExitType.NORMAL)

        assert VideoSettings.load(settings_path).fps == 60

    def test_replaced_settings_are_saved(self, configuration, exit_notifier, tmp_path):
        """测试通过 setter 替换的设置对象在退出时保存"""
        target = str(tmp_path / "other.yaml")
        configuration.video_configuration = VideoSettings(fps=5, path=target)

        exit_notifier.publish(AppExitType.NORMAL)

        assert VideoSettings.load(target).fps == 5
