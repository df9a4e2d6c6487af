"""
Tests for the external optimizer wrapper.

Subprocess calls are mocked; the tools themselves are never run.
"""

import subprocess
from pathlib import Path
from unittest import mock

import pytest

from IU_Libs.CodecLib import optimizer as optimizer_module
from IU_Libs.CodecLib.optimizer import ImageOptimizer, OptimizerConfig


@pytest.fixture
def fake_tool(tmp_path):
    """An executable file that stands in for jpegtran / pngcrush."""
    tool = tmp_path / "fake_tool"
    tool.write_text("#!/bin/sh\nexit 0\n")
    tool.chmod(0o755)
    return str(tool)


def _completed(returncode=0, stderr=""):
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout="", stderr=stderr)


class TestOptimizerConfig:
    """Test tool path handling."""

    def test_defaults_disable_everything(self):
        config = OptimizerConfig()

        assert config.jpegtran_path is None
        assert config.pngcrush_path is None
        assert config.tool_for("jpg") is None

    def test_executable_path_kept(self, fake_tool):
        config = OptimizerConfig(jpegtran_path=fake_tool)

        assert config.tool_for("jpeg") == fake_tool
        assert config.tool_for("png") is None
        assert config.tool_for("gif") is None

    def test_non_executable_path_dropped(self, tmp_path):
        plain = tmp_path / "plain.txt"
        plain.write_text("nope")
        plain.chmod(0o644)

        config = OptimizerConfig(pngcrush_path=str(plain), jpegtran_path=str(tmp_path / "missing"))

        assert config.pngcrush_path is None
        assert config.jpegtran_path is None

    def test_detect_uses_path_lookup(self, monkeypatch, fake_tool):
        found = {"jpegtran": fake_tool, "pngcrush": None}
        monkeypatch.setattr(optimizer_module.shutil, "which", lambda name: found[name])

        config = OptimizerConfig.detect()

        assert config.jpegtran_path == fake_tool
        assert config.pngcrush_path is None

    def test_dict_round_trip(self, fake_tool):
        config = OptimizerConfig(jpegtran_path=fake_tool)

        restored = OptimizerConfig.from_dict({**config.to_dict(), "unknown": 1})

        assert restored == config


class TestImageOptimizer:
    """Test command lines and result handling."""

    def test_build_jpeg_command(self, fake_tool):
        optimizer = ImageOptimizer(OptimizerConfig(jpegtran_path=fake_tool))

        command = optimizer.build_command("jpg", "a_tmp.jpg", "a.jpg")

        assert command == [
            fake_tool, "-copy", "none", "-optimize", "-progressive",
            "-outfile", "a.jpg", "a_tmp.jpg",
        ]

    def test_build_png_command(self, fake_tool):
        optimizer = ImageOptimizer(OptimizerConfig(pngcrush_path=fake_tool))

        assert optimizer.build_command("png", "a_tmp.png", "a.png") == [
            fake_tool, "-q", "a_tmp.png", "a.png",
        ]

    def test_build_command_without_tool(self):
        with pytest.raises(ValueError):
            ImageOptimizer().build_command("png", "a_tmp.png", "a.png")

    def test_unsupported_format_not_run(self, fake_tool, tmp_path):
        optimizer = ImageOptimizer(OptimizerConfig(jpegtran_path=fake_tool))

        with mock.patch("IU_Libs.CodecLib.optimizer.subprocess.run") as run:
            assert optimizer.optimize(tmp_path / "a_tmp.gif", tmp_path / "a.gif") is False
            run.assert_not_called()

    def test_success(self, fake_tool, tmp_path):
        optimizer = ImageOptimizer(OptimizerConfig(jpegtran_path=fake_tool))
        final = tmp_path / "a.jpg"

        def fake_run(command, **kwargs):
            Path(command[command.index("-outfile") + 1]).write_bytes(b"\xff\xd8data")
            return _completed()

        with mock.patch("IU_Libs.CodecLib.optimizer.subprocess.run", side_effect=fake_run) as run:
            assert optimizer.optimize(tmp_path / "a_tmp.jpg", final) is True
            assert run.call_count == 1

        assert final.read_bytes() == b"\xff\xd8data"

    def test_nonzero_exit(self, fake_tool, tmp_path):
        optimizer = ImageOptimizer(OptimizerConfig(pngcrush_path=fake_tool))

        with mock.patch(
            "IU_Libs.CodecLib.optimizer.subprocess.run",
            return_value=_completed(returncode=2, stderr="bad input"),
        ):
            assert optimizer.optimize(tmp_path / "a_tmp.png", tmp_path / "a.png") is False

    def test_start_failure(self, fake_tool, tmp_path):
        optimizer = ImageOptimizer(OptimizerConfig(pngcrush_path=fake_tool))

        with mock.patch(
            "IU_Libs.CodecLib.optimizer.subprocess.run",
            side_effect=OSError("exec format error"),
        ):
            assert optimizer.optimize(tmp_path / "a_tmp.png", tmp_path / "a.png") is False

    def test_missing_output(self, fake_tool, tmp_path):
        optimizer = ImageOptimizer(OptimizerConfig(pngcrush_path=fake_tool))

        with mock.patch(
            "IU_Libs.CodecLib.optimizer.subprocess.run", return_value=_completed()
        ):
            assert optimizer.optimize(tmp_path / "a_tmp.png", tmp_path / "a.png") is False
