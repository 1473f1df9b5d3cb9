from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Any, List
from unittest import mock

import pytest

from video_encode.datatypes import EngineConfig
from video_encode.engine import theora as theora_module
from video_encode.engine.theora import FfmpegTheora
from video_encode.errors import EngineError


@pytest.fixture(autouse=True)
def _tools_present(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(theora_module, "which", lambda name: f"/usr/bin/{name}")


def _install_run(monkeypatch: pytest.MonkeyPatch, returncode: int, stdout: str = "") -> List[List[str]]:
    commands: List[List[str]] = []

    def _run(cmd: List[str], **_kwargs: Any) -> subprocess.CompletedProcess[str]:
        commands.append(list(cmd))
        return subprocess.CompletedProcess(cmd, returncode, stdout=stdout, stderr=None)

    monkeypatch.setattr(theora_module._subproc, "run_checked", _run)
    return commands


def test_command_targets_ogg_theora() -> None:
    transcoder = FfmpegTheora("video/path/input.mov", "video/path/tmpfile.ogv")
    cmd = transcoder.command()
    assert cmd[:4] == ["ffmpeg", "-y", "-i", "video/path/input.mov"]
    assert cmd[cmd.index("-vcodec") + 1] == "libtheora"
    assert cmd[cmd.index("-acodec") + 1] == "libvorbis"
    assert cmd[cmd.index("-f") + 1] == "ogg"
    assert cmd[-1] == "video/path/tmpfile.ogv"


def test_command_uses_configured_binary() -> None:
    transcoder = FfmpegTheora("in.mov", "out.ogv", EngineConfig(ffmpeg_binary="/opt/ffmpeg/bin/ffmpeg"))
    assert transcoder.command()[0] == "/opt/ffmpeg/bin/ffmpeg"


def test_run_without_logger(monkeypatch: pytest.MonkeyPatch) -> None:
    commands = _install_run(monkeypatch, 0)
    assert FfmpegTheora("in.mov", "out.ogv").run() == Path("out.ogv")
    assert len(commands) == 1


def test_run_logs_command_and_success() -> None:
    log = mock.Mock(spec=logging.Logger)
    with pytest.MonkeyPatch.context() as monkeypatch:
        _install_run(monkeypatch, 0)
        FfmpegTheora("in.mov", "out.ogv").run(log)
    messages = [call.args[0] for call in log.info.call_args_list]
    assert messages[0].startswith("Running....")
    assert messages[-1] == "Success!"
    log.error.assert_not_called()


def test_run_failure_logs_output_and_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    _install_run(monkeypatch, 1, stdout="Unknown encoder 'libtheora'")
    log = mock.Mock(spec=logging.Logger)
    with pytest.raises(EngineError) as excinfo:
        FfmpegTheora("in.mov", "out.ogv").run(log)
    assert excinfo.value.stderr == "Unknown encoder 'libtheora'"
    log.error.assert_any_call("Failure!")
    log.error.assert_any_call("Unknown encoder 'libtheora'")
