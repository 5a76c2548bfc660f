import logging
from pathlib import Path

import pytest

from tactsynth.errors import UnknownPitchError
from tactsynth.logging_utils import configure_logging, get_log_dir, get_log_path, log_failure


def test_log_dir_uses_env_override(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TACTSYNTH_LOG_DIR", str(tmp_path))
    assert get_log_dir() == tmp_path
    assert get_log_path() == tmp_path / "tactsynth.log"


def test_log_failure_appends_stage_and_traceback(_isolated_log_dir: Path) -> None:
    try:
        raise ValueError("bad measure")
    except ValueError as exc:
        path = log_failure("rendering to wav", exc)

    assert path == _isolated_log_dir / "tactsynth.log"
    text = path.read_text(encoding="utf-8")
    assert "rendering to wav failed: ValueError: bad measure" in text
    assert "Traceback" in text


def test_log_failure_records_note_location(_isolated_log_dir: Path) -> None:
    error = UnknownPitchError("x9").at("measure 3, channel 2, beat 1")
    path = log_failure("rendering to playback", error)
    assert path is not None
    assert "stopped at measure 3, channel 2, beat 1" in path.read_text(encoding="utf-8")


def test_configure_logging_replaces_its_handlers_when_forced(_isolated_log_dir: Path) -> None:
    logger = logging.getLogger("tactsynth")
    previous = list(logger.handlers)
    try:
        configure_logging(force=True)
        configure_logging(force=True)
        file_handlers = [h for h in logger.handlers if isinstance(h, logging.FileHandler)]
        assert len(file_handlers) == 1
        assert Path(file_handlers[0].baseFilename) == _isolated_log_dir / "tactsynth.log"
    finally:
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        for handler in previous:
            logger.addHandler(handler)
