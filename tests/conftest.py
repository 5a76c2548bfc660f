from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def _isolated_log_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    log_dir = tmp_path / "logs"
    monkeypatch.setenv("TACTSYNTH_LOG_DIR", str(log_dir))
    monkeypatch.delenv("TACTSYNTH_DEBUG", raising=False)
    return log_dir
