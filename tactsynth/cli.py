from __future__ import annotations

import argparse
import logging
import os
import sys

from .composition import Composition, load_composition
from .config import RenderSettings
from .console import Spinner, render_error
from .logging_utils import DEBUG_ENV, configure_logging, log_failure
from .pitch import PitchTable
from .renderer import CompositionRenderer
from .sinks import create_sink

_LOGGER = logging.getLogger("tactsynth.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tactsynth",
        description="Render a JSON composition to a WAV file and the speakers.",
        add_help=False,
    )
    parser.add_argument("composition", help="Path to the composition JSON file.")
    return parser


def render_to_sink(
    name: str, composition: Composition, settings: RenderSettings, pitch_table: PitchTable
) -> int:
    """Render the whole composition into one sink; its output is discarded on failure."""
    with create_sink(name, settings) as sink:
        renderer = CompositionRenderer(
            sink,
            pitch_table=pitch_table,
            strict_beats=settings.strict_beats,
        )
        with Spinner(f"Rendering to {name}"):
            written = renderer.render(composition)
    _LOGGER.info("Sent %d measures to %s", written, name)
    return written


def main(argv: list[str] | None = None) -> int:
    args_list = sys.argv[1:] if argv is None else argv
    if len(args_list) != 1:
        return 0
    configure_logging()
    stage = "reading settings"
    try:
        # "--" keeps a path such as "-song.json" from being read as a flag
        args = build_parser().parse_args(["--", *args_list])
        settings = RenderSettings.from_env()
        stage = "loading the pitch table"
        pitch_table = settings.load_pitch_table()
        stage = f"loading {args.composition}"
        composition = load_composition(args.composition)
        for name in settings.sinks:
            stage = f"rendering to {name}"
            render_to_sink(name, composition, settings, pitch_table)
        return 0
    except Exception as exc:
        _LOGGER.warning("%s failed: %s", stage, exc, exc_info=bool(os.environ.get(DEBUG_ENV)))
        log_failure(stage, exc)
        render_error(stage, exc)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
