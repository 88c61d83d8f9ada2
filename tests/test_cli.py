from __future__ import annotations

import logging

import pytest
from PIL import Image

from mandelview.__main__ import build_parser, config_from_args, main
from mandelview.config import ViewerConfig
from mandelview.engine import MandelbrotEngine
from mandelview.logging_config import setup_logging
from mandelview.snapshot import save_snapshot


def parse(argv):
    parser = build_parser()
    return config_from_args(parser, parser.parse_args(argv))


def test_defaults() -> None:
    config = parse([])
    assert config == ViewerConfig()
    assert (config.width, config.height, config.iteration_depth) == (500, 500, 16)


def test_options_map_onto_config() -> None:
    config = parse([
        "--dims", "320", "200", "--depth", "80", "--center", "-0.5", "0.25",
        "--zoom", "0.1", "--fps", "30", "--always-redraw", "--legacy-palette",
    ])
    assert (config.width, config.height) == (320, 200)
    assert config.iteration_depth == 80
    assert (config.center_x, config.center_y) == (-0.5, 0.25)
    assert config.zoom == 0.1
    assert config.fps == 30
    assert config.always_redraw and config.legacy_palette


@pytest.mark.parametrize("argv", [
    ["--depth", "0"],
    ["--depth", "300"],
    ["--zoom", "0"],
    ["--dims", "1", "100"],
    ["--fps", "0"],
])
def test_invalid_options_exit(argv) -> None:
    with pytest.raises(SystemExit):
        parse(argv)


def test_snapshot_mode_writes_png(tmp_path) -> None:
    out = tmp_path / "plot.png"
    main(["--dims", "24", "16", "--depth", "32", "-o", str(out), "--log-level", "WARNING"])
    with Image.open(out) as img:
        assert img.size == (24, 16)
        assert img.mode == "RGBA"
    logger = logging.getLogger("mandelview")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


def test_save_snapshot_matches_engine_buffer(tmp_path) -> None:
    engine = MandelbrotEngine(5, 4)
    engine.regenerate()
    path = save_snapshot(engine, str(tmp_path / "snap.png"))
    with Image.open(path) as img:
        assert img.getpixel((4, 0)) == tuple(engine.rgba_array()[0, 4])


def test_setup_logging_replaces_handlers(tmp_path) -> None:
    log_file = tmp_path / "viewer.log"
    setup_logging(logging.DEBUG)
    logger = setup_logging(logging.INFO, str(log_file))
    try:
        assert logger.name == "mandelview"
        assert len(logger.handlers) == 2
        logging.getLogger("mandelview.viewport").info("View reset")
        logging.getLogger("mandelview.viewport").debug("hidden")
        for handler in logger.handlers:
            handler.flush()
        text = log_file.read_text(encoding="utf-8")
        assert "[mandelview.viewport] View reset" in text
        assert "hidden" not in text
    finally:
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        logger.setLevel(logging.NOTSET)
