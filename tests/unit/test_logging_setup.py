# tests/unit/test_logging_setup.py
"""Test logging configuration"""
import importlib
import logging

import curved_screen
from curved_screen.core import logging_setup
from curved_screen.core.logging_setup import (
    COORD_LEVEL,
    LevelFilter,
    get_logger,
    set_display_levels,
    setup_logging,
)


def make_record(level):
    return logging.LogRecord("curved_screen.test", level, __file__, 1, "msg", None, None)


class TestImportIsQuiet:

    def test_import_leaves_root_logger_alone(self, capsys):
        root = logging.getLogger()
        host_handler = logging.NullHandler()
        root.addHandler(host_handler)
        try:
            importlib.reload(curved_screen)
            get_logger("curved_screen.curve_layout")
            assert host_handler in root.handlers
        finally:
            root.removeHandler(host_handler)
        assert capsys.readouterr().out == ""

    def test_get_logger_adds_no_handlers(self):
        get_logger("curved_screen.driver")
        package = logging.getLogger(logging_setup.PACKAGE_LOGGER)
        assert all(isinstance(h, logging.NullHandler) for h in package.handlers)


class TestSetupLogging:

    def test_writes_package_records_to_file(self, tmp_path):
        log_path = setup_logging(log_dir=tmp_path)
        assert log_path == tmp_path / "curvedscreen.log"

        logger = get_logger("curved_screen.curve_layout")
        logger.info("layout ready")
        logger.coord("segment 0 detail")

        text = log_path.read_text()
        assert "layout ready" in text
        assert "segment 0 detail" not in text

    def test_is_idempotent(self, tmp_path):
        first = setup_logging(log_dir=tmp_path)
        assert setup_logging(log_dir=tmp_path / "other") == first
        package = logging.getLogger(logging_setup.PACKAGE_LOGGER)
        assert len([h for h in package.handlers if isinstance(h, logging.FileHandler)]) == 1

    def test_keeps_existing_log_when_asked(self, tmp_path):
        (tmp_path / "curvedscreen.log").write_text("previous run\n")
        setup_logging(log_dir=tmp_path, clear_log=False)
        assert "previous run" in (tmp_path / "curvedscreen.log").read_text()

    def test_levels_set_before_setup_are_applied(self, tmp_path):
        set_display_levels(["ERROR", "COORD"])
        log_path = setup_logging(log_dir=tmp_path)

        logger = get_logger("curved_screen.curve_layout")
        logger.info("progress")
        logger.coord("segment 3 detail")

        text = log_path.read_text()
        assert "segment 3 detail" in text
        assert "progress" not in text

    def test_set_display_levels_at_runtime(self, tmp_path):
        log_path = setup_logging(log_dir=tmp_path)
        logger = get_logger("curved_screen.driver")

        set_display_levels(["ERROR"])
        logger.warning("hidden warning")
        logger.error("shown error")

        text = log_path.read_text()
        assert "shown error" in text
        assert "hidden warning" not in text


class TestLevelFilter:

    def test_allows_non_contiguous_levels(self):
        level_filter = LevelFilter(["ERROR", "coord", logging.DEBUG])
        assert level_filter.filter(make_record(logging.ERROR))
        assert level_filter.filter(make_record(COORD_LEVEL))
        assert level_filter.filter(make_record(logging.DEBUG))
        assert not level_filter.filter(make_record(logging.INFO))
        assert not level_filter.filter(make_record(logging.WARNING))

    def test_unknown_names_are_ignored(self):
        assert LevelFilter(["LOUD", "INFO"]).allowed_levels == {logging.INFO}
