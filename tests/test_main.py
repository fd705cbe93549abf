"""Tests for the command-line entry point: argument parsing and headless runs."""

import json
import logging
import sys
import os

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from tilenav.__main__ import _build_parser, _config_from_args, main


@pytest.fixture
def restore_root_logging():
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    yield
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)


def _config(*argv):
    parser = _build_parser()
    return _config_from_args(parser, parser.parse_args(list(argv)))


class TestConfigFromArgs:
    def test_defaults(self):
        config = _config("cli")
        assert config.world_seed == 42
        assert config.level_file is None
        assert not config.generate_level
        assert config.bfs_limit == 20
        assert config.category_levels == ()

    def test_world_args(self):
        config = _config("serve", "--seed", "7", "--generate", "--width", "12", "--height", "9", "--bfs-limit", "5")
        assert config.world_seed == 7
        assert config.generate_level
        assert (config.grid_width, config.grid_height) == (12, 9)
        assert config.bfs_limit == 5

    def test_category_levels_normalised(self):
        config = _config("cli", "--category-level", " Graph=warning", "--category-level", "fsm=VERBOSE")
        assert config.category_levels == (("graph", "WARNING"), ("fsm", "VERBOSE"))


class TestCategoryLevelErrors:
    @pytest.mark.parametrize(
        "pair, message",
        [
            ("pathing=WARNING", "unknown log category 'pathing'"),
            ("graph=LOUD", "unknown log level 'LOUD'"),
            ("graph", "expects CATEGORY=LEVEL"),
        ],
    )
    def test_rejected_as_usage_error(self, pair, message, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["cli", "--ticks", "1", "--category-level", pair])
        assert exc.value.code == 2
        assert message in capsys.readouterr().err


class TestHeadlessRun:
    def test_cli_writes_trace(self, tmp_path, restore_root_logging):
        trace = tmp_path / "out" / "trace.json"
        main(["cli", "--ticks", "5", "--trace", str(trace), "--category-level", "graph=WARNING"])

        data = json.loads(trace.read_text(encoding="utf-8"))
        assert data["seed"] == 42
        assert data["level"] == "default"
        assert data["total_ticks"] == 5
        assert [t["tick"] for t in data["ticks"]] == [1, 2, 3, 4, 5]
        names = [a["name"] for a in data["ticks"][0]["actors"]]
        assert names == ["patroller-1", "player"]

    def test_generated_level_trace(self, tmp_path, restore_root_logging):
        trace = tmp_path / "gen.json"
        main(["cli", "--ticks", "3", "--trace", str(trace), "--generate", "--seed", "9"])

        data = json.loads(trace.read_text(encoding="utf-8"))
        assert data["level"] == "generated"
        assert data["seed"] == 9
        assert data["total_ticks"] == 3
