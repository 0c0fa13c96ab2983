"""Tests for the command-line interface."""

import json
import logging
import sys

import pytest

from menu_optimizer.cli import main

FIXTURE = """
restaurant:
  restaurant_id: r1
  name: Trattoria Uno
  price_level: 2
menu_items:
  - item_id: m1
    name: Carbonara
    description: Spaghetti with egg, pecorino and guanciale
    price: 16
    category: pasta
"""


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo the handler the CLI installs on the root logger."""
    root_logger = logging.getLogger()
    handlers, level = root_logger.handlers[:], root_logger.level
    yield
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


@pytest.fixture
def data_dir(tmp_path):
    """A data directory with one restaurant."""
    (tmp_path / "uno.yaml").write_text(FIXTURE)
    return tmp_path


def _run(monkeypatch, *argv: str) -> None:
    monkeypatch.setattr(sys, "argv", ["menu-optimizer", *argv])
    main()


class TestCli:
    """Test suite for the CLI subcommands."""

    def test_score(self, monkeypatch, capsys, data_dir):
        """Score prints the dashboard of the restaurant."""
        _run(monkeypatch, "score", str(data_dir), "--restaurant", "r1")

        dashboard = json.loads(capsys.readouterr().out)
        assert dashboard["total_menu_items"] == 1
        assert dashboard["top_performing_items"][0]["item_id"] == "m1"

    def test_options(self, monkeypatch, capsys, data_dir):
        """Options reports missing demographics and peer data."""
        _run(monkeypatch, "options", str(data_dir), "--restaurant", "r1")

        options = json.loads(capsys.readouterr().out)
        assert options["readiness"]["has_menu_items"] is True
        assert [o["available"] for o in options["options"]] == [False, False]

    def test_unknown_restaurant_exits(self, monkeypatch, capsys, data_dir):
        """Domain errors print a message and exit with status 1."""
        with pytest.raises(SystemExit) as exc_info:
            _run(monkeypatch, "score", str(data_dir), "--restaurant", "nowhere")

        assert exc_info.value.code == 1
        assert "Restaurant nowhere not found" in capsys.readouterr().err

    def test_missing_data_dir_exits(self, monkeypatch, tmp_path):
        """A missing data directory exits with status 1."""
        with pytest.raises(SystemExit) as exc_info:
            _run(monkeypatch, "options", str(tmp_path / "absent"), "--restaurant", "r1")

        assert exc_info.value.code == 1
