import json
import logging

import pytest

import tmap
from tmap_lib.bitmap import save_bitmap
from tmap_lib.errors import InvalidSpan


@pytest.fixture
def map_file(tmp_path, make_grid):
    def _write(rows, name="level.bmp"):
        path = str(tmp_path / name)
        save_bitmap(make_grid(rows), path)
        return path

    return _write


@pytest.fixture(autouse=True)
def reset_tmap_logger():
    yield
    logger = logging.getLogger("tmap")
    for h in logger.handlers[:]:
        logger.removeHandler(h)
        h.close()


def test_prints_map_to_stdout(capsys, map_file, colors):
    dig, wall = colors["DIG_REGION"], colors["WALL"]
    path = map_file([[dig, dig], [dig, wall]])
    argv = ["-f", path, "--round-rocks", "1", "--square-rocks", "2", "--gems", "3"]

    assert tmap.main(argv) == 0

    out = capsys.readouterr().out
    data = json.loads(out)
    assert data["items"] == [{"type": "WALL", "x": 64, "y": 64}]
    assert data["digRegion"] == [[{"a": 0, "b": 1}], [{"a": 0, "b": 1}]]
    assert (data["numRoundRocks"], data["numSquareRocks"], data["numGems"]) == (1, 2, 3)


def test_writes_output_file(tmp_path, capsys, map_file, colors):
    path = map_file([[colors["GRAVITY_REGION"], colors["RESPAWN_REGION"]]])
    out_path = tmp_path / "level.json"

    assert tmap.main(["-f", path, "-o", str(out_path)]) == 0

    assert capsys.readouterr().out == ""
    assert json.loads(out_path.read_text())["spawnPoints"] == [{"x": 64, "y": 0}]


def test_unrecognized_color_exits_non_zero(capsys, map_file, colors):
    path = map_file([[colors["DIG_REGION"], 0x123456]])

    assert tmap.main(["-f", path]) == 1

    captured = capsys.readouterr()
    assert captured.out == ""
    assert "UnrecognizedColor" in captured.err
    assert "0x123456" in captured.err
    assert "(1, 0)" in captured.err


def test_missing_image_exits_non_zero(tmp_path, capsys):
    assert tmap.main(["-f", str(tmp_path / "absent.bmp")]) == 1
    assert "Could not read image" in capsys.readouterr().err


def test_core_errors_are_reported(mocker, capsys, map_file, colors):
    path = map_file([[colors["DIG_REGION"]]])
    mocker.patch("tmap.build_map_from_file", side_effect=InvalidSpan(3, 1))

    assert tmap.main(["-f", path]) == 1
    assert "InvalidSpan" in capsys.readouterr().err


def test_config_file_is_applied(tmp_path, capsys, map_file):
    cfg = tmp_path / "tmap.cfg"
    cfg.write_text("[Map]\nblock_size = 10\n[Colors]\nWALL = 0x111111\n")
    path = map_file([[0x111111]])

    assert tmap.main(["-f", path, "-c", str(cfg)]) == 0
    assert json.loads(capsys.readouterr().out)["items"] == [{"type": "WALL", "x": 0, "y": 0}]


def test_negative_counts_are_rejected_by_argparse(capsys, map_file, colors):
    path = map_file([[colors["DIG_REGION"]]])
    with pytest.raises(SystemExit) as exc:
        tmap.main(["-f", path, "--gems", "-1"])
    assert exc.value.code == 2


def test_malformed_config_exits_non_zero(tmp_path, capsys, map_file, colors):
    cfg = tmp_path / "broken.cfg"
    cfg.write_text("block_size = 3\n")
    path = map_file([[colors["DIG_REGION"]]])

    assert tmap.main(["-f", path, "-c", str(cfg)]) == 1

    captured = capsys.readouterr()
    assert captured.out == ""
    assert "Invalid config file" in captured.err
