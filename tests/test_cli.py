import json

import pytest

from stickergrid.cli import main
from stickergrid.pipeline import Bitmap


@pytest.fixture
def sticker_files(tmp_path, square_sticker):
    paths = []
    for index in range(3):
        path = tmp_path / f"sticker{index}.png"
        square_sticker().save(path)
        paths.append(str(path))
    return paths


@pytest.fixture
def log_args(tmp_path):
    return ["--log-file", str(tmp_path / "logs" / "debug.log")]


def test_composite(tmp_path, sticker_files, log_args):
    output = tmp_path / "grid.png"
    assert main(["composite", *sticker_files, "-o", str(output), *log_args]) == 0
    assert Bitmap.open(output).size == (740, 1280)


def test_remove_bg_default_output_name(tmp_path, sticker_files, log_args):
    assert main(["remove-bg", sticker_files[0], *log_args]) == 0

    result = Bitmap.open(tmp_path / "sticker0_transparent.png")
    assert result.pixels[0, 0, 3] == 0
    assert result.pixels[200, 200, 3] == 255

    log_lines = (tmp_path / "logs" / "debug.log").read_text().splitlines()
    assert json.loads(log_lines[-1])["stages"][0]["stage"] == "s2_background_removal"


def test_remove_bg_reports_failures(tmp_path, sticker_files, log_args):
    broken = tmp_path / "broken.png"
    broken.write_bytes(b"not an image")
    assert main(["remove-bg", sticker_files[0], str(broken), *log_args]) == 1


def test_remove_bg_output_with_many_files(sticker_files, log_args):
    with pytest.raises(SystemExit):
        main(["remove-bg", *sticker_files, "-o", "x.png", *log_args])


def test_split_trims_to_count(tmp_path, sticker_files, log_args):
    grid = tmp_path / "grid.png"
    main(["composite", *sticker_files, "-o", str(grid), *log_args])

    out = tmp_path / "cells"
    assert main(["split", str(grid), "-o", str(out), "--count", "19", "--offset", "16", *log_args]) == 0
    assert sorted(p.name for p in out.iterdir()) == ["17.png", "18.png", "19.png"]


def test_build(tmp_path, sticker_files, log_args):
    out = tmp_path / "set"
    args = ["build", *sticker_files, "--main", sticker_files[0], "--tab", sticker_files[1]]
    assert main([*args, "-o", str(out), *log_args]) == 0

    names = sorted(p.name for p in out.iterdir())
    assert names == ["01.png", "02.png", "03.png", "main.png", "tab.png"]
    assert Bitmap.open(out / "tab.png").size == (96, 74)
    assert Bitmap.open(out / "01.png").size == (370, 320)


def test_missing_input(tmp_path, log_args):
    assert main(["build", str(tmp_path / "missing.png"), "-o", str(tmp_path), *log_args]) == 1


def test_invalid_cell_size(tmp_path, sticker_files, log_args):
    with pytest.raises(SystemExit):
        main(["composite", *sticker_files, "-o", str(tmp_path / "g.png"), "--cell-width", "0", *log_args])
