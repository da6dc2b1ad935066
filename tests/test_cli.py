import json

import pytest
from PIL import Image

from line_extractor import cli

from conftest import page_from_rows


@pytest.fixture
def dirs(tmp_path):
    return tmp_path / "out", tmp_path / "diag"


def _args(image, out, diag, *extra):
    return [str(image), "-o", str(out), "--diagnostics-dir", str(diag), *extra]


def test_cli_writes_lines_and_diagnostics(two_band_page, write_page, dirs, capsys):
    out, diag = dirs
    image = write_page(two_band_page)

    code = cli.main(_args(image, out, diag, "-c", "0.5", "-s", "0.01", "-a", "0", "-b", "0", "--json"))

    assert code == 0
    assert sorted(p.name for p in out.iterdir()) == ["00.png", "01.png"]
    with Image.open(out / "00.png") as img:
        assert img.size == (10, 10)
    assert (diag / "average_raw.png").exists()
    assert (diag / "average_blurred.png").exists()
    assert (diag / "average_cutoff.png").exists()
    assert (diag / "view.png").exists()

    record = json.loads(capsys.readouterr().out)
    assert record["n_lines"] == 2
    assert [(ln["start"], ln["end"]) for ln in record["lines"]] == [(10, 19), (30, 39)]


def test_cli_default_options_pad_lines(two_band_page, write_page, dirs, capsys):
    out, diag = dirs
    image = write_page(two_band_page)

    assert cli.main(_args(image, out, diag, "-s", "0.01", "-c", "0.5", "--json", "--no-diagnostics")) == 0

    record = json.loads(capsys.readouterr().out)
    # above=0.7, below=0.6: [10-7, 19+6], [30-7, 39+36]
    assert [(ln["start"], ln["end"]) for ln in record["lines"]] == [(3, 25), (23, 75)]
    assert not diag.exists()


def test_cli_white_page_fails(white_page, write_page, dirs):
    out, diag = dirs
    assert cli.main(_args(write_page(white_page), out, diag)) == 1
    assert not out.exists()


def test_cli_missing_image_fails(tmp_path, dirs):
    out, diag = dirs
    assert cli.main(_args(tmp_path / "nope.png", out, diag)) == 1


def test_cli_rejects_bad_cutoff(two_band_page, write_page, dirs):
    out, diag = dirs
    assert cli.main(_args(write_page(two_band_page), out, diag, "--cutoff", "1.5")) == 1


def test_cli_clamp_flag(write_page, dirs):
    out, diag = dirs
    image = write_page(page_from_rows([255] * 80 + [0] * 10 + [255] * 10))
    base = ("-c", "0.5", "-s", "0.01", "-b", "1.0", "--no-diagnostics")

    assert cli.main(_args(image, out, diag, *base)) == 1
    assert cli.main(_args(image, out, diag, *base, "--clamp")) == 0
    with Image.open(out / "00.png") as img:
        assert img.size[1] == 100 - (80 - int(0.7 * 80))


def test_cli_argument_errors_exit_2():
    with pytest.raises(SystemExit) as exc:
        cli.main([])
    assert exc.value.code == 2
