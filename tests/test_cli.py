"""Tests for pixview.cli -- argument handling, config and image loading."""

from __future__ import annotations

import io

import pytest
from PIL import Image

from pixview import __version__
from pixview.cli import ImageLoadError, build_config, load_image, main, parse_args


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("PIXVIEW_ASPECT", "PIXVIEW_MERGE_THRESHOLD", "PIXVIEW_FILTER"):
        monkeypatch.delenv(name, raising=False)


# ---------------------------------------------------------------------------
# load_image
# ---------------------------------------------------------------------------


class TestLoadImage:
    def test_rgb_png(self, tmp_path) -> None:
        path = tmp_path / "rgb.png"
        Image.new("RGB", (4, 3), (1, 2, 3)).save(path)
        image = load_image(str(path))
        assert image.mode == "RGB"
        assert image.size == (4, 3)
        assert image.getpixel((0, 0)) == (1, 2, 3)

    def test_alpha_is_flattened_onto_black(self, tmp_path) -> None:
        path = tmp_path / "rgba.png"
        source = Image.new("RGBA", (2, 1))
        source.putpixel((0, 0), (255, 0, 0, 0))
        source.putpixel((1, 0), (0, 255, 0, 255))
        source.save(path)
        image = load_image(str(path))
        assert image.mode == "RGB"
        assert image.getpixel((0, 0)) == (0, 0, 0)
        assert image.getpixel((1, 0)) == (0, 255, 0)

    def test_palette_image(self, tmp_path) -> None:
        path = tmp_path / "pal.gif"
        Image.new("RGB", (3, 3), (255, 255, 255)).convert("P").save(path)
        image = load_image(str(path))
        assert image.mode == "RGB"
        assert image.getpixel((1, 1)) == (255, 255, 255)

    def test_grayscale_image(self, tmp_path) -> None:
        path = tmp_path / "gray.png"
        Image.new("L", (2, 2), 77).save(path)
        assert load_image(str(path)).getpixel((0, 0)) == (77, 77, 77)

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(ImageLoadError):
            load_image(str(tmp_path / "missing.png"))

    def test_not_an_image(self, tmp_path) -> None:
        path = tmp_path / "notes.txt"
        path.write_text("hello")
        with pytest.raises(ImageLoadError):
            load_image(str(path))


# ---------------------------------------------------------------------------
# Arguments and configuration
# ---------------------------------------------------------------------------


class TestArguments:
    def test_defaults(self) -> None:
        args = parse_args(["pic.png"])
        assert args.image == "pic.png"
        assert args.aspect is None
        assert args.threshold is None
        assert args.filter is None
        assert args.log_file is None

    def test_unknown_filter_is_rejected(self) -> None:
        with pytest.raises(SystemExit):
            parse_args(["pic.png", "--filter", "sharp"])

    def test_version(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc:
            parse_args(["--version"])
        assert exc.value.code == 0
        assert __version__ in capsys.readouterr().out


class TestBuildConfig:
    def test_no_overrides(self) -> None:
        config = build_config(parse_args(["pic.png"]))
        assert config.aspect == 2.5
        assert config.merge_threshold == 3

    def test_cli_overrides_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PIXVIEW_ASPECT", "3.0")
        monkeypatch.setenv("PIXVIEW_MERGE_THRESHOLD", "7")
        config = build_config(parse_args(["pic.png", "--aspect", "2.0", "--filter", "box"]))
        assert config.aspect == 2.0
        assert config.merge_threshold == 7
        assert config.resample_filter == "box"

    def test_invalid_override(self) -> None:
        with pytest.raises(ValueError):
            build_config(parse_args(["pic.png", "--threshold", "-2"]))


# ---------------------------------------------------------------------------
# main
# ---------------------------------------------------------------------------


class TestMain:
    def test_missing_file_exits_with_error(
        self, tmp_path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        path = tmp_path / "missing.png"
        assert main([str(path)]) == 1
        err = capsys.readouterr().err
        assert f"pixview: cannot open image '{path}'" in err

    def test_invalid_configuration(
        self, tmp_path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        monkeypatch.setenv("PIXVIEW_ASPECT", "wide")
        assert main([str(tmp_path / "pic.png")]) == 1
        assert "invalid configuration" in capsys.readouterr().err

    def test_requires_a_terminal(
        self, tmp_path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        path = tmp_path / "pic.png"
        Image.new("RGB", (4, 4)).save(path)
        monkeypatch.setattr("sys.stdin", io.StringIO())
        assert main([str(path)]) == 1
        assert "must be a terminal" in capsys.readouterr().err

    def test_log_file(self, tmp_path) -> None:
        log = tmp_path / "pixview.log"
        main([str(tmp_path / "missing.png"), "--log-file", str(log)])
        assert log.exists()
