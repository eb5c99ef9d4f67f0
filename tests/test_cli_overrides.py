from pathlib import Path
import json

import numpy as np
import pytest
from PIL import Image

from picture_lab.config import DEFAULT_CONFIG, LabSettings
from picture_lab.picture import Picture
from picture_lab.utils.config import deep_update, load_config, parse_set_overrides
from scripts import run_pipeline, run_stego


def test_cli_set_overrides_take_precedence() -> None:
    base_config = {"io": {"jpeg_quality": 95, "images_dir": "images"}, "glass": {"seed": None}}
    config = deep_update(base_config, {"io": {"jpeg_quality": 80}})
    set_overrides = parse_set_overrides(["io.jpeg_quality=60", "glass.seed=7", "steganography.black_threshold=40"])
    config = deep_update(config, set_overrides)

    settings = LabSettings.from_dict(config)
    assert settings.io.jpeg_quality == 60
    assert settings.io.images_dir == Path("images")
    assert settings.seed == 7
    assert settings.stego.black_threshold == 40.0


@pytest.mark.parametrize("raw", ["novalue", "=3", "io..quality=3"])
def test_parse_set_overrides_rejects_malformed(raw: str) -> None:
    with pytest.raises(ValueError):
        parse_set_overrides([raw])


def test_default_config_loads() -> None:
    config = load_config(DEFAULT_CONFIG)
    settings = LabSettings.from_dict(config)
    assert settings.stego.black_threshold == 50.0
    assert config["pipeline"]


def test_parse_op_spec() -> None:
    assert run_pipeline.parse_op_spec("negate") == {"op": "negate"}
    assert run_pipeline.parse_op_spec("tint:red=1.5,blue=0,green=2") == {
        "op": "tint",
        "red": 1.5,
        "blue": 0,
        "green": 2,
    }
    assert run_pipeline.parse_op_spec("chromakey:other=bg.png,key_color=[0, 255, 0],threshold=40") == {
        "op": "chromakey",
        "other": "bg.png",
        "key_color": [0, 255, 0],
        "threshold": 40,
    }


def test_parse_op_spec_rejects_bad_item() -> None:
    with pytest.raises(ValueError):
        run_pipeline.parse_op_spec("blur:radius")


def _write_png(path: Path, array: np.ndarray) -> None:
    Image.fromarray(array).save(path)


def test_run_pipeline_end_to_end(tmp_path: Path) -> None:
    input_dir = tmp_path / "in"
    input_dir.mkdir()
    array = np.random.default_rng(0).integers(0, 256, size=(6, 5, 3), dtype=np.uint8)
    _write_png(input_dir / "sample.png", array)
    out_dir = tmp_path / "out"

    code = run_pipeline.main(
        [
            "--input",
            str(input_dir),
            "--output-dir",
            str(out_dir),
            "--op",
            "negate",
            "--op",
            "blur:radius=0",
            "--quiet",
        ]
    )

    assert code == 0
    result = Picture.from_file(out_dir / "sample.png")
    assert np.array_equal(result.to_array(), 255 - array)
    manifest = json.loads((out_dir / "manifest.json").read_text())
    assert len(manifest["outputs"]) == 1
    assert manifest["failures"] == []


def test_run_pipeline_reports_failures(tmp_path: Path) -> None:
    input_dir = tmp_path / "in"
    input_dir.mkdir()
    (input_dir / "broken.png").write_bytes(b"not an image")
    out_dir = tmp_path / "out"

    code = run_pipeline.main(["--input", str(input_dir), "--output-dir", str(out_dir), "--op", "negate", "--quiet"])

    assert code == 1
    assert (out_dir / "error_report.json").exists()


def test_run_pipeline_rejects_unknown_op(tmp_path: Path) -> None:
    path = tmp_path / "x.png"
    _write_png(path, np.zeros((2, 2, 3), dtype=np.uint8))
    assert run_pipeline.main(["--input", str(path), "--output-dir", str(tmp_path), "--op", "sharpen", "--quiet"]) == 2


def test_run_stego_round_trip(tmp_path: Path) -> None:
    rng = np.random.default_rng(1)
    cover = rng.integers(0, 256, size=(8, 8, 3), dtype=np.uint8)
    message = np.full((8, 8, 3), 255, dtype=np.uint8)
    message[2:5, 3:6] = 0
    _write_png(tmp_path / "cover.png", cover)
    _write_png(tmp_path / "message.png", message)

    assert run_stego.main(
        [
            "--quiet",
            "encode",
            "--cover",
            str(tmp_path / "cover.png"),
            "--message",
            str(tmp_path / "message.png"),
            "--output",
            str(tmp_path / "hidden.png"),
        ]
    ) == 0
    assert run_stego.main(
        ["--quiet", "decode", "--input", str(tmp_path / "hidden.png"), "--output", str(tmp_path / "revealed.png")]
    ) == 0

    revealed = Picture.from_file(tmp_path / "revealed.png").to_array()
    assert np.array_equal(revealed, message)


def test_run_stego_mismatched_sizes_fail(tmp_path: Path) -> None:
    _write_png(tmp_path / "cover.png", np.zeros((4, 4, 3), dtype=np.uint8))
    _write_png(tmp_path / "message.png", np.zeros((3, 3, 3), dtype=np.uint8))
    code = run_stego.main(
        [
            "--quiet",
            "encode",
            "--cover",
            str(tmp_path / "cover.png"),
            "--message",
            str(tmp_path / "message.png"),
            "--output",
            str(tmp_path / "hidden.png"),
        ]
    )
    assert code == 1


def test_resolve_run_dir_appends_timestamped_tag(tmp_path: Path) -> None:
    from picture_lab.utils.run import resolve_run_dir

    assert resolve_run_dir(tmp_path, None) == tmp_path
    tagged = resolve_run_dir(tmp_path, "my tag!")
    assert tagged.parent == tmp_path
    assert tagged.name.endswith("_my-tag")
