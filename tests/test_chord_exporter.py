"""Unit tests for ChordImageExporter (PNG output)."""

import io
from pathlib import Path

from PIL import Image

from chordbox.chord_exporter import ChordImageExporter
from chordbox.chord_models import ChordRequest
from chordbox.layout_engine import compute_layout
from chordbox.notation_parser import parse_size

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


def test_to_png_bytes_is_png() -> None:
    data = ChordImageExporter().to_png_bytes(ChordRequest("D", "xx0232", "---132", "2"))
    assert data.startswith(PNG_SIGNATURE)


def test_png_has_layout_dimensions() -> None:
    exporter = ChordImageExporter()
    request = ChordRequest("C_7", "x32310", "-32-1-", "3")
    diagram = exporter.build(request)
    with Image.open(io.BytesIO(exporter.to_png_bytes(request))) as image:
        assert image.size == (diagram.layout.image_width, diagram.layout.image_height)
        assert image.mode == "RGBA"


def test_export_writes_file(tmp_path: Path) -> None:
    out = tmp_path / "d.png"
    ChordImageExporter().export(ChordRequest("D", "xx0232", "---132"), str(out))
    assert out.exists()
    assert out.read_bytes().startswith(PNG_SIGNATURE)


def test_export_writes_to_stream() -> None:
    buffer = io.BytesIO()
    ChordImageExporter().export(ChordRequest("G", "320003"), buffer)
    assert buffer.getvalue().startswith(PNG_SIGNATURE)


def test_build_detects_bars() -> None:
    diagram = ChordImageExporter().build(ChordRequest("F", "133211", "134211"))
    assert [bar.finger for bar in diagram.bars] == ["1"]


def test_bad_notation_gives_nameless_error_image() -> None:
    exporter = ChordImageExporter()
    diagram = exporter.build(ChordRequest("A very long chord name", "12345", None, "2"))
    assert diagram.model.parse_error
    assert diagram.bars == []
    assert diagram.layout == compute_layout(parse_size("2"), (), exporter.typeface)


def test_identical_requests_give_identical_png() -> None:
    exporter = ChordImageExporter()
    request = ChordRequest("F_#_m", "244222", "134111", "4", True)
    assert exporter.to_png_bytes(request) == exporter.to_png_bytes(request)
