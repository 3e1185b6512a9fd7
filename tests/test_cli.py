"""
Tests for the atlas-plotter command line.
"""

import json

import pytest
from PIL import Image

from atlas_plotter.cli import main


class TestNew:
    def test_writes_default_sprites(self, tmp_path, capsys):
        path = tmp_path / "atlas.json"

        assert main(["new", str(path), "--count", "3"]) == 0

        payload = json.loads(path.read_text(encoding="utf-8"))
        assert [item["Id"] for item in payload["Items"]] == [1001, 1002, 1003]
        assert payload["SelectedItem"]["Id"] == 1003
        assert "Wrote 3 sprite(s)" in capsys.readouterr().out

    def test_negative_count(self, tmp_path):
        with pytest.raises(SystemExit):
            main(["new", str(tmp_path / "atlas.json"), "--count", "-1"])


class TestSummary:
    def test_lists_sprites(self, tmp_path, capsys):
        path = tmp_path / "atlas.json"
        path.write_text(
            json.dumps({"Items": [{"Id": 1001, "Name": "rock", "Source": {"X": 1, "Y": 2, "Width": 3, "Height": 4}}]}),
            encoding="utf-8",
        )

        assert main(["summary", str(path)]) == 0

        out = capsys.readouterr().out
        assert "rock" in out
        assert "source=(1, 2, 3, 4)" in out
        assert "1 sprite(s), selected: rock" in out

    def test_bad_document(self, tmp_path, capsys):
        path = tmp_path / "atlas.json"
        path.write_text("{broken", encoding="utf-8")

        assert main(["summary", str(path)]) == 1
        assert "[FAIL]" in capsys.readouterr().out


class TestCrop:
    def test_exports_crops(self, tmp_path, capsys):
        atlas = tmp_path / "atlas.png"
        Image.new("RGBA", (16, 16), (1, 2, 3, 255)).save(atlas)
        document = tmp_path / "atlas.json"
        document.write_text(
            json.dumps({"Items": [{"Id": 1001, "Name": "tile", "Source": {"X": 0, "Y": 0, "Width": 8, "Height": 8}}]}),
            encoding="utf-8",
        )

        assert main(["crop", str(atlas), str(document)]) == 0

        assert (tmp_path / "crops" / "tile.png").exists()
        assert "Exported 1 sprite(s)" in capsys.readouterr().out

    def test_missing_atlas(self, tmp_path, capsys):
        document = tmp_path / "atlas.json"
        document.write_text('{"Items": []}', encoding="utf-8")

        assert main(["crop", str(tmp_path / "missing.png"), str(document)]) == 1
        assert "[FAIL]" in capsys.readouterr().out
