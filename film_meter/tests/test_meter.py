from unittest.mock import patch

import numpy as np
from PIL import Image

from meter import main
from sampler import Frame


class _GraySource:
    def __init__(self, *args, **kwargs):
        self.released = False

    def read(self):
        return Frame(np.full((40, 40, 3), 128, dtype=np.uint8))

    def release(self):
        self.released = True


class TestCalculators:
    def test_dilute(self, capsys):
        assert main(["dilute", "--volume", "500", "--ratio", "25"]) == 0
        out = capsys.readouterr().out
        assert "19.2" in out
        assert "480.8" in out
        assert "1:25" in out

    def test_reciprocity_film(self, capsys):
        assert main(["reciprocity", "--time", "30"]) == 0
        out = capsys.readouterr().out
        assert "Kodak Portra 400" in out
        assert "1m 39s" in out

    def test_reciprocity_custom_exponent(self, capsys):
        assert main(["reciprocity", "-t", "1", "--p", "1.8"]) == 0
        assert "1.0s" in capsys.readouterr().out

    def test_develop(self, capsys):
        assert main(["develop", "--temp", "24"]) == 0
        out = capsys.readouterr().out
        assert "04:07" in out
        assert "10:00" in out

    def test_develop_out_of_range(self, capsys):
        assert main(["develop", "--temp", "60"]) == 1
        assert "❌" in capsys.readouterr().out


class TestSpot:
    def test_mid_grey_image(self, tmp_path, capsys):
        path = tmp_path / "grey.png"
        Image.new("RGB", (40, 40), (128, 128, 128)).save(path)
        assert main(["spot", str(path), "--zones"]) == 0
        out = capsys.readouterr().out
        assert "EV 12.0" in out
        assert "1/2000" in out
        assert "V" in out

    def test_shutter_priority(self, tmp_path, capsys):
        path = tmp_path / "grey.png"
        Image.new("RGB", (40, 40), (128, 128, 128)).save(path)
        assert main(["spot", str(path), "--iso", "100", "--shutter", "1/60"]) == 0
        assert "f/8" in capsys.readouterr().out

    def test_invalid_iso(self, tmp_path, capsys):
        path = tmp_path / "grey.png"
        Image.new("RGB", (4, 4)).save(path)
        assert main(["spot", str(path), "--iso", "300"]) == 1
        assert "ISO" in capsys.readouterr().out

    def test_zero_shutter_denominator(self, tmp_path, capsys):
        path = tmp_path / "grey.png"
        Image.new("RGB", (4, 4)).save(path)
        assert main(["spot", str(path), "--shutter", "1/0"]) == 1
        assert "❌" in capsys.readouterr().out

    def test_missing_image(self, tmp_path, capsys):
        assert main(["spot", str(tmp_path / "nope.jpg")]) == 1


class TestLive:
    @patch("meter.VideoCaptureSource", side_effect=_GraySource)
    def test_runs_ticks(self, mock_source, capsys):
        assert main(["live", "--ticks", "3", "--print-every", "1"]) == 0
        out = capsys.readouterr().out
        assert out.count("EV ") >= 3
        assert "3" in out
        mock_source.assert_called_once_with(0)

    @patch("meter.VideoCaptureSource")
    def test_device_unavailable(self, mock_source, capsys):
        from sources import FrameSourceError
        mock_source.side_effect = FrameSourceError("Cannot open video device 0")
        assert main(["live"]) == 1
        assert "❌" in capsys.readouterr().out
