import json

import ffmpeg
import pytest

from qonvert.domain.exceptions import FrameCountException
from qonvert.services import frame_counter
from qonvert.services.frame_counter import count_frames


@pytest.fixture
def fake_probe(monkeypatch):
    calls = []

    def install(result=None, error=None):
        def probe(filename, cmd="ffprobe", **kwargs):
            calls.append((filename, cmd, kwargs))
            if error is not None:
                raise error
            return result

        monkeypatch.setattr(frame_counter.ffmpeg, "probe", probe)
        return calls

    return install


class TestCountFrames:
    def test_reads_packet_count_of_first_video_stream(self, tmp_path, fake_probe):
        calls = fake_probe({"streams": [{"index": 0, "nb_read_packets": "240"}]})

        assert count_frames(tmp_path / "a.mov", ffprobe_path="/opt/ffprobe") == 240

        filename, cmd, kwargs = calls[0]
        assert filename == str(tmp_path / "a.mov")
        assert cmd == "/opt/ffprobe"
        assert kwargs == {"v": "error", "select_streams": "v:0", "count_packets": None}

    def test_uses_configured_ffprobe_by_default(self, tmp_path, fake_probe, monkeypatch):
        calls = fake_probe({"streams": [{"nb_read_packets": "1"}]})
        monkeypatch.setattr(frame_counter, "get_ffprobe_path", lambda: "my-ffprobe")

        count_frames(tmp_path / "a.mov")

        assert calls[0][1] == "my-ffprobe"

    def test_probe_failure(self, tmp_path, fake_probe):
        fake_probe(error=ffmpeg.Error("ffprobe", b"", b"a.mov: Invalid data found when processing input\n"))

        with pytest.raises(FrameCountException) as exc_info:
            count_frames(tmp_path / "a.mov")
        assert "Invalid data found" in str(exc_info.value)

    def test_missing_ffprobe(self, tmp_path, fake_probe):
        fake_probe(error=FileNotFoundError("ffprobe"))

        with pytest.raises(FrameCountException):
            count_frames(tmp_path / "a.mov")

    def test_no_video_stream(self, tmp_path, fake_probe):
        fake_probe({"streams": []})

        with pytest.raises(FrameCountException):
            count_frames(tmp_path / "audio.mp3")

    @pytest.mark.parametrize("value", ["N/A", "", "-3"])
    def test_unusable_count(self, tmp_path, fake_probe, value):
        fake_probe({"streams": [{"nb_read_packets": value}]})

        with pytest.raises(FrameCountException):
            count_frames(tmp_path / "a.mov")

    def test_count_missing_from_stream(self, tmp_path, fake_probe):
        fake_probe({"streams": [{"codec_type": "video"}]})

        with pytest.raises(FrameCountException):
            count_frames(tmp_path / "a.mov")


class FakeFfprobeProcess:
    """Stands in for the ffprobe `Popen` that `ffmpeg.probe` starts."""

    calls = []

    def __init__(self, args, **kwargs):
        self.calls.append(list(args))
        self.returncode = 0

    def communicate(self, input=None, timeout=None):
        payload = {"streams": [{"index": 0, "codec_type": "video", "nb_read_packets": "96"}]}
        return json.dumps(payload).encode("utf-8"), b""


class TestFfprobeCommandLine:
    @pytest.fixture
    def ffprobe_calls(self, monkeypatch):
        FakeFfprobeProcess.calls = []
        monkeypatch.setattr("ffmpeg._probe.subprocess.Popen", FakeFfprobeProcess)
        return FakeFfprobeProcess.calls

    def test_probe_counts_packets_of_first_video_stream(self, tmp_path, ffprobe_calls):
        source = tmp_path / "a.mov"

        assert count_frames(source, ffprobe_path="/opt/ffprobe") == 96

        (args,) = ffprobe_calls
        assert args[0] == "/opt/ffprobe"
        assert args[-1] == str(source)
        assert "-count_packets" in args
        # A flag without a value is followed directly by the next flag or the file.
        next_arg = args[args.index("-count_packets") + 1]
        assert next_arg.startswith("-") or next_arg == str(source)
        assert args[args.index("-select_streams") + 1] == "v:0"
        assert args[args.index("-v") + 1] == "error"
