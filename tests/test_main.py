import pytest

from qonvert import main as main_module
from qonvert.main import main


@pytest.fixture(autouse=True)
def skip_tool_check(monkeypatch):
    monkeypatch.setattr(main_module, "verify_tools", lambda: True)


class TestMain:
    def test_missing_output_directory_fails(self, tmp_path):
        (tmp_path / "a.mov").write_bytes(b"")

        status = main([str(tmp_path / "a.mov"), "-t", "mp4", "-o", str(tmp_path / "missing")])

        assert status == 1

    def test_directory_mixed_with_files_fails(self, tmp_path):
        (tmp_path / "a.mov").write_bytes(b"")
        (tmp_path / "dir").mkdir()

        status = main([str(tmp_path / "a.mov"), str(tmp_path / "dir"), "-t", "mp4", "-o", str(tmp_path)])

        assert status == 1

    def test_empty_input_directory_succeeds(self, tmp_path, capsys):
        source = tmp_path / "clips"
        source.mkdir()

        status = main([str(source), "-t", "mp4", "-o", str(tmp_path)])

        assert status == 0
        assert "Successfully converted 0 file(s)" in capsys.readouterr().out

    def test_runs_pipeline_with_cli_options(self, tmp_path, monkeypatch):
        source = tmp_path / "clips"
        source.mkdir()
        (source / "a.mov").write_bytes(b"")
        captured = {}

        class RecordingPipeline:
            def __init__(self, jobs, codec_policy, **kwargs):
                captured["jobs"] = jobs
                captured["codec_policy"] = codec_policy
                captured.update(kwargs)

            def run(self):
                return []

        monkeypatch.setattr(main_module, "BatchConversionPipeline", RecordingPipeline)

        status = main([str(source), "-t", "mp4", "-o", str(tmp_path), "-c", "libx264", "-l", "3", "-v"])

        assert status == 0
        assert [j.output_path for j in captured["jobs"]] == [tmp_path / "a.mp4"]
        assert captured["codec_policy"].codec_for(captured["jobs"][0]) == "libx264"
        assert captured["max_workers"] == 3
        assert captured["verbose"] is True

    def test_inputs_with_same_output_fail_before_converting(self, tmp_path, monkeypatch):
        source = tmp_path / "clips"
        source.mkdir()
        (source / "clip.mov").write_bytes(b"")
        (source / "clip.gif").write_bytes(b"")

        def fail_if_run(*args, **kwargs):
            raise AssertionError("no conversion may start")

        monkeypatch.setattr(main_module, "BatchConversionPipeline", fail_if_run)

        assert main([str(source), "-t", "mp4", "-o", str(tmp_path)]) == 1
