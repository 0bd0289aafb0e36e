from pathlib import Path

import pytest

from qonvert.cli import get_args


class TestGetArgs:
    def test_defaults(self):
        args = get_args(["a.mov", "-t", "mp4"])

        assert args.input_paths == [Path("a.mov")]
        assert args.output_directory == Path(".")
        assert args.output_file_type == "mp4"
        assert args.codec is None
        assert args.verbose is False
        assert args.limit is None
        assert args.log_level == "WARNING"
        assert args.error_log_dir is None
        assert args.success_log_dir is None

    def test_all_options(self):
        args = get_args(
            [
                "a.mov", "b.gif",
                "-o", "out",
                "-t", ".webm",
                "-c", "libvpx-vp9",
                "-v",
                "-l", "2",
                "--log-level", "DEBUG",
                "--error-log-dir", "errors",
                "--success-log-dir", "ok",
            ]
        )

        assert args.input_paths == [Path("a.mov"), Path("b.gif")]
        assert args.output_directory == Path("out")
        assert args.output_file_type == "webm"
        assert args.codec == "libvpx-vp9"
        assert args.verbose is True
        assert args.limit == 2
        assert args.log_level == "DEBUG"
        assert args.error_log_dir == Path("errors")
        assert args.success_log_dir == Path("ok")

    @pytest.mark.parametrize(
        "argv",
        [
            ["a.mov"],
            ["-t", "mp4"],
            ["a.mov", "-t", "."],
            ["a.mov", "-t", "mp4", "--limit", "0"],
            ["a.mov", "-t", "mp4", "--limit", "many"],
            ["a.mov", "-t", "mp4", "--log-level", "LOUD"],
        ],
    )
    def test_invalid_arguments_exit(self, argv):
        with pytest.raises(SystemExit) as exc_info:
            get_args(argv)
        assert exc_info.value.code == 2
