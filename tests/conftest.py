"""Shared fixtures: stand-in executables for FFmpeg written as small Python scripts."""

import itertools
import sys
import textwrap

import pytest

from qonvert.domain.models import Job


@pytest.fixture
def script_cmd(tmp_path):
    """Returns a factory that writes a Python script and returns the command running it."""
    counter = itertools.count()

    def make(source: str):
        path = tmp_path / f"fake_tool_{next(counter)}.py"
        path.write_text(textwrap.dedent(source), encoding="utf-8")
        return [sys.executable, str(path)]

    return make


@pytest.fixture
def make_jobs(tmp_path):
    def make(count: int):
        return [
            Job(input_path=tmp_path / f"clip{i}.mov", output_path=tmp_path / f"clip{i}.mp4")
            for i in range(1, count + 1)
        ]

    return make


PROGRESS_SCRIPT = """
import sys

frames = [int(a) for a in sys.argv[1:]] or [10, 20]
for i, frame in enumerate(frames):
    print(f"frame={frame}", flush=True)
    print("fps=25.0", flush=True)
    state = "end" if i == len(frames) - 1 else "continue"
    print(f"progress={state}", flush=True)
"""


@pytest.fixture
def progress_cmd(script_cmd):
    """A well-behaved converter stand-in: emits one progress block per frame argument."""
    base = script_cmd(PROGRESS_SCRIPT)

    def make(*frames: int):
        return base + [str(f) for f in frames]

    return make
