import yaml

from qonvert.config.common import COMPLETED_LOG_FILE_NAME, ERROR_LOG_FILE_NAME
from qonvert.services.logging_service import ErrorLog, SuccessLog


class TestErrorLog:
    def test_appends_blocks_with_separator(self, tmp_path):
        log = ErrorLog(tmp_path / "logs")

        log.write("Failed job: a.mov", "Diagnostics:\nboom")
        log.write("Failed job: b.mov")

        text = (tmp_path / "logs" / ERROR_LOG_FILE_NAME).read_text(encoding="utf-8")
        separator = "=" * 50
        assert text == f"Failed job: a.mov\nDiagnostics:\nboom\n{separator}\nFailed job: b.mov\n{separator}\n"

    def test_nothing_to_write(self, tmp_path):
        log = ErrorLog(tmp_path)
        log.write()
        assert not log.log_file_path.exists()


class TestSuccessLog:
    def test_writes_indexed_yaml_list(self, tmp_path):
        log = SuccessLog(tmp_path)

        log.write({"input_file": "a.mov"})
        log.write({"input_file": "b.mov"})

        assert log.log_file_path.name.startswith("log_")
        entries = yaml.safe_load(log.log_file_path.read_text(encoding="utf-8"))
        assert entries == [{"input_file": "a.mov", "index": 1}, {"input_file": "b.mov", "index": 2}]

    def test_combines_runs_sorted_by_completion(self, tmp_path):
        first_run = SuccessLog(tmp_path)
        first_run.write({"input_file": "late.mov", "ended_datetime": "2024-01-02T10:00:00"})
        second_run = SuccessLog(tmp_path)
        second_run.write({"input_file": "early.mov", "ended_datetime": "2024-01-01T10:00:00"})

        combined_path = SuccessLog.generate_combined_log_yaml(tmp_path)

        assert combined_path == tmp_path / COMPLETED_LOG_FILE_NAME
        entries = yaml.safe_load(combined_path.read_text(encoding="utf-8"))
        assert [(e["input_file"], e["index"]) for e in entries] == [("early.mov", 1), ("late.mov", 2)]
        assert list(tmp_path.glob("log_*.yaml")) == []

    def test_keeps_previously_combined_entries(self, tmp_path):
        old = SuccessLog(tmp_path)
        old.write({"input_file": "old.mov", "ended_datetime": "2024-01-01T00:00:00"})
        SuccessLog.generate_combined_log_yaml(tmp_path)

        new = SuccessLog(tmp_path)
        new.write({"input_file": "new.mov", "ended_datetime": "2024-02-01T00:00:00"})
        combined_path = SuccessLog.generate_combined_log_yaml(tmp_path)

        entries = yaml.safe_load(combined_path.read_text(encoding="utf-8"))
        assert [e["input_file"] for e in entries] == ["old.mov", "new.mov"]

    def test_nothing_to_combine(self, tmp_path):
        assert SuccessLog.generate_combined_log_yaml(tmp_path) is None
        assert not (tmp_path / COMPLETED_LOG_FILE_NAME).exists()

    def test_unreadable_run_log_is_kept(self, tmp_path):
        good = SuccessLog(tmp_path)
        good.write({"input_file": "a.mov", "ended_datetime": "2024-01-01T00:00:00"})
        broken = tmp_path / "log_20240101_BROKEN0000.yaml"
        broken.write_text("bad: [unclosed\n", encoding="utf-8")

        combined_path = SuccessLog.generate_combined_log_yaml(tmp_path)

        assert broken.exists()
        assert not good.log_file_path.exists()
        entries = yaml.safe_load(combined_path.read_text(encoding="utf-8"))
        assert [e["input_file"] for e in entries] == ["a.mov"]

    def test_only_unreadable_run_logs_combines_nothing(self, tmp_path):
        broken = tmp_path / "log_20240101_BROKEN0000.yaml"
        broken.write_text("bad: [unclosed\n", encoding="utf-8")

        assert SuccessLog.generate_combined_log_yaml(tmp_path) is None
        assert broken.exists()
        assert not (tmp_path / COMPLETED_LOG_FILE_NAME).exists()
