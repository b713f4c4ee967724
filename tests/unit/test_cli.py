"""
Unit tests for the command line entry point.
"""

import json
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from openshelf.__main__ import main
from openshelf.tasks.scan_task import ScanCounts, ScanTask, ScanTaskStatus


@pytest.fixture
def cli_config(temp_dir: Path) -> Path:
    """Config file that keeps the database in memory and logs under temp_dir."""
    config_file = temp_dir / "config.yaml"
    config_file.write_text(f"""
openlist:
  enabled: false

database:
  url: "sqlite:///:memory:"

logging:
  level: "INFO"
  file: "{temp_dir / 'logs' / 'openshelf.log'}"
""")
    return config_file


@pytest.mark.unit
@pytest.mark.usefixtures("restore_root_logger")
class TestCommandLine:
    """Tests for python -m openshelf."""

    def test_requires_command(self):
        with pytest.raises(SystemExit):
            main([])

    def test_show_without_index(self, cli_config: Path, capsys):
        assert main(["--config", str(cli_config), "show"]) == 1

        assert "No metainfo stored yet" in capsys.readouterr().out

    def test_refresh_with_incomplete_config(self, cli_config: Path, capsys):
        assert main(["--config", str(cli_config), "refresh"]) == 1

        assert "OpenList is not enabled" in capsys.readouterr().err

    def test_refresh_prints_task(self, cli_config: Path, capsys):
        task = ScanTask(
            task_id="task-1",
            status=ScanTaskStatus.COMPLETED,
            result=ScanCounts(total=2, new=2),
        )
        refresher = MagicMock()
        refresher.start_refresh = AsyncMock(return_value={"task_id": "task-1"})
        refresher.join = AsyncMock(return_value=task)

        with patch("openshelf.__main__.LibraryRefresher", return_value=refresher):
            exit_code = main(["--config", str(cli_config), "refresh", "--reset"])

        assert exit_code == 0
        refresher.start_refresh.assert_awaited_once_with(reset_index=True)
        output = json.loads(capsys.readouterr().out)
        assert output["task_id"] == "task-1"
        assert output["status"] == "completed"
        assert output["result"]["new"] == 2

    def test_refresh_failure_exit_code(self, cli_config: Path):
        task = ScanTask(task_id="task-1", status=ScanTaskStatus.FAILED, error_message="boom")
        refresher = MagicMock()
        refresher.start_refresh = AsyncMock(return_value={"task_id": "task-1"})
        refresher.join = AsyncMock(return_value=task)

        with patch("openshelf.__main__.LibraryRefresher", return_value=refresher):
            assert main(["--config", str(cli_config), "refresh"]) == 1
