from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

import pytest

from aurora_replication.logger import LoggingConfig, configure_logging, get_logger

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path


@pytest.fixture(autouse=True)
def restore_root_logger() -> Iterator[None]:
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


class TestLoggingConfig:
    def test_quiets_aws_libraries_by_default(self) -> None:
        config = LoggingConfig()

        assert config.library_log_levels["botocore"] == "WARNING"
        assert config.library_log_levels["boto3"] == "WARNING"

    def test_library_levels_applied(self) -> None:
        configure_logging(LoggingConfig(library_log_levels={"botocore": "ERROR"}))

        assert logging.getLogger("botocore").level == logging.ERROR


class TestFileOutput:
    def test_json_lines_written_to_file(self, tmp_path: Path) -> None:
        log_file = tmp_path / "logs" / "discovery.log"
        configure_logging(LoggingConfig(json_output=True, file_path=str(log_file), level="INFO"))

        get_logger("aurora_replication.test").info("Region scan complete", region_count=2)
        for handler in logging.getLogger().handlers:
            handler.flush()

        record = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert record["event"] == "Region scan complete"
        assert record["region_count"] == 2
        assert record["service"] == "aurora-replication"
