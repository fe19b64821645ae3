"""
Smoke test for the benchmark CLI.
"""

from __future__ import annotations

import pytest

from e2e_encryption import Settings
from e2e_encryption.benchmark import main, run_benchmark


async def test_run_benchmark_reports_success(capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = await run_benchmark(Settings(), 20)
    output = capsys.readouterr().out
    assert exit_code == 0
    assert "BENCHMARK COMPLETE" in output
    assert "Unique nonces: 20/20" in output


def test_main_rejects_non_positive_count() -> None:
    with pytest.raises(SystemExit) as exc_info:
        main(["--messages", "0"])
    assert exc_info.value.code == 2
