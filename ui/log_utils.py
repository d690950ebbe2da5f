"""Shared logging utilities."""

from datetime import UTC, datetime
from pathlib import Path
from typing import Any

LOG_ROOT = Path.cwd() / "logs"
CLI_LOG_FILE = LOG_ROOT / "relay.log"


def write_cli_log(
    level: str,
    message: str,
    *,
    log_file: Path | None = None,
    **extra: Any,
) -> None:
    """Append a line to the rolling CLI log file."""
    log_file = log_file or CLI_LOG_FILE
    log_file.parent.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now(UTC).strftime("%Y-%m-%d %H:%M:%S")
    extra_str = " ".join(f"{k}={v}" for k, v in extra.items()) if extra else ""
    line = f"[{timestamp}] {level}: {_single_line(message)}"
    if extra_str:
        line += f" {extra_str}"
    line += "\n"
    with log_file.open("a") as f:
        f.write(line)


def clear_logs(log_file: Path | None = None) -> None:
    """Truncate the CLI log file from a previous run."""
    log_file = log_file or CLI_LOG_FILE
    if log_file.exists():
        log_file.write_text("")


def _single_line(message: str) -> str:
    return message.replace("\r", " ").replace("\n", " ").strip()
