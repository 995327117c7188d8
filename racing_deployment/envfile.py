import re
from pathlib import Path
from typing import Dict


def _line_ending(content: str) -> str:
    """The line ending the file already uses; LF for new files."""
    return "\r\n" if "\r\n" in content else "\n"


def update_env_var(content: str, key: str, value: str) -> str:
    """
    Sets ``key`` to ``value`` in env file content. The first line of the form
    ``KEY=...`` is replaced; otherwise a new line is appended.
    """
    pattern = re.compile(rf"^{re.escape(key)}=[^\r\n]*", re.MULTILINE)
    line = f"{key}={value}"
    if pattern.search(content):
        return pattern.sub(lambda _: line, content, count=1)

    if content and not content.endswith(("\r", "\n")):
        content += _line_ending(content)
    return content + line


def read_env_file(filepath: Path) -> str:
    """Returns the content of the env file, or an empty string if there is none yet."""
    try:
        # newline="" keeps CRLF files intact
        with open(filepath, "r", encoding="utf-8", newline="") as file:
            return file.read()
    except FileNotFoundError:
        print(f"(i) {filepath} not found, creating new one...")
        return ""


def write_env_file(filepath: Path, content: str) -> Path:
    with open(filepath, "w", encoding="utf-8", newline="") as file:
        file.write(content.rstrip() + _line_ending(content))
    return filepath


def update_env_file(filepath: Path, values: Dict[str, str]) -> Path:
    """Upserts ``values`` into the env file, leaving every other line untouched."""
    content = read_env_file(filepath)
    for key, value in values.items():
        content = update_env_var(content, key, value)
    return write_env_file(filepath, content)
