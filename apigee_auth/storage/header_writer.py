"""Serialize the collected auth headers for curl or JSON consumers."""

import json
import logging
from pathlib import Path
from typing import Dict


logger = logging.getLogger(__name__)


OUTPUT_FILES = {
    "curl": "auth.txt",
    "json": "auth.json",
}


def render_headers(headers: Dict[str, str], output_format: str) -> str:
    """Render headers in the requested format.

    Args:
        headers: Header name to value mapping
        output_format: 'curl' (``Name: Value`` lines) or 'json'

    Returns:
        str: File content

    Raises:
        ValueError: If the format is not supported
    """
    if output_format == "curl":
        return "\n".join(f"{name}: {value}" for name, value in headers.items())
    if output_format == "json":
        return json.dumps(headers, indent=2)
    raise ValueError(f"Invalid output format: {output_format}. Must be one of {', '.join(OUTPUT_FILES)}")


class HeaderWriter:
    """Writes the auth header file into an output directory."""

    def __init__(self, output_directory: Path):
        """Initialize header writer.

        Args:
            output_directory: Directory to write the auth file into
        """
        self.output_directory = Path(output_directory)

    def output_path(self, output_format: str) -> Path:
        if output_format not in OUTPUT_FILES:
            raise ValueError(f"Invalid output format: {output_format}. Must be one of {', '.join(OUTPUT_FILES)}")
        return self.output_directory / OUTPUT_FILES[output_format]

    def write(self, headers: Dict[str, str], output_format: str = "curl") -> Path:
        """Write headers to ``auth.txt`` or ``auth.json``, replacing any old file.

        Args:
            headers: Header name to value mapping
            output_format: 'curl' or 'json' (default: 'curl')

        Returns:
            Path: The file written
        """
        filepath = self.output_path(output_format)
        content = render_headers(headers, output_format)

        self.output_directory.mkdir(parents=True, exist_ok=True)
        with open(filepath, 'w', encoding='utf-8') as f:
            f.write(content)

        logger.info(f"Saved {len(headers)} headers to {filepath}")
        return filepath
