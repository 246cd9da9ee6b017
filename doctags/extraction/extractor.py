"""
Doc Tag Extractor Tool

This tool scans a directory tree for source files and parses the named regions
delimited by `[START <name>]` and `[END <name>]` markers. The markers are found
anywhere on a line, so they can sit inside any language's comment syntax.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from loguru import logger

from doctags.base import BaseTool, ToolResult
from doctags.errors import ConfigurationError, MalformedTagError
from doctags.models import DocTag

DOC_TAG_START_REGEX = re.compile(r"\[START ([^\]]+)\]")
DOC_TAG_END_REGEX = re.compile(r"\[END ([^\]]+)\]")


def normalize_extensions(extensions: Iterable[str]) -> frozenset[str]:
    """
    Normalize extension filters to bare names.

    "js", ".js" and " js " all become "js". Empty entries are dropped.
    Matching stays case-sensitive.

    Raises:
        ConfigurationError: No usable extension is left
    """
    normalized = frozenset(
        ext.strip().lstrip(".") for ext in extensions if ext.strip().lstrip(".")
    )
    if not normalized:
        raise ConfigurationError("At least one file extension is required")
    return normalized


def find_files_in_directory(directory: str | Path, extensions: Iterable[str]) -> list[str]:
    """
    Find files under `directory` whose extension is in `extensions`.

    Args:
        directory: Root of the snapshot
        extensions: Extensions without the leading dot

    Hidden files and anything under a hidden directory (such as .git) are
    skipped.

    Returns:
        Relative POSIX paths, sorted so repeated runs return the same order
    """
    root = Path(directory)
    wanted = normalize_extensions(extensions)

    files = []
    for path in root.rglob("*"):
        relative = path.relative_to(root)
        if any(part.startswith(".") for part in relative.parts):
            continue
        if path.is_file() and path.suffix[1:] in wanted:
            files.append(relative.as_posix())
    return sorted(files)


def parse_doc_tags(text: str, file_path: str) -> list[DocTag]:
    """
    Parse every doc tag out of one file's text.

    Only one tag can be open at a time. A START seen while a tag is open
    replaces it; an END whose name does not match the open tag is content.

    Raises:
        MalformedTagError: A tag is still open at the end of the text
    """
    doc_tags: list[DocTag] = []

    tag_name: str | None = None
    start_line = 0
    content: list[str] = []

    for index, line in enumerate(text.split("\n")):
        start_match = DOC_TAG_START_REGEX.search(line)
        end_match = DOC_TAG_END_REGEX.search(line)

        if start_match:
            if tag_name is not None:
                logger.warning(
                    f"Discarding unterminated doc tag '{tag_name}' started at "
                    f"{file_path}:{start_line}, replaced by '{start_match.group(1)}'"
                )
            tag_name = start_match.group(1)
            start_line = index + 1
            content = []
        elif end_match and tag_name == end_match.group(1):
            doc_tags.append(
                DocTag(
                    file_path=file_path,
                    tag_name=tag_name,
                    start_line=start_line,
                    end_line=index + 1,
                    content="".join(content).strip(),
                )
            )
            tag_name = None
            content = []
        elif tag_name is not None:
            content.append(f"{line}\n")

    if tag_name is not None:
        raise MalformedTagError(file_path, start_line, tag_name)

    return doc_tags


def process_file(file_path: str | Path) -> list[DocTag]:
    """Read a UTF-8 file and parse its doc tags. Undecodable bytes become U+FFFD."""
    text = Path(file_path).read_text(encoding="utf-8", errors="replace")
    return parse_doc_tags(text, str(file_path))


def extract_doc_tags(directory: str | Path, extensions: Iterable[str]) -> list[DocTag]:
    """
    Extract every doc tag from matching files under `directory`.

    Args:
        directory: Root of the snapshot
        extensions: Extensions to scan, without the leading dot

    Returns:
        Tags in file order, then in order of appearance within each file

    Raises:
        ConfigurationError: The extension set is empty
        MalformedTagError: Any file has an unterminated tag
    """
    root = Path(directory)
    return extract_files(root, find_files_in_directory(root, extensions))


def extract_files(root: Path, files: list[str]) -> list[DocTag]:
    """Parse the given files, relative to `root`, in order."""
    doc_tags: list[DocTag] = []
    for relative_path in files:
        doc_tags.extend(process_file(root / relative_path))

    logger.info(f"Extracted {len(doc_tags)} doc tags from {len(files)} files in {root}")
    return doc_tags


@dataclass
class ExtractionInput:
    """Input data for doc tag extraction."""

    directory: str
    extensions: list[str] = field(default_factory=list)


@dataclass
class ExtractionOutput:
    """Doc tag extraction results."""

    doc_tags: list[DocTag]
    files_scanned: list[str]


class TagExtractor(BaseTool[ExtractionInput, ExtractionOutput]):
    """Tool wrapper around `extract_doc_tags` for use by the pipeline."""

    def __init__(self) -> None:
        super().__init__("TagExtractor")

    def execute(self, input_data: ExtractionInput) -> ToolResult[ExtractionOutput]:
        """
        Scan the directory and collect doc tags.

        Raises:
            ValueError: The directory does not exist
            MalformedTagError: Any file has an unterminated tag
        """
        root = Path(input_data.directory)
        if not root.is_dir():
            raise ValueError(f"Directory does not exist: {root}")

        files = find_files_in_directory(root, input_data.extensions)
        doc_tags = extract_files(root, files)

        return ToolResult.success(
            output=ExtractionOutput(doc_tags=doc_tags, files_scanned=files),
            metrics=self._create_metrics(files_processed=len(files)),
        )
