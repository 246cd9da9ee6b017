"""
Extraction tools package.

This package provides tools for:
- Finding source files by extension
- Parsing START/END doc tag regions out of them
"""

from .extractor import (
    ExtractionInput,
    ExtractionOutput,
    TagExtractor,
    extract_doc_tags,
    find_files_in_directory,
    parse_doc_tags,
    process_file,
)

__all__ = [
    "ExtractionInput",
    "ExtractionOutput",
    "TagExtractor",
    "extract_doc_tags",
    "find_files_in_directory",
    "parse_doc_tags",
    "process_file",
]
