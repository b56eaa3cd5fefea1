"""
Infrastructure - файловые операции домена Parsing.
"""

from .file_manager import ParsingFileManager, PARSED_RESULTS_FILE, ANALYSIS_TRACE_FILE

__all__ = ["ParsingFileManager", "PARSED_RESULTS_FILE", "ANALYSIS_TRACE_FILE"]
