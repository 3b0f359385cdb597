from .source_scanner import SourceScanner, get_files

__all__ = ['SourceScanner', 'get_files']
