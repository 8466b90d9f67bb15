"""
Batch processing of multiple business record files.
"""

from .batch_processor import BatchProcessor, BatchConfig, ProcessingResult

__all__ = ['BatchProcessor', 'BatchConfig', 'ProcessingResult']
