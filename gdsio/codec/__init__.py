# codec/__init__.py

from .decoder import LibraryDecoder, SkippedRecord
from .encoder import LibraryEncoder
from .layout import check_record_table

__all__ = ["LibraryDecoder", "LibraryEncoder", "SkippedRecord", "check_record_table"]
