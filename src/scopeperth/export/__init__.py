"""Calendar export for inspection windows."""

from scopeperth.export.calendar import build_inspection_event, inspection_filename

__all__ = [
    "build_inspection_event",
    "inspection_filename",
]
