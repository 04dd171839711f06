"""Exportación CSV del listado."""

from .csv_export import MEDIA_TYPE, export_filename, export_records, records_to_frame

__all__ = ["MEDIA_TYPE", "export_filename", "export_records", "records_to_frame"]
