"""Exporter SPI and implementations."""

from .base import BaseExporter
from .file_exporter import CsvExporter, JsonExporter

__all__ = ["BaseExporter", "CsvExporter", "JsonExporter"]
