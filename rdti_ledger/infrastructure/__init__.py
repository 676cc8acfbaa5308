"""Infrastructure layer package."""

from .excel_repository import load_ticket_table, save_output_workbook
from .logging_config import configure_logging

__all__ = ["load_ticket_table", "save_output_workbook", "configure_logging"]
