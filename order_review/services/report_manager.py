"""
Report File Manager with Concurrency Control

Lock-guarded report file operations for:
- Saving accepted-order report workbooks to the data directory
- Reading a saved report back for verification

Author: Khalil Bannouri
Version: 1.0.0
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

import pandas as pd
from filelock import FileLock, Timeout

from order_review.core.config import get_settings
from order_review.engine.exporter import SHEET_NAME, ReportDocument

logger = logging.getLogger(__name__)


class ReportManager:
    """Lock-guarded writer for accepted-order report files."""

    def __init__(
        self,
        data_directory: Optional[str] = None,
        lock_timeout: Optional[int] = None,
    ):
        settings = get_settings()
        self.data_dir = Path(data_directory or settings.data_directory)
        self.lock_timeout = lock_timeout if lock_timeout is not None else settings.report_lock_timeout
        self.default_name = settings.report_filename

    def _ensure_data_dir(self) -> None:
        """Create data directory if needed."""
        if not self.data_dir.exists():
            self.data_dir.mkdir(parents=True, exist_ok=True)
            logger.info(f"Created data directory: {self.data_dir}")

    def report_path(self, name: Optional[str] = None) -> Path:
        return self.data_dir / f"{name or self.default_name}.xlsx"

    def save_report(self, document: ReportDocument, name: Optional[str] = None) -> dict[str, Any]:
        """Write the report workbook with file locking."""
        self._ensure_data_dir()

        path = self.report_path(name)
        result = {
            "success": False,
            "message": "",
            "path": str(path),
            "rows": len(document),
            "exported_at": None,
        }

        try:
            lock = FileLock(f"{path}.lock", timeout=self.lock_timeout)

            with lock:
                logger.debug(f"Lock acquired for {path.name}")

                path.write_bytes(document.to_excel_bytes())
                export_time = datetime.now().isoformat()

                logger.info(f"Report {path.name} saved ({len(document)} rows)")

                result["success"] = True
                result["message"] = f"Report saved to {path}"
                result["exported_at"] = export_time

            logger.debug(f"Lock released for {path.name}")

        except Timeout:
            result["message"] = f"Lock timeout ({self.lock_timeout}s)"
            logger.error(f"Lock timeout for {path.name}")

        except OSError as e:
            result["message"] = str(e)
            logger.exception(f"Error saving report {path.name}")

        return result

    def load_report(self, name: Optional[str] = None) -> pd.DataFrame:
        """Read a saved report back; empty frame if none exists."""
        path = self.report_path(name)
        if not path.exists():
            return pd.DataFrame()
        return pd.read_excel(path, sheet_name=SHEET_NAME, engine="openpyxl")

    def clear_reports(self) -> bool:
        """Delete saved report files and their locks."""
        if not self.data_dir.exists():
            return True
        try:
            for f in list(self.data_dir.glob("*.xlsx")) + list(self.data_dir.glob("*.xlsx.lock")):
                f.unlink()
            logger.info("All report files cleared")
            return True
        except OSError as e:
            logger.error(f"Error clearing report files: {e}")
            return False
