"""
Report Verification Script

Verifies the saved accepted-orders report workbook.
Run from project root: python scripts/verify.py [report-name]

Author: Khalil Bannouri
Version: 1.0.0
"""

import sys
from datetime import datetime

from order_review.engine.exporter import REPORT_COLUMNS
from order_review.services.report_manager import ReportManager


def verify_report(name: str = None) -> bool:
    """Verify column contract and derived columns of a saved report."""
    manager = ReportManager()
    path = manager.report_path(name)

    print("=" * 60)
    print("REPORT VERIFICATION")
    print("=" * 60)
    print(f"Timestamp: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print(f"File: {path}")
    print("=" * 60)

    if not path.exists():
        print("\nReport file not found!")
        print("   Queue an export first: POST /acceptedOrders/report/jobs")
        return False

    df = manager.load_report(name)
    print(f"\nRows: {len(df)}")

    if list(df.columns) != list(REPORT_COLUMNS):
        print(f"\nColumn mismatch: {list(df.columns)}")
        return False
    print("Header matches the fixed eight columns")

    if len(df) > 0:
        expected = df["Order Quantity"] - df["Amount"]
        mismatched = int((expected != df["Difference"]).sum())
        if mismatched:
            print(f"\n{mismatched} rows with a wrong Difference!")
            return False
        print("Difference column consistent")

        statuses = set(df["Expiry Status"].unique())
        if not statuses <= {"Expired", "Not Expired"}:
            print(f"\nUnexpected expiry statuses: {statuses}")
            return False

        print("\nRECENT ROWS:")
        print("-" * 60)
        print(df.tail(5).to_string(index=False))

    print("\n" + "=" * 60)
    print("VERIFICATION COMPLETE")
    print("=" * 60)
    return True


if __name__ == "__main__":
    ok = verify_report(sys.argv[1] if len(sys.argv) > 1 else None)
    sys.exit(0 if ok else 1)
