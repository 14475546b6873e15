"""Tests for the manual-review log."""

import json
from pathlib import Path

from sqlmapper.services.sql_conversion.utils.manual_review_logger import ManualReviewLogger


def test_severity_comes_from_issue_type() -> None:
    """Known issue types carry their default severity and suggested action."""
    review = ManualReviewLogger()
    review.log_manual_review_item("a.sql", "s", "SEQUENCE_UNSUPPORTED", "no sequences")
    review.log_manual_review_item("a.sql", "t.c", "SOMETHING_NEW", "odd", severity="INFO")
    first, second = review.review_items
    assert first["severity"] == "ERROR"
    assert first["suggested_action"]
    assert first["status"] == "PENDING_REVIEW"
    assert second["severity"] == "INFO"
    assert second["suggested_action"] is None


def test_extend_relabels_items() -> None:
    """Items merged from a conversion call take the file they came from."""
    review = ManualReviewLogger()
    items = [{"file_path": "-", "object_name": "s", "issue_type": "TYPE_FALLBACK", "severity": "INFO"}]
    review.extend(items, file_path="nested/shop.sql")
    assert review.review_items[0]["file_path"] == "nested/shop.sql"
    assert items[0]["file_path"] == "-"


def test_nothing_written_without_items(tmp_path: Path) -> None:
    """An empty log produces no file."""
    assert ManualReviewLogger(output_dir=str(tmp_path)).write_manual_review_log() is None
    assert list(tmp_path.iterdir()) == []


def test_write_manual_review_log(tmp_path: Path) -> None:
    """The log file groups items by type, severity and file."""
    review = ManualReviewLogger(output_dir=str(tmp_path))
    review.log_manual_review_item("a.sql", "s", "SEQUENCE_UNSUPPORTED", "no sequences")
    review.log_manual_review_item("b.sql", "t", "COMMENT_UNSUPPORTED", "kept as SQL comments")
    review.log_manual_review_item("b.sql", "u", "COMMENT_UNSUPPORTED", "kept as SQL comments")

    path = Path(review.write_manual_review_log())
    assert path.parent == tmp_path
    assert path.name.startswith("manual_review_required_")

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["total_items_requiring_review"] == 3
    assert data["summary_by_type"] == {"COMMENT_UNSUPPORTED": 2, "SEQUENCE_UNSUPPORTED": 1}
    assert data["summary_by_severity"] == {"ERROR": 1, "INFO": 2}
    assert data["summary_by_file"] == {"b.sql": 2, "a.sql": 1}

    report = review.create_summary_report()
    assert "Total Items Requiring Review: 3" in report
    assert str(path) in report
