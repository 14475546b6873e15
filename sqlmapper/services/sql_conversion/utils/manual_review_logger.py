"""
Manual Review Logger - Tracks schema constructs a generator could not carry over faithfully.

Generators record one item per dropped or approximated construct (a sequence
on MySQL, a BEFORE trigger on SQL Server, ...). A batch run merges the items
of every file and writes them to ``manual_review_required_<timestamp>.json``
beside the converted scripts.
"""
import json
import os
from collections import Counter
from datetime import datetime
from typing import Dict, List, Optional


class ManualReviewLogger:
    """Collects manual review items and writes them to a dedicated file."""

    def __init__(self, output_dir: Optional[str] = None, logger=None):
        self.output_dir = output_dir
        self.logger = logger
        self.review_items: List[Dict] = []
        self.log_file_path: Optional[str] = None

    def log_manual_review_item(self,
                               file_path: str,
                               object_name: str,
                               issue_type: str,
                               message: str,
                               severity: Optional[str] = None,
                               suggested_action: Optional[str] = None,
                               object_type: str = 'UNKNOWN'):
        """Record one construct that needs a human decision.

        ``severity`` and ``suggested_action`` default to the entry for
        ``issue_type`` in ``MANUAL_REVIEW_PATTERNS``.
        """
        pattern = MANUAL_REVIEW_PATTERNS.get(issue_type, {})
        item = {
            'timestamp': datetime.now().isoformat(),
            'file_path': file_path,
            'object_name': object_name,
            'object_type': object_type,
            'issue_type': issue_type,
            'severity': severity or pattern.get('severity', 'WARNING'),
            'message': message,
            'suggested_action': suggested_action or pattern.get('suggested_action'),
            'status': 'PENDING_REVIEW',
        }
        self.review_items.append(item)

        if self.logger:
            level = 'error' if item['severity'] == 'ERROR' else 'warning'
            getattr(self.logger, level)(
                f"MANUAL REVIEW [{item['severity']}] {file_path}::{object_name} - {issue_type}: {message}"
            )

    def extend(self, items: List[Dict], file_path: Optional[str] = None):
        """Merge items collected by a single conversion call, relabelled with *file_path*."""
        for item in items:
            merged = dict(item)
            if file_path:
                merged['file_path'] = file_path
            self.review_items.append(merged)

    def write_manual_review_log(self) -> Optional[str]:
        """Write the collected items as JSON; returns the path, or None when nothing was written."""
        if not self.review_items or not self.output_dir:
            return None

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        os.makedirs(self.output_dir, exist_ok=True)
        self.log_file_path = os.path.join(self.output_dir, f"manual_review_required_{timestamp}.json")

        payload = {
            'conversion_timestamp': timestamp,
            'total_items_requiring_review': len(self.review_items),
            'summary_by_type': self._count_by('issue_type'),
            'summary_by_severity': self._count_by('severity'),
            'summary_by_file': self._count_by('file_path'),
            'review_items': self.review_items,
            'severity_levels': SEVERITY_LEVELS,
        }

        try:
            with open(self.log_file_path, 'w', encoding='utf-8') as f:
                json.dump(payload, f, indent=2, ensure_ascii=False)
        except OSError as e:
            if self.logger:
                self.logger.error(f"Error writing manual review log: {e}")
            return None

        if self.logger:
            self.logger.info(f"Manual review log written to: {self.log_file_path} "
                             f"({len(self.review_items)} item(s))")
        return self.log_file_path

    def create_summary_report(self) -> str:
        """Plain-text summary for the console."""
        if not self.review_items:
            return "No manual review items found."

        lines = ["=" * 80, "MANUAL REVIEW REQUIRED", "=" * 80,
                 f"Total Items Requiring Review: {len(self.review_items)}", "", "BY SEVERITY:"]
        lines.extend(f"  {severity}: {count}" for severity, count in self._count_by('severity').items())
        lines.extend(["", "BY ISSUE TYPE:"])
        lines.extend(f"  {issue_type}: {count}" for issue_type, count in self._count_by('issue_type').items())
        if self.log_file_path:
            lines.extend(["", f"Detailed log available at: {self.log_file_path}"])
        lines.append("=" * 80)
        return "\n".join(lines)

    def _count_by(self, key: str) -> Dict[str, int]:
        """Item counts per value of *key*, most frequent first."""
        return dict(Counter(item[key] for item in self.review_items).most_common())


SEVERITY_LEVELS = {
    'ERROR': 'An object from the source schema is missing from the converted script',
    'WARNING': 'The converted object behaves differently from the source',
    'INFO': 'Cosmetic difference (comments, options, fallback types)',
}

# Issue types recorded by the generators, with their default severity and suggested action
MANUAL_REVIEW_PATTERNS = {
    'SEQUENCE_UNSUPPORTED': {
        'severity': 'ERROR',
        'suggested_action': 'Replace the sequence with an auto-increment column or a counter table'
    },
    'TRIGGER_TIMING_UNSUPPORTED': {
        'severity': 'ERROR',
        'suggested_action': 'Rewrite the trigger with a timing the target supports (e.g. AFTER or INSTEAD OF)'
    },
    'TRIGGER_SCOPE_CHANGED': {
        'severity': 'WARNING',
        'suggested_action': 'Check that the trigger body works with the target row/statement scope'
    },
    'TRIGGER_BODY_COPIED': {
        'severity': 'WARNING',
        'suggested_action': 'The trigger body was copied verbatim; rewrite it in the target procedural language'
    },
    'FK_RULE_UNSUPPORTED': {
        'severity': 'WARNING',
        'suggested_action': 'Enforce the referential action with a trigger or in the application'
    },
    'MATERIALIZED_VIEW_UNSUPPORTED': {
        'severity': 'WARNING',
        'suggested_action': 'A plain view was generated; add a refresh strategy if the data must be materialised'
    },
    'INDEX_EXTENSION_UNSUPPORTED': {
        'severity': 'INFO',
        'suggested_action': 'The filter, include list or index kind was dropped; review index coverage'
    },
    'CHARSET_UNSUPPORTED': {
        'severity': 'WARNING',
        'suggested_action': 'Pick a target character set that can store the source data'
    },
    'COLLATION_UNSUPPORTED': {
        'severity': 'WARNING',
        'suggested_action': 'Pick an equivalent target collation to keep sort and comparison semantics'
    },
    'AUTO_INCREMENT_UNSUPPORTED': {
        'severity': 'WARNING',
        'suggested_action': 'Generate values with a trigger or make the column the single INTEGER PRIMARY KEY'
    },
    'COMPUTED_COLUMN_UNSUPPORTED': {
        'severity': 'WARNING',
        'suggested_action': 'Recreate the computed column with target syntax or compute it in a view'
    },
    'ON_UPDATE_UNSUPPORTED': {
        'severity': 'WARNING',
        'suggested_action': 'Maintain the column in an UPDATE trigger or in the application'
    },
    'TYPE_FALLBACK': {
        'severity': 'INFO',
        'suggested_action': 'Check the generic fallback type chosen for this column'
    },
    'COMMENT_UNSUPPORTED': {
        'severity': 'INFO',
        'suggested_action': 'Comments were kept as SQL comments only'
    },
}
