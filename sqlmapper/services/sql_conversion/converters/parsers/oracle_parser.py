"""Oracle DDL parser."""
import re
from typing import Optional

from ...dialects.descriptor import ORACLE
from ...schema import Schema, Trigger, TriggerEvent, TriggerTiming
from ...utils.sequence_utils import sequence_reference
from .base_parser import BaseParser

# Pre-12c identity idiom: a BEFORE INSERT row trigger that fills the key from a sequence.
_SEQUENCE_TRIGGER_BODY = re.compile(
    r"""^\s*BEGIN\s+
        (?:IF\s+:NEW\.(?P<guard>"?\w+"?)\s+IS\s+NULL\s+THEN\s+)?
        (?:
            SELECT\s+(?:(?P<owner1>"?\w+"?)\.)?(?P<seq1>"?\w+"?)\.NEXTVAL\s+INTO\s+:NEW\.(?P<col1>"?\w+"?)\s+FROM\s+DUAL
          | :NEW\.(?P<col2>"?\w+"?)\s*:=\s*(?:(?P<owner2>"?\w+"?)\.)?(?P<seq2>"?\w+"?)\.NEXTVAL
        )\s*;\s*
        (?:END\s+IF\s*;\s*)?
        END\s*(?:"?\w+"?)?\s*;?\s*$""",
    re.IGNORECASE | re.VERBOSE,
)

_NULL_KEY_GUARD = re.compile(r"^\s*:?NEW\.\"?\w+\"?\s+IS\s+NULL\s*$", re.IGNORECASE)


def _bare(name: Optional[str]) -> Optional[str]:
    return name.strip('"') if name else name


class OracleParser(BaseParser):

    def __init__(self, descriptor=ORACLE):
        super().__init__(descriptor)

    def parse(self, text: str) -> Schema:
        schema = super().parse(text)
        self._fold_sequence_triggers(schema)
        return schema

    def _fold_sequence_triggers(self, schema: Schema) -> None:
        """
        Replace the sequence + BEFORE INSERT trigger idiom with auto-increment.

        The trigger is dropped once its column is marked auto-increment. The
        sequence goes too unless some column default still references it.
        """
        sequences = {s.name.lower(): s for s in schema.sequences}
        if not sequences:
            return

        folded_triggers = []
        folded_sequences = set()
        for trigger in schema.triggers:
            match = self._match_sequence_trigger(trigger)
            if match is None:
                continue
            sequence_name, column_name = match
            sequence = sequences.get(sequence_name.lower())
            table = schema.get_table(trigger.table)
            column = table.get_column(column_name) if table else None
            if sequence is None or column is None:
                continue
            column.auto_increment = True
            if sequence.start != 1 or sequence.increment != 1:
                column.identity_seed = sequence.start
                column.identity_increment = sequence.increment
            folded_triggers.append(trigger)
            folded_sequences.add(sequence.name.lower())
            self.logger.debug(f"Folded trigger {trigger.name} and sequence {sequence.name} into {table.name}.{column.name}")

        if not folded_triggers:
            return
        schema.triggers = [t for t in schema.triggers if t not in folded_triggers]

        still_used = set()
        for table in schema.tables:
            for column in table.columns:
                ref = sequence_reference(column.default) if column.default else None
                if ref:
                    still_used.add(ref.lower())
        dropped = folded_sequences - still_used
        schema.sequences = [s for s in schema.sequences if s.name.lower() not in dropped]

    @staticmethod
    def _match_sequence_trigger(trigger: Trigger):
        if trigger.timing != TriggerTiming.BEFORE or trigger.events != [TriggerEvent.INSERT]:
            return None
        if not trigger.for_each_row:
            return None
        if trigger.when and not _NULL_KEY_GUARD.match(trigger.when):
            return None
        match = _SEQUENCE_TRIGGER_BODY.match(trigger.body)
        if match is None:
            return None
        column = _bare(match.group("col1") or match.group("col2"))
        guard = _bare(match.group("guard"))
        if guard and guard.lower() != column.lower():
            return None
        return _bare(match.group("seq1") or match.group("seq2")), column
