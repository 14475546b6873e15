"""PostgreSQL DDL parser."""
from collections import Counter

from ...dialects.descriptor import POSTGRES
from ...schema import Schema
from ...utils.sequence_utils import sequence_reference
from .base_parser import BaseParser

_INTEGER_TYPES = {"INTEGER", "INT", "INT4", "BIGINT", "INT8", "SMALLINT", "INT2"}


class PostgresParser(BaseParser):
    SERIAL_TYPES = {
        "SERIAL": "INTEGER",
        "SERIAL4": "INTEGER",
        "BIGSERIAL": "BIGINT",
        "SERIAL8": "BIGINT",
        "SMALLSERIAL": "SMALLINT",
        "SERIAL2": "SMALLINT",
    }

    def __init__(self, descriptor=POSTGRES):
        super().__init__(descriptor)

    def parse(self, text: str) -> Schema:
        schema = super().parse(text)
        self._fold_owned_sequences(schema)
        return schema

    def _fold_owned_sequences(self, schema: Schema) -> None:
        """
        Turn the expanded form of SERIAL back into auto-increment columns.

        ``pg_dump`` writes a SERIAL column as an integer column whose default
        is ``nextval('t_id_seq'::regclass)`` plus a separate CREATE SEQUENCE.
        When that sequence is defined in the same script and feeds exactly
        one integer column, the column becomes auto-increment and the
        sequence is dropped.
        """
        sequences = {s.name.lower(): s for s in schema.sequences}
        if not sequences:
            return
        usage = Counter()
        candidates = []
        for table in schema.tables:
            for column in table.columns:
                if not (column.default and column.default.lower().lstrip("(").startswith("nextval")):
                    continue
                name = sequence_reference(column.default)
                if name and name.lower() in sequences:
                    usage[name.lower()] += 1
                    candidates.append((table, column, name.lower()))

        folded = set()
        for table, column, name in candidates:
            if usage[name] != 1 or column.data_type.base_name not in _INTEGER_TYPES:
                continue
            sequence = sequences[name]
            column.auto_increment = True
            column.default = None
            if sequence.start != 1 or sequence.increment != 1:
                column.identity_seed = sequence.start
                column.identity_increment = sequence.increment
            folded.add(name)
            self.logger.debug(f"Folded sequence {sequence.name} into {table.name}.{column.name}")

        if folded:
            schema.sequences = [s for s in schema.sequences if s.name.lower() not in folded]
