"""SQLite DDL parser."""
from typing import List, Tuple

from ...dialects.descriptor import SQLITE
from ...schema import TriggerTiming
from ...utils.tokenizer import Token
from .base_parser import BaseParser


class SQLiteParser(BaseParser):
    ALLOW_TYPELESS_COLUMNS = True
    # SQLite only has row triggers; FOR EACH ROW is optional.
    ROW_TRIGGERS_BY_DEFAULT = True

    def __init__(self, descriptor=SQLITE):
        super().__init__(descriptor)

    def _parse_trigger_timing(self, tokens: List[Token], i: int, name: str, statement: str) -> Tuple[TriggerTiming, int]:
        # Timing is optional and defaults to BEFORE.
        if i < len(tokens) and tokens[i].is_word("INSERT", "UPDATE", "DELETE"):
            return TriggerTiming.BEFORE, i
        return super()._parse_trigger_timing(tokens, i, name, statement)
