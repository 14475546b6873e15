"""
Canonical, dialect-neutral schema model.

A ``Schema`` is built by exactly one dialect parser and consumed once by one
dialect generator. None of these classes know anything about a particular
dialect: quoting, type spelling and modifier order are the generator's job.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class ConstraintKind(str, Enum):
    PRIMARY_KEY = "PRIMARY KEY"
    FOREIGN_KEY = "FOREIGN KEY"
    UNIQUE = "UNIQUE"
    CHECK = "CHECK"


class TriggerTiming(str, Enum):
    BEFORE = "BEFORE"
    AFTER = "AFTER"
    INSTEAD_OF = "INSTEAD OF"


class TriggerEvent(str, Enum):
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


# Fixed-point numerics are the only types where precision/scale apply.
FIXED_POINT_TYPES = frozenset({"DECIMAL", "NUMERIC", "NUMBER", "DEC", "FIXED"})


@dataclass
class DataType:
    name: str
    length: Optional[int] = None  # -1 means MAX
    precision: Optional[int] = None
    scale: Optional[int] = None
    unsigned: bool = False
    values: List[str] = field(default_factory=list)  # ENUM / SET members, quoted as written

    @property
    def base_name(self) -> str:
        return self.name.upper()

    @property
    def is_fixed_point(self) -> bool:
        return self.base_name in FIXED_POINT_TYPES

    def params(self) -> tuple:
        """Parameters as they appear between parentheses."""
        if self.precision is not None:
            if self.scale is not None:
                return (self.precision, self.scale)
            return (self.precision,)
        if self.length is not None:
            return (self.length,)
        return ()

    def __str__(self) -> str:
        params = self.params()
        if not params:
            return self.name
        rendered = ",".join("MAX" if p == -1 else str(p) for p in params)
        return f"{self.name}({rendered})"


@dataclass
class Column:
    name: str
    data_type: DataType
    nullable: bool = True
    default: Optional[str] = None
    auto_increment: bool = False
    identity_seed: Optional[int] = None
    identity_increment: Optional[int] = None
    unique: bool = False
    collation: Optional[str] = None
    charset: Optional[str] = None
    comment: Optional[str] = None
    on_update: Optional[str] = None
    generated: Optional[str] = None
    generated_stored: bool = False


@dataclass
class Constraint:
    kind: ConstraintKind
    name: Optional[str] = None
    columns: List[str] = field(default_factory=list)
    ref_table: Optional[str] = None
    ref_schema: Optional[str] = None
    ref_columns: List[str] = field(default_factory=list)
    on_delete: Optional[str] = None
    on_update: Optional[str] = None
    expression: Optional[str] = None
    # Declared on the column itself rather than in the table body.
    inline: bool = False


@dataclass
class Index:
    name: str
    table: str
    columns: List[str] = field(default_factory=list)
    unique: bool = False
    schema: Optional[str] = None
    where: Optional[str] = None
    include: List[str] = field(default_factory=list)
    kind: Optional[str] = None  # FULLTEXT / SPATIAL / BITMAP
    clustered: Optional[bool] = None
    method: Optional[str] = None  # USING btree / gin / ...


@dataclass
class Table:
    name: str
    schema: Optional[str] = None
    columns: List[Column] = field(default_factory=list)
    constraints: List[Constraint] = field(default_factory=list)
    indexes: List[Index] = field(default_factory=list)
    comment: Optional[str] = None
    charset: Optional[str] = None
    collation: Optional[str] = None
    engine: Optional[str] = None
    temporary: bool = False
    if_not_exists: bool = False

    def get_column(self, name: str) -> Optional[Column]:
        lowered = name.lower()
        for column in self.columns:
            if column.name.lower() == lowered:
                return column
        return None

    def has_column(self, name: str) -> bool:
        return self.get_column(name) is not None

    @property
    def primary_key(self) -> Optional[Constraint]:
        for constraint in self.constraints:
            if constraint.kind == ConstraintKind.PRIMARY_KEY:
                return constraint
        return None

    def is_single_primary_key(self, column_name: str) -> bool:
        pk = self.primary_key
        return bool(pk and len(pk.columns) == 1 and pk.columns[0].lower() == column_name.lower())


@dataclass
class View:
    name: str
    definition: str
    schema: Optional[str] = None
    columns: List[str] = field(default_factory=list)
    materialized: bool = False


@dataclass
class Trigger:
    name: str
    table: str
    timing: TriggerTiming
    events: List[TriggerEvent] = field(default_factory=list)
    body: str = ""
    for_each_row: bool = True
    when: Optional[str] = None
    schema: Optional[str] = None
    # UPDATE OF col, ... (column list for UPDATE events)
    update_columns: List[str] = field(default_factory=list)

    @property
    def event(self) -> Optional[TriggerEvent]:
        return self.events[0] if self.events else None


@dataclass
class Sequence:
    name: str
    start: int = 1
    increment: int = 1
    schema: Optional[str] = None
    min_value: Optional[int] = None
    max_value: Optional[int] = None
    cache: Optional[int] = None
    cycle: bool = False


@dataclass
class Schema:
    tables: List[Table] = field(default_factory=list)
    views: List[View] = field(default_factory=list)
    triggers: List[Trigger] = field(default_factory=list)
    sequences: List[Sequence] = field(default_factory=list)
    # CREATE INDEX statements whose table is not defined in the same script.
    indexes: List[Index] = field(default_factory=list)
    dialect: Optional[str] = None

    def get_table(self, name: str, schema: Optional[str] = None) -> Optional[Table]:
        lowered = name.lower()
        for table in self.tables:
            if table.name.lower() != lowered:
                continue
            if schema and table.schema and table.schema.lower() != schema.lower():
                continue
            return table
        return None
