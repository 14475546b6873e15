"""Tests for the SQL Server parser."""

from sqlmapper.services.sql_conversion.converters import SQLServerParser
from sqlmapper.services.sql_conversion.schema import TriggerTiming

USERS = """
CREATE TABLE [dbo].[users] (
  [id] INT IDENTITY(1,1) NOT NULL,
  [name] NVARCHAR(100) NOT NULL,
  [bio] NVARCHAR(MAX) NULL,
  [created] DATETIME2 CONSTRAINT df_users_created DEFAULT (GETDATE()),
  CONSTRAINT [PK_users] PRIMARY KEY CLUSTERED ([id] ASC)
)
GO
EXEC sp_addextendedproperty N'MS_Description', N'Application users', N'SCHEMA', N'dbo', N'TABLE', N'users'
GO
EXEC sys.sp_addextendedproperty @name = N'MS_Description', @value = N'Display name',
  @level0type = N'SCHEMA', @level0name = N'dbo', @level1type = N'TABLE', @level1name = N'users',
  @level2type = N'COLUMN', @level2name = N'name'
GO
CREATE NONCLUSTERED INDEX [IX_users_name] ON [dbo].[users] ([name]) INCLUDE ([bio]) WHERE [name] IS NOT NULL
GO
CREATE TRIGGER [dbo].[trg_users_audit] ON [dbo].[users] AFTER INSERT, UPDATE AS
BEGIN
  SET NOCOUNT ON;
  UPDATE [dbo].[users] SET [created] = GETDATE() WHERE [id] IN (SELECT [id] FROM inserted);
END
GO
"""


def test_table_columns() -> None:
    """IDENTITY seeds, MAX lengths and named DEFAULT constraints are read."""
    table = SQLServerParser().parse(USERS).get_table("users", "dbo")
    assert table.schema == "dbo"
    identifier = table.get_column("id")
    assert identifier.auto_increment
    assert (identifier.identity_seed, identifier.identity_increment) == (1, 1)
    assert table.get_column("bio").data_type.length == -1
    assert table.get_column("created").default == "(GETDATE())"
    assert table.primary_key.name == "PK_users"
    assert table.primary_key.columns == ["id"]


def test_extended_properties_become_comments() -> None:
    """Positional and named MS_Description calls set comments."""
    table = SQLServerParser().parse(USERS).get_table("users")
    assert table.comment == "Application users"
    assert table.get_column("name").comment == "Display name"


def test_filtered_index_with_include() -> None:
    """INCLUDE, WHERE and clustering are captured."""
    index = SQLServerParser().parse(USERS).get_table("users").indexes[0]
    assert index.name == "IX_users_name"
    assert index.clustered is False
    assert index.include == ["bio"]
    assert index.where == "[name] IS NOT NULL"


def test_statement_trigger() -> None:
    """T-SQL triggers are statement level and list events with commas."""
    trigger = SQLServerParser().parse(USERS).triggers[0]
    assert trigger.name == "trg_users_audit"
    assert trigger.table == "users"
    assert trigger.timing == TriggerTiming.AFTER
    assert [e.value for e in trigger.events] == ["INSERT", "UPDATE"]
    assert not trigger.for_each_row
    assert trigger.body.startswith("BEGIN")
    assert trigger.body.endswith("END")


def test_identity_named_columns_are_not_auto_increment() -> None:
    """Names that merely contain IDENTITY or SERIAL are ordinary columns."""
    table = SQLServerParser().parse("CREATE TABLE t (identity_code INT, serial_no INT)").tables[0]
    assert not any(column.auto_increment for column in table.columns)
