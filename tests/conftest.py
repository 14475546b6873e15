"""Shared fixtures for the sqlmapper test suite."""

from pathlib import Path

import pytest

MYSQL_USERS = (
    "CREATE TABLE users (id INT PRIMARY KEY AUTO_INCREMENT, name VARCHAR(50) NOT NULL);"
)

MYSQL_SHOP = """
CREATE TABLE users (
  id INT NOT NULL AUTO_INCREMENT,
  email VARCHAR(255) NOT NULL,
  active TINYINT(1) NOT NULL DEFAULT 1,
  created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
  PRIMARY KEY (id),
  UNIQUE KEY uq_users_email (email)
) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4;

CREATE TABLE orders (
  id INT NOT NULL AUTO_INCREMENT,
  user_id INT NOT NULL,
  total DECIMAL(10,2) NOT NULL DEFAULT 0.00,
  PRIMARY KEY (id),
  KEY idx_orders_user (user_id),
  CONSTRAINT fk_orders_user FOREIGN KEY (user_id) REFERENCES users (id) ON DELETE CASCADE
) ENGINE=InnoDB;
"""


@pytest.fixture(name="mysql_users")
def create_mysql_users() -> str:
    """The single-table MySQL script used across conversion tests."""
    return MYSQL_USERS


@pytest.fixture(name="mysql_shop")
def create_mysql_shop() -> str:
    """A two-table MySQL script with an index and a cascading foreign key."""
    return MYSQL_SHOP


@pytest.fixture(name="sql_dir")
def create_sql_dir(tmp_path: Path) -> Path:
    """A directory holding two MySQL scripts, one nested, plus a non-SQL file."""
    source = tmp_path / "source"
    (source / "nested").mkdir(parents=True)
    (source / "users.sql").write_text(MYSQL_USERS, encoding="utf-8")
    (source / "nested" / "shop.sql").write_text(MYSQL_SHOP, encoding="utf-8")
    (source / "README.txt").write_text("not sql", encoding="utf-8")
    return source
