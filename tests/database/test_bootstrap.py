from hrms_attendance.database.bootstrap import SCHEMA_PATH, _strip_database_statements, split_sql_statements


def test_split_ignores_semicolons_in_quotes():
    sql = "INSERT INTO t VALUES ('a;b');\nINSERT INTO t VALUES (\"c;d\");\n  \n"

    assert list(split_sql_statements(sql)) == [
        "INSERT INTO t VALUES ('a;b')",
        'INSERT INTO t VALUES ("c;d")',
    ]


def test_split_handles_escaped_quote_and_tail():
    sql = "SELECT 'it\\'s;fine'; SELECT 1"

    assert list(split_sql_statements(sql)) == ["SELECT 'it\\'s;fine'", "SELECT 1"]


def test_database_statements_are_stripped():
    sql = "CREATE DATABASE IF NOT EXISTS x;\nUSE x;\nCREATE TABLE t (id INT);"

    assert list(split_sql_statements(_strip_database_statements(sql))) == ["CREATE TABLE t (id INT)"]


def test_packaged_schema_is_found_and_splits():
    statements = list(split_sql_statements(_strip_database_statements(SCHEMA_PATH.read_text(encoding="utf-8"))))

    tables = {
        name: stmt
        for stmt in statements
        for name in ("employees", "attendance_records", "attendance_punches")
        if f"CREATE TABLE IF NOT EXISTS {name} (" in stmt
    }
    assert set(tables) == {"employees", "attendance_records", "attendance_punches"}
    assert "UNIQUE (employee_id, work_date)" in tables["attendance_records"]
    assert "version INT NOT NULL DEFAULT 0" in tables["attendance_records"]
    assert not any("CREATE DATABASE" in s or s.startswith("USE ") for s in statements)
