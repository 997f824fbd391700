"""Tests for CLI commands."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from sqlnorm.cli import app

runner = CliRunner()

SAMPLE_SQL = """
SELECT ID, NAME, AGE FROM DB1.TB1 AS t1, TB2 AS t2 WHERE AGE > 20 ORDER BY AGE DESC, ID ASC LIMIT 10 OFFSET 2;
INSERT INTO a.TB1 (NAME,AGE,FLAG) VALUES('ZHANG_SAN', 20, true);
UPDATE TB1 SET NAME = 'name1', FLAG = false WHERE AGE > 10;
DELETE FROM TB1 WHERE AGE > 10;
CREATE TABLE TB1 (ID INT PRIMARY KEY AUTO_INCREMENT, NAME VARCHAR(20) NOT NULL, AGE INT, FLAG BOOLEAN);
"""


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path: Path, monkeypatch):
    """Run every CLI test in an empty directory so no sqlnorm.toml leaks in."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def sample_sql_file(tmp_path: Path) -> Path:
    sql_file = tmp_path / "queries.sql"
    sql_file.write_text(SAMPLE_SQL, encoding="utf-8")
    return sql_file


@pytest.fixture
def invalid_sql_file(tmp_path: Path) -> Path:
    sql_file = tmp_path / "invalid.sql"
    sql_file.write_text("SELECT * FROM TB1 WHERE (ID = 1", encoding="utf-8")
    return sql_file


class TestNormalizeCommand:
    """Tests for the normalize command."""

    def test_text_output(self, sample_sql_file):
        result = runner.invoke(app, ["normalize", str(sample_sql_file)])

        assert result.exit_code == 0
        assert "Query 0 (SELECT)" in result.stdout
        assert "Query 4 (CREATE TABLE)" in result.stdout

    def test_line_output(self, sample_sql_file):
        result = runner.invoke(
            app, ["normalize", str(sample_sql_file), "--output-format", "line"]
        )

        assert result.exit_code == 0
        lines = result.stdout.strip().splitlines()
        assert len(lines) == 5
        assert lines[0] == (
            "[0] SELECT: table_infos: [table1: DB1.TB1 AS t1, table2: TB2 AS t2], "
            "select_fields: [ID, NAME, AGE], set_fields: [], "
            "order_by_fields: [AGE DESC, ID ASC], limit: 10, offset: 2, "
            "where_exist: true"
        )
        assert lines[4] == (
            "[4] CREATE TABLE: table_infos: [table1: TB1], select_fields: [], "
            "set_fields: [ID=Unset, NAME=Unset, AGE=Unset, FLAG=Unset], "
            "order_by_fields: [], limit: none, offset: none, where_exist: false"
        )

    def test_json_output(self, sample_sql_file):
        result = runner.invoke(
            app, ["normalize", str(sample_sql_file), "-f", "json"]
        )

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert len(data["queries"]) == 5
        assert data["queries"][1]["set_fields"]["AGE"] == {
            "kind": "unsigned_integer",
            "value": 20,
        }

    def test_csv_output(self, sample_sql_file):
        result = runner.invoke(app, ["normalize", str(sample_sql_file), "-f", "csv"])

        assert result.exit_code == 0
        assert result.stdout.startswith("query_index,statement_type,tables")

    def test_statement_type_filter(self, sample_sql_file):
        result = runner.invoke(
            app,
            ["normalize", str(sample_sql_file), "-f", "line", "-s", "update"],
        )

        assert result.exit_code == 0
        lines = result.stdout.strip().splitlines()
        assert len(lines) == 1
        assert lines[0].startswith("[2] UPDATE:")

    def test_create_table_filter(self, sample_sql_file):
        result = runner.invoke(
            app,
            ["normalize", str(sample_sql_file), "-f", "line", "-s", "create_table"],
        )

        assert result.exit_code == 0
        assert result.stdout.strip().startswith("[4] CREATE TABLE:")

    def test_table_filter(self, sample_sql_file):
        result = runner.invoke(
            app,
            ["normalize", str(sample_sql_file), "-f", "line", "--table", "TB2"],
        )

        assert result.exit_code == 0
        lines = result.stdout.strip().splitlines()
        assert len(lines) == 1
        assert lines[0].startswith("[0] SELECT")

    def test_output_file(self, sample_sql_file, tmp_path):
        output_file = tmp_path / "out.txt"
        result = runner.invoke(
            app,
            ["normalize", str(sample_sql_file), "--output-file", str(output_file)],
        )

        assert result.exit_code == 0
        assert "Success" in result.stdout
        assert "Query 0 (SELECT)" in output_file.read_text(encoding="utf-8")

    def test_json_output_file(self, sample_sql_file, tmp_path):
        output_file = tmp_path / "out.json"
        result = runner.invoke(
            app,
            ["normalize", str(sample_sql_file), "-f", "json", "-o", str(output_file)],
        )

        assert result.exit_code == 0
        data = json.loads(output_file.read_text(encoding="utf-8"))
        assert len(data["queries"]) == 5

    def test_stdin(self):
        result = runner.invoke(
            app, ["normalize", "-", "-f", "line"], input="DELETE FROM TB1 WHERE ID = 1"
        )

        assert result.exit_code == 0
        assert "[0] DELETE: table_infos: [table1: TB1]" in result.stdout
        assert "where_exist: true" in result.stdout

    def test_skipped_statement_warning(self, tmp_path):
        sql_file = tmp_path / "mixed.sql"
        sql_file.write_text("DROP TABLE TB1; DELETE FROM TB1;", encoding="utf-8")

        result = runner.invoke(app, ["normalize", str(sql_file), "-f", "line"])

        assert result.exit_code == 0
        assert "Skipping query 0 (DROP)" in result.output
        assert "[1] DELETE" in result.stdout

    def test_config_file_defaults(self, sample_sql_file, isolated_cwd):
        (isolated_cwd / "sqlnorm.toml").write_text(
            '[sqlnorm]\noutput_format = "line"\nstatement_type = "delete"\n'
        )

        result = runner.invoke(app, ["normalize", str(sample_sql_file)])

        assert result.exit_code == 0
        assert result.stdout.strip() == (
            "[3] DELETE: table_infos: [table1: TB1], select_fields: [], "
            "set_fields: [], order_by_fields: [], limit: none, offset: none, "
            "where_exist: true"
        )

    def test_cli_overrides_config(self, sample_sql_file, isolated_cwd):
        (isolated_cwd / "sqlnorm.toml").write_text('[sqlnorm]\noutput_format = "line"\n')

        result = runner.invoke(app, ["normalize", str(sample_sql_file), "-f", "json"])

        assert result.exit_code == 0
        assert "queries" in json.loads(result.stdout)

    def test_invalid_output_format(self, sample_sql_file):
        result = runner.invoke(app, ["normalize", str(sample_sql_file), "-f", "xml"])

        assert result.exit_code == 1
        assert "Invalid output format" in result.output

    def test_invalid_statement_type(self, sample_sql_file):
        result = runner.invoke(app, ["normalize", str(sample_sql_file), "-s", "merge"])

        assert result.exit_code == 1
        assert "Invalid statement type" in result.output

    def test_invalid_sql(self, invalid_sql_file):
        result = runner.invoke(app, ["normalize", str(invalid_sql_file)])

        assert result.exit_code == 1
        assert "Failed to parse SQL" in result.output

    def test_numeric_failure(self, tmp_path):
        sql_file = tmp_path / "limit.sql"
        sql_file.write_text("SELECT ID FROM TB1 LIMIT 1.5", encoding="utf-8")

        result = runner.invoke(app, ["normalize", str(sql_file)])

        assert result.exit_code == 1
        assert "Cannot convert numeric literal '1.5'" in result.output

    def test_missing_file(self, tmp_path):
        result = runner.invoke(app, ["normalize", str(tmp_path / "missing.sql")])

        assert result.exit_code == 1
        assert "SQL file not found" in result.output

    def test_error_keeps_brackets_in_path(self, tmp_path):
        result = runner.invoke(app, ["normalize", str(tmp_path / "[data]" / "q.sql")])

        assert result.exit_code == 1
        assert "[data]" in "".join(result.output.split())

    def test_unexpected_error(self, sample_sql_file, mocker):
        mocker.patch(
            "sqlnorm.cli.StatementNormalizer", side_effect=RuntimeError("boom")
        )

        result = runner.invoke(app, ["normalize", str(sample_sql_file)])

        assert result.exit_code == 1
        assert "Unexpected error: boom" in result.output


class TestTablesCommand:
    """Tests for the tables command."""

    def test_text_output(self, sample_sql_file):
        result = runner.invoke(app, ["tables", str(sample_sql_file)])

        assert result.exit_code == 0
        assert "TB1" in result.stdout
        assert "TB2" in result.stdout

    def test_csv_output(self, sample_sql_file):
        result = runner.invoke(app, ["tables", str(sample_sql_file), "-f", "csv"])

        assert result.exit_code == 0
        lines = result.stdout.strip().splitlines()
        assert lines[0] == "query_index,statement_type,position,schema,table,alias"
        assert lines[1] == "0,SELECT,1,DB1,TB1,t1"
        assert lines[2] == "0,SELECT,2,,TB2,t2"
        assert lines[3] == "1,INSERT,1,a,TB1,"

    def test_json_output(self, sample_sql_file):
        result = runner.invoke(app, ["tables", str(sample_sql_file), "-f", "json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert [q["statement_type"] for q in data["queries"]] == [
            "SELECT",
            "INSERT",
            "UPDATE",
            "DELETE",
            "CREATE TABLE",
        ]

    def test_line_format_not_supported(self, sample_sql_file):
        result = runner.invoke(app, ["tables", str(sample_sql_file), "-f", "line"])

        assert result.exit_code == 1
        assert "Invalid output format" in result.output

    def test_output_file(self, sample_sql_file, tmp_path):
        output_file = tmp_path / "tables.csv"
        result = runner.invoke(
            app,
            ["tables", str(sample_sql_file), "-f", "csv", "-o", str(output_file)],
        )

        assert result.exit_code == 0
        assert "Success" in result.stdout
        assert output_file.read_text(encoding="utf-8").startswith("query_index")
