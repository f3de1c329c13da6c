"""Tests for the bookshelf-db command line interface."""

from click.testing import CliRunner

from bookshelf.database.cli import main


def test_init_then_seed_twice(tmp_path):
    url = f"sqlite+aiosqlite:///{tmp_path / 'cli.db'}"
    runner = CliRunner()

    init = runner.invoke(main, ["--database-url", url, "init"])
    first = runner.invoke(main, ["--database-url", url, "seed"])
    second = runner.invoke(main, ["--database-url", url, "seed"])

    assert init.exit_code == 0, init.output
    assert "Database tables created" in init.output
    assert first.exit_code == 0, first.output
    assert "Seeded 5 authors and 9 books" in first.output
    assert second.exit_code == 0, second.output
    assert "Seeded 0 authors and 0 books (9 books already present)" in second.output


def test_drop_requires_confirmation(tmp_path):
    url = f"sqlite+aiosqlite:///{tmp_path / 'cli.db'}"
    runner = CliRunner()

    aborted = runner.invoke(main, ["--database-url", url, "drop"], input="n\n")
    confirmed = runner.invoke(main, ["--database-url", url, "drop", "--yes"])

    assert aborted.exit_code != 0
    assert confirmed.exit_code == 0, confirmed.output
    assert "Database tables dropped" in confirmed.output
