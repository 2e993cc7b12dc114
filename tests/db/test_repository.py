import pytest
import sqlite3

from db.repository import SQLiteBankRepository, default_snapshot
from gift.paths import ROOT_ID
from models.bank import BankSnapshot
from tests.helpers import make_category, make_question, root_category


@pytest.fixture
def repository(db_manager_with_schema):
    return SQLiteBankRepository(db_manager_with_schema, "Course default")


@pytest.fixture
def bank_id(services):
    return services.banks.create("Physics").id


def _snapshot():
    return BankSnapshot(
        categories=[
            root_category(),
            make_category("z", "Zoology"),
            make_category("a", "Anatomy", "z"),
        ],
        questions=[
            make_question("q_b", "a", name="Bones", choices=(("206", True), ("12", False), ("3", True))),
            make_question("q_a", "z", name="Essay", choices=None),
        ],
    )


class TestSQLiteBankRepository:
    """Tests for SQLiteBankRepository."""

    def test_load_unsaved_bank(self, repository, bank_id):
        """Test that a bank with no stored content has only the top category."""
        snapshot = repository.load(bank_id)

        assert snapshot == default_snapshot("Course default")
        assert snapshot.categories[0].id == ROOT_ID

    def test_save_and_load(self, repository, bank_id):
        """Test that a saved snapshot loads back unchanged, in storage order."""
        repository.save(bank_id, _snapshot())

        assert repository.load(bank_id) == _snapshot()

    def test_save_replaces_content(self, repository, bank_id):
        """Test that saving overwrites the previous content."""
        repository.save(bank_id, _snapshot())
        repository.save(bank_id, BankSnapshot(categories=[root_category("Renamed")]))

        snapshot = repository.load(bank_id)

        assert [c.name for c in snapshot.categories] == ["Renamed"]
        assert snapshot.questions == []

    def test_banks_are_isolated(self, services, repository, bank_id):
        """Test that two banks may use the same category ids."""
        other_id = services.banks.create("Chemistry").id
        repository.save(bank_id, _snapshot())
        repository.save(other_id, BankSnapshot(categories=[root_category("Other")]))

        assert repository.load(bank_id) == _snapshot()
        assert repository.load(other_id).categories[0].name == "Other"

    def test_failed_save_keeps_previous_content(self, repository, bank_id):
        """Test that a save that fails midway is rolled back."""
        repository.save(bank_id, _snapshot())
        duplicate_ids = BankSnapshot(
            categories=[make_category("x", "X"), make_category("x", "X")]
        )

        with pytest.raises(sqlite3.IntegrityError):
            repository.save(bank_id, duplicate_ids)

        assert repository.load(bank_id) == _snapshot()


class TestDefaultSnapshot:
    """Tests for default_snapshot."""

    def test_default_name(self):
        """Test the display name of a new bank's top category."""
        snapshot = default_snapshot()

        assert snapshot.categories[0].name == "Default for course"
        assert snapshot.categories[0].parent_id is None
        assert snapshot.questions == []
