"""Base services container for dependency injection."""

from config import Config
from db.manager import DatabaseManager
from db.repository import BankRepository, SQLiteBankRepository
from services.store import QuestionBankStore


class Services:
    """Container for all application services.

    Tests inject an in-memory database manager or a fake repository here.

    Args:
        config: Application configuration object.
        db_manager: Optional database manager for testing. If None, one is
            created from config.
        repository: Optional bank repository. If None, bank content is stored
            in the same SQLite database as the registry.
    """

    def __init__(self, config: Config, db_manager=None, repository: BankRepository = None):
        self.config = config
        self.db_manager = db_manager or DatabaseManager(config)
        self.repository = repository or SQLiteBankRepository(
            self.db_manager, config.default_category_name
        )

        # Lazy import to avoid circular dependencies
        from services.banks import BankService
        from services.gift_transfer import GiftTransferService

        self.banks = BankService(self.db_manager)
        self.transfer = GiftTransferService(self.repository, config)

    def open_store(self, bank_id: int) -> QuestionBankStore:
        """Load a bank into an editable store."""
        return QuestionBankStore(self.repository.load(bank_id))

    def save_store(self, bank_id: int, store: QuestionBankStore) -> None:
        self.repository.save(bank_id, store.snapshot())
