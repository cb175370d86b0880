"""Quick search domain service."""

from pennywise.database.base import Database
from pennywise.domain.entities import SearchResults

MIN_QUERY_LENGTH = 2


class SearchService:
    """Service for finding transactions, accounts and categories by text."""

    def __init__(self, db: Database):
        """Initialize search service.

        Args:
            db: Database instance
        """
        self.db = db

    def search(
        self,
        query: str,
        transaction_limit: int = 5,
        account_limit: int = 3,
        category_limit: int = 3,
    ) -> SearchResults:
        """Case-insensitive substring search.

        Transactions match on their description, accounts and categories
        on their name. Queries shorter than two characters match nothing.

        Args:
            query: Text to look for
            transaction_limit: Maximum transactions returned, newest first
            account_limit: Maximum accounts returned
            category_limit: Maximum categories returned

        Returns:
            SearchResults with the matches of each kind
        """
        query = (query or "").strip()
        if len(query) < MIN_QUERY_LENGTH:
            return SearchResults()

        return SearchResults(
            transactions=self.db.list_transactions(
                description_contains=query, limit=transaction_limit
            ),
            accounts=self.db.search_accounts(query, limit=account_limit),
            categories=self.db.search_categories(query, limit=category_limit),
        )
