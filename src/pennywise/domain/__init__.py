"""Domain layer for pennywise application.

Services are loaded lazily: the database layer imports
``pennywise.domain.entities``, and the services import the database layer.
"""

_SERVICES = {
    "AccountService": "pennywise.domain.account",
    "CategoryService": "pennywise.domain.category",
    "CSVImportService": "pennywise.domain.csv_import",
    "RuleService": "pennywise.domain.rule",
    "SearchService": "pennywise.domain.search",
    "TransactionService": "pennywise.domain.transaction",
}

__all__ = list(_SERVICES)


def __getattr__(name):
    if name in _SERVICES:
        from importlib import import_module

        return getattr(import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
