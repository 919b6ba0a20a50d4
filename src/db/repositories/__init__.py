"""DB repositories: sync functions that return plain rows for the SQL store."""

from src.db.repositories import dose_log_repo, inventory_log_repo, medication_repo, product_repo

__all__ = [
    "dose_log_repo",
    "inventory_log_repo",
    "medication_repo",
    "product_repo",
]
