"""Category domain service."""

import logging
import re
from typing import Optional
from pennywise.database.base import Database
from pennywise.domain.entities import Category as CategoryEntity, CategoryTreeNode
from pennywise.domain.errors import (
    NotFoundError,
    ValidationError,
    category_not_found,
    category_path_not_found,
)

logger = logging.getLogger(__name__)

DEFAULT_COLOR = "#3b82f6"
_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")


def _validate_color(color: str) -> str:
    if not _HEX_COLOR.match(color):
        raise ValidationError(f"Invalid color '{color}'. Use a hex value like {DEFAULT_COLOR}")
    return color.lower()


class CategoryService:
    """Service for managing categories."""

    def __init__(self, db: Database):
        """Initialize category service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_category(
        self,
        name: str,
        parent_path: Optional[str] = None,
        color: str = DEFAULT_COLOR,
        parent_id: Optional[int] = None,
    ) -> int:
        """Create a category.

        Args:
            name: Category name
            parent_path: Optional parent category path (e.g., "Food & Dining")
            color: Hex display color
            parent_id: Optional parent category ID (alternative to parent_path)

        Returns:
            Category ID

        Raises:
            ValidationError: If name or color is invalid
            NotFoundError: If parent category doesn't exist
        """
        name = name.strip() if name else ""
        if not name:
            raise ValidationError("Name is required")
        if ">" in name:
            raise ValidationError("Category names cannot contain '>'")

        if parent_path is not None:
            parent = self.db.get_category_by_path(parent_path)
            if parent is None:
                raise NotFoundError(f"Parent category '{parent_path}' not found")
            parent_id = parent.id
        elif parent_id is not None and self.db.get_category(parent_id) is None:
            raise NotFoundError(f"Parent category {parent_id} not found")

        return self.db.create_category(name=name, color=_validate_color(color), parent_id=parent_id)

    def get_category(self, category_id: int) -> Optional[CategoryEntity]:
        """Get category by ID."""
        return self.db.get_category(category_id)

    def get_category_by_path(self, path: str) -> Optional[CategoryEntity]:
        """Get category by path.

        Args:
            path: Category path (e.g., "Food & Dining > Groceries")

        Returns:
            Category entity or None if not found
        """
        return self.db.get_category_by_path(path)

    def require_category_by_path(self, path: str) -> CategoryEntity:
        """Get category by path or raise NotFoundError."""
        category = self.db.get_category_by_path(path)
        if category is None:
            raise NotFoundError(category_path_not_found(path))
        return category

    def resolve_category(self, reference: str) -> Optional[CategoryEntity]:
        """Find a category from free text, as found in an imported CSV cell.

        Tries the text as a full path first, then as a bare name (ignoring
        case). A bare name shared by several categories resolves to the
        oldest one.
        """
        category = self.db.get_category_by_path(reference)
        if category is not None:
            return category
        matches = self.db.find_categories_by_name(reference)
        return matches[0] if matches else None

    def list_categories(self, parent_id: Optional[int] = None) -> list[CategoryEntity]:
        """List categories directly under ``parent_id`` (roots when None)."""
        return self.db.list_categories(parent_id=parent_id)

    def get_category_tree(self) -> list[CategoryTreeNode]:
        """Get full category tree.

        Returns:
            List of root category nodes with nested children
        """
        return self.db.get_category_tree()

    def format_category_path(self, category_id: int) -> str:
        """Get full path for a category.

        Args:
            category_id: Category ID

        Returns:
            Full category path (e.g., "Food & Dining > Groceries")
        """
        cat = self.get_category(category_id)
        if cat is None:
            return ""

        path_parts = [cat.name]
        seen = {cat.id}
        current_parent_id = cat.parent_id

        while current_parent_id is not None and current_parent_id not in seen:
            parent = self.get_category(current_parent_id)
            if parent is None:
                break
            path_parts.append(parent.name)
            seen.add(parent.id)
            current_parent_id = parent.parent_id

        return " > ".join(reversed(path_parts))

    def update_category(
        self,
        category_id: int,
        name: Optional[str] = None,
        color: Optional[str] = None,
        parent_id: Optional[int] = None,
        clear_parent: bool = False,
    ) -> None:
        """Update a category.

        Args:
            category_id: Category to update
            name: Optional new name
            color: Optional new hex color
            parent_id: Optional new parent category ID
            clear_parent: Make the category a root category

        Raises:
            NotFoundError: If the category or new parent doesn't exist
            ValidationError: If the category would become its own parent
        """
        if self.db.get_category(category_id) is None:
            raise NotFoundError(category_not_found(category_id))

        if clear_parent and parent_id is not None:
            raise ValidationError("Cannot set both parent and clear_parent")

        if name is not None:
            name = name.strip()
            if not name:
                raise ValidationError("Name is required")
            if ">" in name:
                raise ValidationError("Category names cannot contain '>'")

        if color is not None:
            color = _validate_color(color)

        if parent_id is not None:
            if self.db.get_category(parent_id) is None:
                raise NotFoundError(f"Parent category {parent_id} not found")
            if parent_id == category_id:
                raise ValidationError("Cannot set category as its own parent")

        self.db.update_category(
            category_id=category_id,
            name=name,
            color=color,
            parent_id=parent_id,
            clear_parent=clear_parent,
        )

    def delete_category(self, category_id: int) -> None:
        """Delete a category, its subcategories and the rules pointing at them.

        Transactions in the removed categories become uncategorized.

        Raises:
            NotFoundError: If the category doesn't exist
        """
        if self.db.get_category(category_id) is None:
            raise NotFoundError(category_not_found(category_id))
        self.db.delete_category(category_id)
        logger.info("Deleted category %d", category_id)
