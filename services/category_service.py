from database.category_dao import CategoryDAO, DuplicateCategoryError
from models.category import Category
from services.color_service import assign_color
from utils.constants import TRANSACTION_TYPES
from utils.logging_setup import get_logger

log = get_logger("tally.services.category")


class CategoryService:
    def __init__(self, category_dao: CategoryDAO, rng=None):
        self._dao = category_dao
        self._rng = rng

    def get_all(self) -> list[Category]:
        return self._dao.get_all()

    def get_by_type(self, type_: str) -> list[Category]:
        return self._dao.get_by_type(type_)

    def color_map(self) -> dict[str, str]:
        """Category name → colour. Later rows win when a name exists for both types."""
        return {c.name: c.color for c in self._dao.get_all()}

    def create(self, name: str, type_: str) -> Category:
        name = name.strip()
        if not name:
            raise ValueError("Category name cannot be empty.")
        if type_ not in TRANSACTION_TYPES:
            raise ValueError(f"Invalid type: {type_}")
        existing = self._dao.get_by_type(type_)
        if any(c.name == name for c in existing):
            raise DuplicateCategoryError(name, type_)
        color = assign_color(type_, {c.color for c in existing}, rng=self._rng)
        category = self._dao.create(name, type_, color)
        log.info("created %s category %r with colour %s", type_, name, color)
        return category

    def rename(self, category_id: int, name: str) -> Category:
        name = name.strip()
        if not name:
            raise ValueError("Category name cannot be empty.")
        category = self._dao.rename(category_id, name)
        if category is None:
            raise ValueError(f"No category with id {category_id}.")
        return category

    def delete(self, category_id: int):
        if not self._dao.delete(category_id):
            raise ValueError(f"No category with id {category_id}.")
        log.info("deleted category %d", category_id)
