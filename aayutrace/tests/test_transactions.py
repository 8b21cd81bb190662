"""Tests du décorateur @transactional"""

import pytest

from aayutrace.middleware.transaction_handler import transactional
from aayutrace.models.category import Category
from aayutrace.utils.exceptions import StaleReferenceError


class PantryService:
    def __init__(self, db):
        self.db = db

    @transactional
    def add(self, name):
        category = Category(user_id=None, name=name)
        self.db.add(category)
        self.db.flush()
        return category

    @transactional
    def add_then_refuse(self, name, error):
        self.db.add(Category(user_id=None, name=name))
        self.db.flush()
        raise error


def test_commits_on_success(db):
    category = PantryService(db).add("Spices")

    db.rollback()
    assert db.query(Category).filter(Category.id == category.id).count() == 1


@pytest.mark.parametrize(
    "error",
    [StaleReferenceError("product", 7), ValueError("refused"), RuntimeError("boom")],
)
def test_rolls_back_and_reraises(db, error):
    with pytest.raises(type(error)):
        PantryService(db).add_then_refuse("Snacks", error)

    assert db.query(Category).filter(Category.name == "Snacks").count() == 0


def test_keeps_wrapped_name(db):
    assert PantryService.add.__name__ == "add"
