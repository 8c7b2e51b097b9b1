"""Cart invariants and totals."""

import random

import pytest

from tiffin.errors import ValidationError
from tiffin.schemas import FoodItem
from tiffin.state import Cart


def food(food_id: str, price: float, available: bool = True) -> FoodItem:
    return FoodItem(id=food_id, name=f"Item {food_id}", price=price, available=available)


def test_add_merges_lines_for_same_food():
    cart = Cart()
    a = food("a", 50)
    cart.add(a, 1)
    cart.add(a, 2)

    assert len(cart) == 1
    assert cart.quantity_of("a") == 3
    assert cart.total_items == 3
    assert cart.total_amount == 150


def test_totals_follow_lines():
    cart = Cart()
    cart.add(food("a", 50), 1)
    cart.add(food("b", 30), 2)

    assert cart.total_amount == 110
    assert cart.total_items == 3
    assert [line.subtotal for line in cart] == [50, 60]


def test_set_quantity_zero_removes_line():
    cart = Cart()
    cart.add(food("a", 50), 2)
    assert cart.set_quantity("a", 0) is None
    assert "a" not in cart
    assert not cart


def test_set_quantity_unknown_id_is_noop_without_food():
    cart = Cart()
    revision = cart.revision
    assert cart.set_quantity("missing", 3) is None
    assert len(cart) == 0
    assert cart.revision == revision


def test_set_quantity_inserts_when_food_given():
    cart = Cart()
    line = cart.set_quantity("a", 4, food=food("a", 10))
    assert line.quantity == 4
    assert cart.total_amount == 40


@pytest.mark.parametrize("quantity", [0, -1])
def test_add_rejects_non_positive_quantity(quantity):
    with pytest.raises(ValueError):
        Cart().add(food("a", 10), quantity)


def test_set_quantity_rejects_negative():
    cart = Cart()
    cart.add(food("a", 10))
    with pytest.raises(ValueError):
        cart.set_quantity("a", -2)
    assert cart.quantity_of("a") == 1


def test_remove_and_clear():
    cart = Cart()
    cart.add(food("a", 10))
    cart.add(food("b", 20))
    cart.remove("a")
    cart.remove("a")
    assert [line.food_id for line in cart] == ["b"]

    cart.clear()
    assert cart.total_items == 0
    assert cart.total_amount == 0


def test_revision_changes_only_on_real_mutation():
    cart = Cart()
    start = cart.revision
    cart.clear()
    assert cart.revision == start

    cart.add(food("a", 10), 2)
    after_add = cart.revision
    cart.set_quantity("a", 2)
    assert cart.revision == after_add

    cart.set_quantity("a", 3)
    assert cart.revision > after_add


def test_ensure_minimum_counts_units():
    cart = Cart()
    cart.add(food("a", 10), 1)
    with pytest.raises(ValidationError) as excinfo:
        cart.ensure_minimum(2)
    assert excinfo.value.code == "min_items"
    assert excinfo.value.title == "Minimum order required"
    assert "at least 2 items" in excinfo.value.message

    cart.set_quantity("a", 2)
    cart.ensure_minimum(2)


def test_to_order_items_snapshot_prices():
    cart = Cart()
    cart.add(food("a", 12.5), 2)
    items = cart.to_order_items()
    assert [(i.food_id, i.quantity, i.price) for i in items] == [("a", 2, 12.5)]
    assert items[0].total_price == 25


def test_random_operations_keep_invariants():
    rng = random.Random(20240501)
    menu = [food(str(i), rng.choice([10, 25.5, 40, 99.99])) for i in range(6)]
    cart = Cart()

    for _ in range(500):
        item = rng.choice(menu)
        op = rng.choice(["add", "set", "remove"])
        if op == "add":
            cart.add(item, rng.randint(1, 4))
        elif op == "set":
            cart.set_quantity(item.id, rng.randint(0, 5), food=item)
        else:
            cart.remove(item.id)

        ids = [line.food_id for line in cart]
        assert len(ids) == len(set(ids))
        assert all(line.quantity > 0 for line in cart)
        assert cart.total_items == sum(line.quantity for line in cart)
        assert cart.total_amount == pytest.approx(
            sum(line.food.price * line.quantity for line in cart), abs=0.01
        )
