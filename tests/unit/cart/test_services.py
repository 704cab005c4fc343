"""Unit tests for CartService."""

from __future__ import annotations

import uuid
from decimal import Decimal

import pytest

from modules.cart.dtos import add_line_adapter
from modules.cart.exceptions import CartLineForbidden, CartLineNotFound
from modules.cart.models import CartLine
from modules.cart.repositories.django_repository import CartDjangoRepository
from modules.cart.services import CartService

pytestmark = pytest.mark.unit


@pytest.fixture()
def service():
    return CartService(repository=CartDjangoRepository())


@pytest.fixture()
def add(service):
    def _add(owner: str, **data):
        data.setdefault("title", "Sticker")
        return service.add(owner, add_line_adapter.validate_python(data))

    return _add


class TestAdd:
    def test_line_persisted_for_owner(self, service, add):
        line = add("buyer-1", quantity=2, total="10.00", imprintFiles=["/uploads/a.png"])

        stored = CartLine.objects.get(pk=line.pk)
        assert stored.owner == "buyer-1"
        assert stored.category == "custom_design"
        assert stored.quantity == 2
        assert stored.total == Decimal("10.00")
        assert stored.imprint_files == ["/uploads/a.png"]

    def test_list_is_scoped_and_ordered(self, service, add):
        first = add("buyer-1", title="First")
        add("buyer-2", title="Other")
        second = add("buyer-1", title="Second")

        lines = service.list("buyer-1")

        assert [line.pk for line in lines] == [first.pk, second.pk]


class TestRemove:
    def test_remove_own_line(self, service, add):
        line = add("buyer-1")

        service.remove("buyer-1", str(line.id))

        assert not CartLine.objects.filter(pk=line.pk).exists()

    def test_remove_unknown_line(self, service):
        with pytest.raises(CartLineNotFound):
            service.remove("buyer-1", str(uuid.uuid4()))

    def test_remove_malformed_id(self, service):
        with pytest.raises(CartLineNotFound):
            service.remove("buyer-1", "not-a-uuid")

    def test_remove_foreign_line(self, service, add):
        line = add("buyer-2")

        with pytest.raises(CartLineForbidden):
            service.remove("buyer-1", str(line.id))

        assert CartLine.objects.filter(pk=line.pk).exists()


class TestRemoveMany:
    def test_removes_all_given_lines(self, service, add):
        a = add("buyer-1")
        b = add("buyer-1")
        keep = add("buyer-1")

        removed = service.remove_many("buyer-1", [str(a.id), str(b.id)])

        assert removed == 2
        assert list(CartLine.objects.values_list("pk", flat=True)) == [keep.pk]

    def test_duplicates_and_unknown_ids_skipped(self, service, add):
        a = add("buyer-1")

        removed = service.remove_many(
            "buyer-1", [str(a.id), str(a.id), str(uuid.uuid4()), "garbage"]
        )

        assert removed == 1

    def test_none_found(self, service):
        with pytest.raises(CartLineNotFound):
            service.remove_many("buyer-1", [str(uuid.uuid4())])

    def test_any_foreign_line_refuses_whole_call(self, service, add):
        mine = add("buyer-1")
        theirs = add("buyer-2")

        with pytest.raises(CartLineForbidden):
            service.remove_many("buyer-1", [str(mine.id), str(theirs.id)])

        assert CartLine.objects.count() == 2


class TestClear:
    def test_clear_only_own_lines(self, service, add):
        add("buyer-1")
        add("buyer-1")
        add("buyer-2")

        assert service.clear("buyer-1") == 2
        assert CartLine.objects.filter(owner="buyer-2").count() == 1

    def test_clear_empty_cart(self, service):
        assert service.clear("buyer-1") == 0
