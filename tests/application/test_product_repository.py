"""Integration tests for the ProductRepository operations."""

from decimal import Decimal

import pytest

from catalog.application.product_repository import ProductRepository
from catalog.domain.exceptions import (
    IdMissingError,
    InvalidIdError,
    InvalidPriceError,
    InvalidProductNameError,
    InvalidStockError,
    ProductIdExistsError,
    ProductIdNotFoundError,
    StorageError,
)
from catalog.domain.model.product import Product
from tests.fakes import FakeProductStore, run


def _setup():
    products = [
        Product(id=1, product_name="pizza", price=5.99, stock=55),
        Product(id=2, product_name="cheese", price=2.99, stock=115),
        Product(id=3, product_name="Cheese Pizza", price=8.49, stock=55),
    ]
    return ProductRepository(FakeProductStore(products))


def _empty():
    return ProductRepository(FakeProductStore())


class TestValidateId:

    def test_unused_id_passes(self):
        run(_setup().validate_id(4))

    def test_existing_id_conflicts_outside_mutation_mode(self):
        with pytest.raises(ProductIdExistsError):
            run(_setup().validate_id(1))

    def test_mutation_mode_skips_existence_check(self):
        repo = _setup()
        run(repo.validate_id(1, mutation=True))
        run(repo.validate_id(99999, mutation=True))

    def test_invalid_id(self):
        with pytest.raises(InvalidIdError):
            run(_setup().validate_id("k"))


class TestAddProduct:

    @pytest.mark.parametrize("product_id", [1, 7, 9999, 123456])
    def test_add_then_get_returns_same_fields(self, product_id):
        repo = _empty()

        added = run(repo.add_product(product_id, "pizza", 5.99, 55))
        fetched = run(repo.get_product(product_id))

        assert added == fetched
        assert fetched.id == product_id
        assert fetched.product_name == "pizza"
        assert fetched.price == Decimal("5.99")
        assert fetched.stock == 55

    def test_duplicate_id_rejected_and_first_kept(self):
        repo = _empty()
        run(repo.add_product(1, "pizza", 5.99, 55))

        with pytest.raises(ProductIdExistsError):
            run(repo.add_product(1, "cheese", 2.99, 115))

        assert run(repo.get_product(1)).product_name == "pizza"

    @pytest.mark.parametrize("product_id", [-1, -100, "k", 1.5])
    def test_invalid_id_rejected(self, product_id):
        with pytest.raises(InvalidIdError):
            run(_empty().add_product(product_id, "pizza", 5.99, 55))

    def test_missing_id_rejected(self):
        with pytest.raises(IdMissingError):
            run(_empty().add_product(None, "pizza", 5.99, 55))

    def test_fields_checked_in_order(self):
        repo = _empty()
        with pytest.raises(InvalidProductNameError):
            run(repo.add_product(1, "p", 0, -1))
        with pytest.raises(InvalidPriceError):
            run(repo.add_product(1, "pizza", 0, -1))
        with pytest.raises(InvalidStockError):
            run(repo.add_product(1, "pizza", 5.99, -1))

    def test_failed_add_persists_nothing(self):
        repo = _empty()
        with pytest.raises(InvalidStockError):
            run(repo.add_product(1, "pizza", 5.99, 10000))
        assert run(repo.get_all_products()) == []

    def test_store_unique_index_reported_as_id_exists(self):
        store = FakeProductStore()
        repo = ProductRepository(store)

        async def _racing_insert():
            # another writer takes the id between pre-check and insert
            original = store.find_by_id

            async def _stale_lookup(product_id):
                result = await original(product_id)
                await store.insert(Product(id=product_id, product_name="other", price=1, stock=1))
                return result

            store.find_by_id = _stale_lookup
            await repo.add_product(5, "pizza", 5.99, 55)

        with pytest.raises(ProductIdExistsError):
            run(_racing_insert())


class TestQueries:

    def test_get_missing_product_returns_none(self):
        assert run(_setup().get_product(42)) is None

    def test_get_product_invalid_id(self):
        with pytest.raises(InvalidIdError):
            run(_setup().get_product(-3))

    def test_get_products_by_name_is_case_insensitive_contains(self):
        names = {p.product_name for p in run(_setup().get_products_by_name("CHEESE"))}
        assert names == {"cheese", "Cheese Pizza"}

    def test_get_products_by_name_no_match(self):
        assert run(_setup().get_products_by_name("burger")) == []

    def test_get_products_by_name_invalid(self):
        with pytest.raises(InvalidProductNameError):
            run(_setup().get_products_by_name("ab"))

    def test_get_products_by_price_exact_match(self):
        products = run(_setup().get_products_by_price(5.99))
        assert [p.id for p in products] == [1]

    def test_get_products_by_price_invalid(self):
        with pytest.raises(InvalidPriceError):
            run(_setup().get_products_by_price(0))

    def test_get_products_by_stock_exact_match(self):
        ids = sorted(p.id for p in run(_setup().get_products_by_stock(55)))
        assert ids == [1, 3]

    def test_get_products_by_stock_invalid(self):
        with pytest.raises(InvalidStockError):
            run(_setup().get_products_by_stock(-1))

    def test_get_all_products(self):
        assert len(run(_setup().get_all_products())) == 3

    def test_returned_products_are_detached_from_store(self):
        repo = _setup()
        product = run(repo.get_product(1))
        product.rename("changed locally")

        assert run(repo.get_product(1)).product_name == "pizza"

    def test_closed_store_raises_storage_error(self):
        store = FakeProductStore()
        run(store.close())
        with pytest.raises(StorageError):
            run(ProductRepository(store).get_all_products())


class TestSingleFieldUpdates:

    def test_update_price_round_trip(self):
        repo = _empty()
        run(repo.add_product(1, "pizza", 5.99, 55))

        run(repo.update_product_price(1, 6.49))
        product = run(repo.get_product(1))

        assert product.price == Decimal("6.49")
        assert product.product_name == "pizza"
        assert product.stock == 55

    def test_update_name(self):
        repo = _setup()
        product = run(repo.update_product_name(2, "blue cheese"))
        assert product.product_name == "blue cheese"
        assert run(repo.get_product(2)).product_name == "blue cheese"

    def test_update_stock_to_zero(self):
        repo = _setup()
        assert run(repo.update_product_stock(1, 0)).stock == 0

    def test_invalid_field_rejected_before_lookup(self):
        repo = _setup()
        with pytest.raises(InvalidPriceError):
            run(repo.update_product_price(99999, 0))
        with pytest.raises(InvalidProductNameError):
            run(repo.update_product_name(1, "no!"))
        assert run(repo.get_product(1)).product_name == "pizza"

    def test_invalid_id_rejected(self):
        with pytest.raises(InvalidIdError):
            run(_setup().update_product_stock(-1, 5))


class TestUpdateNonexistent:

    @pytest.mark.parametrize(
        "operation",
        [
            lambda repo: repo.update_product_name(99999, "pizza"),
            lambda repo: repo.update_product_price(99999, 6.49),
            lambda repo: repo.update_product_stock(99999, 10),
            lambda repo: repo.update_product(99999, "pizza", 6.49, 10),
            lambda repo: repo.update_product(99999),
        ],
    )
    def test_every_update_variant_reports_not_found(self, operation):
        with pytest.raises(ProductIdNotFoundError, match="not found"):
            run(operation(_setup()))


class TestUpdateProduct:

    def test_only_supplied_fields_change(self):
        repo = _setup()
        product = run(repo.update_product(1, price=7.25))

        assert product.price == Decimal("7.25")
        assert product.product_name == "pizza"
        assert product.stock == 55

    def test_all_fields(self):
        repo = _setup()
        product = run(repo.update_product(2, "gouda", 3.5, 80))
        assert (product.product_name, product.price, product.stock) == (
            "gouda",
            Decimal("3.5"),
            80,
        )

    def test_zero_stock_is_applied_not_skipped(self):
        repo = _setup()
        assert run(repo.update_product(1, stock=0)).stock == 0

    def test_zero_price_is_validated_not_skipped(self):
        repo = _setup()
        with pytest.raises(InvalidPriceError):
            run(repo.update_product(1, price=0))
        assert run(repo.get_product(1)).price == Decimal("5.99")

    def test_empty_name_is_validated_not_skipped(self):
        with pytest.raises(InvalidProductNameError):
            run(_setup().update_product(1, product_name=""))

    def test_invalid_field_aborts_whole_update(self):
        repo = _setup()
        with pytest.raises(InvalidStockError):
            run(repo.update_product(1, "new name", 1.0, 10000))

        product = run(repo.get_product(1))
        assert product.product_name == "pizza"
        assert product.price == Decimal("5.99")

    def test_missing_id(self):
        with pytest.raises(IdMissingError):
            run(_setup().update_product(0, stock=3))
