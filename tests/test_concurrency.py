"""Concurrency tests for the catalog store."""

from concurrent.futures import ThreadPoolExecutor

from craftcatalog.catalog.schemas import Product, SubProduct
from craftcatalog.catalog.store import CatalogStore

N_WORKERS = 8
N_CALLS = 40


def test_concurrent_ratings_are_not_lost(store):
    values = list(range(N_CALLS))

    with ThreadPoolExecutor(max_workers=N_WORKERS) as pool:
        results = list(pool.map(lambda v: store.add_rating("test-keyboard-1", v), values))

    assert all(results)
    ratings = store.get_by_id("test-keyboard-1").ratings
    assert sorted(ratings) == values


def test_separate_stores_on_same_file_share_the_guard(data_file):
    """Should serialize writers even across store instances.

    Given: Several stores over one file
    When: Each adds ratings concurrently
    Then: Every rating is present exactly once
    """
    stores = [CatalogStore(data_file) for _ in range(4)]
    jobs = [(stores[i % len(stores)], i) for i in range(N_CALLS)]

    with ThreadPoolExecutor(max_workers=N_WORKERS) as pool:
        list(pool.map(lambda job: job[0].add_rating("test-laptop-1", job[1]), jobs))

    ratings = stores[0].get_by_id("test-laptop-1").ratings
    assert ratings[:3] == [5, 4, 5]
    assert sorted(ratings[3:]) == list(range(N_CALLS))


def test_concurrent_mixed_mutations(empty_store):
    empty_store.add_product(Product(id="p1"))

    def add_sub(i):
        return empty_store.add_sub_product("p1", SubProduct(name=f"sub-{i}"))

    def add_product(i):
        return empty_store.add_product(Product(id=f"extra-{i}"))

    with ThreadPoolExecutor(max_workers=N_WORKERS) as pool:
        subs = [pool.submit(add_sub, i) for i in range(20)]
        prods = [pool.submit(add_product, i) for i in range(20)]
        assert all(f.result() for f in subs + prods)

    p1 = empty_store.get_by_id("p1")
    assert len(p1.sub_products) == 20
    assert len({s.id for s in p1.sub_products}) == 20
    assert len(empty_store.list()) == 21
