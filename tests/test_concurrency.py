import threading
import time

import pytest

from entwine.container import Container
from entwine.domain import BindingSpec, Lifetime
from entwine.lifecycle_cache import LifecycleCache

THREADS = 16


def run_concurrently(func, count=THREADS):
    barrier = threading.Barrier(count)
    results = [None] * count
    errors = []

    def run(index):
        barrier.wait()
        try:
            results[index] = func()
        except Exception as e:
            errors.append(e)

    threads = [threading.Thread(target=run, args=(i,)) for i in range(count)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    return results


def test_concurrent_first_resolution_of_shared_key_yields_one_instance():
    constructed = []

    class Slow:
        def __init__(self):
            time.sleep(0.01)
            constructed.append(self)

    container = Container().register_shared(Slow)

    results = run_concurrently(lambda: container.resolve(Slow))

    assert len(constructed) >= 1
    assert all(result is results[0] for result in results)
    assert container.resolve(Slow) is results[0]
    assert results[0] in constructed


def test_concurrent_put_keeps_first_instance():
    cache = LifecycleCache()

    results = run_concurrently(lambda: cache.put("key", object()))

    assert all(result is results[0] for result in results)
    assert cache.get_or_none("key") is results[0]


def test_concurrent_resolutions_do_not_report_false_cycles():
    class Leaf:
        def __init__(self):
            time.sleep(0.005)

    class Branch:
        def __init__(self, leaf: Leaf):
            self.leaf = leaf

    container = Container().register(Leaf).register(Branch)

    results = run_concurrently(lambda: container.resolve(Branch))

    assert len({id(result) for result in results}) == THREADS


@pytest.mark.parametrize("lifetime", [Lifetime.SHARED, Lifetime.TRANSIENT])
def test_concurrent_registration_and_resolution(lifetime):
    container = Container()
    container.register_spec("value", BindingSpec(lambda: object(), lifetime, ()))

    def register_and_resolve():
        container.register_spec("value", BindingSpec(lambda: object(), lifetime, ()))
        return container.resolve("value")

    results = run_concurrently(register_and_resolve)

    assert all(result is not None for result in results)
    if lifetime is Lifetime.SHARED:
        assert all(result is results[0] for result in results)
