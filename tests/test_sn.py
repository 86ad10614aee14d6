from concurrent.futures import ThreadPoolExecutor

from gbcms.sn import SNManager


def test_next_sn_increments():
    manager = SNManager()
    first = manager.next_sn()
    second = manager.next_sn()
    assert second == first + 1


def test_next_sn_skips_registered():
    manager = SNManager()
    first = manager.next_sn()
    manager.add_event(first + 1, lambda data: None)
    assert manager.next_sn() == first + 2


def test_add_find_remove():
    manager = SNManager()
    received = []
    manager.add_event(5, received.append)
    callback = manager.find_event(5)
    callback("payload")
    assert received == ["payload"]
    manager.remove_event(5)
    assert manager.find_event(5) is None


def test_find_missing_and_remove_missing():
    manager = SNManager()
    manager.remove_event(9)
    assert manager.find_event(9) is None


def test_add_replaces_callback():
    manager = SNManager()
    first, second = [], []
    manager.add_event(1, first.append)
    manager.add_event(1, second.append)
    manager.find_event(1)("x")
    assert (first, second) == ([], ["x"])


def test_concurrent_next_sn_unique():
    manager = SNManager()
    with ThreadPoolExecutor(max_workers=8) as pool:
        futures = [pool.submit(manager.next_sn) for _ in range(1600)]
        results = [future.result() for future in futures]
    assert len(results) == 1600
    assert len(set(results)) == 1600
    assert all(value > 0 for value in results)