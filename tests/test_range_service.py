from types import SimpleNamespace

from PySide6.QtCore import QSize

from fakes import make_params
from qvirtuallist.widgets.virtual_list_range_service import VisibleRangeService
from qvirtuallist.widgets.virtual_list_size_cache import SizeCache


def _service(capacity=100):
    state = SimpleNamespace(size_cache=SizeCache(capacity), params=make_params())
    return VisibleRangeService(state), state


def _cache_sizes(cache, sizes):
    for index, extent in sizes.items():
        cache.record_measurement(index, QSize(800, extent), extent, 800)


def _assert_consistent(items, scroll, viewport):
    assert items
    for item in items:
        assert item.start < scroll + viewport
        assert item.end > scroll
    for previous, current in zip(items, items[1:]):
        assert current.index == previous.index + 1
        assert current.start == previous.end


def test_uncached_items_use_estimate():
    service, _ = _service()

    items = service.calculate(100, 0, 600)

    assert [item.index for item in items] == list(range(8))
    assert items[-1].start == 560
    _assert_consistent(items, 0, 600)


def test_mixed_cached_sizes_cover_viewport():
    service, state = _service()
    _cache_sizes(state.size_cache, {i: 30 + (i % 4) * 25 for i in range(0, 60)})

    for scroll in (0, 7, 333, 1000, 2500):
        items = service.calculate(60, scroll, 600)
        _assert_consistent(items, scroll, 600)
        assert items[0].start <= scroll
        assert items[-1].end >= min(scroll + 600, sum(30 + (i % 4) * 25 for i in range(60)))


def test_no_intersecting_item_is_omitted():
    service, state = _service()
    sizes = {i: 45 for i in range(40)}
    _cache_sizes(state.size_cache, sizes)

    items = service.calculate(40, 100, 300)

    expected = [i for i in range(40) if i * 45 < 400 and i * 45 + 45 > 100]
    assert [item.index for item in items] == expected


def test_measurement_feeds_following_offsets():
    service, _ = _service()
    measured = []

    def measure(index):
        measured.append(index)
        return 40

    items = service.calculate(100, 0, 600, measure=measure)

    # Candidates come from estimates: every item starting before 600 + slack.
    assert measured == list(range(12))
    assert [item.index for item in items] == list(range(14))
    assert items[12].start == 480
    assert items[12].extent == 80


def test_candidate_scan_does_not_touch_lru_order():
    service, state = _service()
    _cache_sizes(state.size_cache, {i: 50 for i in range(20)})
    before = state.size_cache.indices()

    service.find_candidates(20, 0, 600)

    assert state.size_cache.indices() == before


def test_scroll_near_end_includes_terminal_item():
    service, _ = _service()

    items = service.calculate(10, 400, 600)

    assert [item.index for item in items] == [5, 6, 7, 8, 9]


def test_empty_inputs_give_empty_range():
    service, _ = _service()

    assert service.calculate(0, 0, 600) == []
    assert service.calculate(10, 0, 0) == []
    assert service.calculate(10, 5000, 600) == []


def test_window_near_the_end_evaluates_tail_items():
    state = SimpleNamespace(size_cache=SizeCache(100), params=make_params(early_termination_threshold=0))
    service = VisibleRangeService(state)
    measured = []

    def measure(index):
        measured.append(index)
        return 80

    items = service.calculate(100, 7200, 600, measure=measure)

    assert {97, 98, 99} <= set(measured)
    assert items[-1].index == 97

    measured.clear()
    service.calculate(100, 0, 600, measure=measure)
    assert 99 not in measured


def test_fill_viewport_restacks_on_measured_extents():
    service, _ = _service()

    items = service.calculate(100, 0, 600, measure=lambda index: 20)
    # Items past the measured candidates are still sized at the estimate.
    assert items[-1].extent == 80

    filled = service.fill_viewport(items, 100, 0, 600, lambda index: 20)

    _assert_consistent(filled, 0, 600)
    assert [item.extent for item in filled] == [20] * 30
    assert filled[-1].end == 600


def test_fill_viewport_stops_at_last_item():
    service, _ = _service()
    items = service.calculate(5, 0, 600, measure=lambda index: 20)

    filled = service.fill_viewport(items, 5, 0, 600, lambda index: 20)

    assert [item.index for item in filled] == [0, 1, 2, 3, 4]
    assert service.fill_viewport([], 5, 0, 600, lambda index: 20) == []
