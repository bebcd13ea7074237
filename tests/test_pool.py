from fakes import FakeRenderer

from qvirtuallist.widgets.virtual_list_pool import ItemPool


def _factory(renderer):
    return lambda: renderer.create_item(None)


def test_get_or_create_reuses_returned_panel():
    renderer = FakeRenderer()
    pool = ItemPool(target_size=4)

    first = pool.get_or_create(None, _factory(renderer))
    pool.return_item(first)
    second = pool.get_or_create(None, _factory(renderer))

    assert second is first
    assert len(renderer.created) == 1
    assert pool.total_reused == 1
    assert pool.hit_rate() == 0.5


def test_every_panel_is_idle_or_active():
    renderer = FakeRenderer()
    pool = ItemPool(target_size=4)
    active = [pool.get_or_create(None, _factory(renderer)) for _ in range(5)]
    for panel in active[:3]:
        pool.return_item(panel)
    active = active[3:] + [pool.get_or_create(None, _factory(renderer))]

    assert pool.available_count + pool.active_count == len(renderer.created)
    for panel in renderer.created:
        assert pool.owns(panel)
    assert all(pool.is_active(panel) for panel in active)


def test_get_then_return_leaves_counts_unchanged():
    renderer = FakeRenderer()
    pool = ItemPool()
    pool.return_item(pool.get_or_create(None, _factory(renderer)))
    before = (pool.available_count, pool.active_count)

    pool.return_item(pool.get_or_create(None, _factory(renderer)))

    assert (pool.available_count, pool.active_count) == before


def test_returning_unknown_panel_is_ignored():
    renderer = FakeRenderer()
    pool = ItemPool()
    stranger = renderer.create_item(None)

    pool.return_item(stranger)
    panel = pool.get_or_create(None, _factory(renderer))
    pool.return_item(panel)
    pool.return_item(panel)

    assert pool.available_count == 1
    assert pool.active_count == 0


def test_pool_does_not_change_visibility():
    renderer = FakeRenderer()
    pool = ItemPool()
    panel = pool.get_or_create(None, _factory(renderer))
    panel.show()

    pool.return_item(panel)

    assert panel.isVisible()
    assert pool.get_or_create(None, _factory(renderer)).isVisible()


def test_clear_all_destroys_idle_and_active_panels():
    renderer = FakeRenderer()
    pool = ItemPool()
    idle = pool.get_or_create(None, _factory(renderer))
    active = pool.get_or_create(None, _factory(renderer))
    pool.return_item(idle)

    pool.clear_all()

    assert idle.deleted and active.deleted
    assert pool.available_count == 0
    assert pool.active_count == 0


def test_stats_report_counts():
    renderer = FakeRenderer()
    pool = ItemPool(target_size=4)
    panels = [pool.get_or_create(None, _factory(renderer)) for _ in range(3)]
    pool.return_item(panels[0])

    stats = pool.stats()

    assert stats.available_count == 1
    assert stats.active_count == 2
    assert stats.total_created == 3
    assert stats.total_requests == 3
    assert stats.utilization == 0.25
    assert stats.performance_rating() in {'Excellent', 'Good', 'Poor'}


def test_set_target_size_raises_max_size():
    pool = ItemPool(target_size=4)

    pool.set_target_size(20)

    assert pool.target_size == 20
    assert pool.max_size == 40
