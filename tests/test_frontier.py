import pytest

from a11y_crawler.frontier import Frontier


def test_offer_keeps_fifo_order():
    frontier = Frontier(10)
    for path in ("a", "b", "c"):
        assert frontier.offer(f"https://example.test/{path}")
    assert frontier.take_batch(2) == ["https://example.test/a", "https://example.test/b"]
    assert frontier.take_batch(5) == ["https://example.test/c"]
    assert frontier.take_batch(5) == []


def test_offer_drops_queued_and_visited_urls():
    frontier = Frontier(10)
    assert frontier.offer("https://example.test/a")
    assert not frontier.offer("https://example.test/a")
    assert not frontier.is_visited("https://example.test/a")

    batch = frontier.take_batch(1)
    frontier.mark_visited(batch[0])
    assert frontier.is_visited("https://example.test/a")
    assert not frontier.offer("https://example.test/a")
    assert frontier.pending == 0
    assert frontier.visited_count == 1


def test_offer_respects_budget():
    frontier = Frontier(3)
    frontier.offer("https://example.test/")
    frontier.mark_visited(frontier.take_batch(1)[0])
    admitted = [frontier.offer(f"https://example.test/{i}") for i in range(5)]
    assert admitted == [True, True, False, False, False]
    assert frontier.visited_count + frontier.pending == 3


def test_take_batch_is_capped_by_remaining_budget():
    frontier = Frontier(2)
    frontier.offer("https://example.test/a")
    frontier.offer("https://example.test/b")
    frontier.mark_visited("https://example.test/seed")
    assert frontier.take_batch(5) == ["https://example.test/a"]


def test_budget_exhausted():
    frontier = Frontier(1)
    frontier.offer("https://example.test/")
    assert not frontier.budget_exhausted
    frontier.mark_visited(frontier.take_batch(1)[0])
    assert frontier.budget_exhausted
    assert not frontier.offer("https://example.test/other")


def test_visited_never_exceeds_budget_under_many_offers():
    frontier = Frontier(5)
    frontier.offer("https://example.test/0")
    dispatched = []
    while frontier.pending:
        batch = frontier.take_batch(2)
        for url in batch:
            frontier.mark_visited(url)
        dispatched.extend(batch)
        for _ in batch:
            for i in range(20):
                frontier.offer(f"https://example.test/{i}")
    assert frontier.visited_count == 5
    assert len(dispatched) == len(set(dispatched)) == 5


def test_rejects_non_positive_budget():
    with pytest.raises(ValueError):
        Frontier(0)
