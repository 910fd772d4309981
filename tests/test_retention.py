from __future__ import annotations

import threading
from pathlib import Path

from mp3drop.application.retention import InMemoryRetentionSlot
from mp3drop.domain.models import PublishedFile


def _published(name: str) -> PublishedFile:
    return PublishedFile(name=name, path=Path("/srv/uploads") / name, public_path=f"/uploads/{name}")


def test_slot_starts_empty() -> None:
    assert InMemoryRetentionSlot().current() is None


def test_publish_returns_previously_recorded_file() -> None:
    slot = InMemoryRetentionSlot()
    first = _published("first.mp3")
    second = _published("second.mp3")

    assert slot.publish(first) is None
    assert slot.current() == first
    assert slot.publish(second) == first
    assert slot.current() == second


def test_slots_are_isolated_instances() -> None:
    left = InMemoryRetentionSlot()
    right = InMemoryRetentionSlot()

    left.publish(_published("left.mp3"))

    assert right.current() is None


def test_concurrent_publish_hands_each_previous_file_to_exactly_one_caller() -> None:
    slot = InMemoryRetentionSlot()
    files = [_published(f"file-{index}.mp3") for index in range(64)]
    barrier = threading.Barrier(len(files))
    returned: list[PublishedFile | None] = []
    returned_lock = threading.Lock()

    def worker(published: PublishedFile) -> None:
        barrier.wait()
        previous = slot.publish(published)
        with returned_lock:
            returned.append(previous)

    threads = [threading.Thread(target=worker, args=(published,)) for published in files]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert returned.count(None) == 1
    superseded = [previous for previous in returned if previous is not None]
    assert len(superseded) == len(set(superseded)) == len(files) - 1
    assert set(superseded) | {slot.current()} == set(files)
