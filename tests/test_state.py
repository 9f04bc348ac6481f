from engine.state import SnapshotCell


def test_newer_outcome_wins():
    cell = SnapshotCell()
    old, new = cell.next_seq(), cell.next_seq()
    assert cell.apply(new, ["new"])
    assert not cell.apply(old, ["old"])
    assert not cell.fail(old, "late error")
    assert cell.value == ["new"]
    assert cell.last_error is None


def test_failure_keeps_value():
    cell = SnapshotCell()
    assert cell.apply(cell.next_seq(), [1])
    assert cell.fail(cell.next_seq(), "timeout")
    assert cell.value == [1]
    assert cell.last_error == "timeout"
    assert cell.resolved
    assert cell.updated_at is not None


def test_sequencing_can_be_disabled():
    cell = SnapshotCell(discard_stale=False)
    old, new = cell.next_seq(), cell.next_seq()
    cell.apply(new, "new")
    assert cell.apply(old, "old")
    assert cell.value == "old"
