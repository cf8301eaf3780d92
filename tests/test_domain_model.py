"""Tests for DomainListModel (Qt model/view pattern)."""

from PySide6.QtCore import Qt
from reqmon.aggregator import TelemetryAggregator
from reqmon.models import MetricsSnapshot
from reqmon.ui.domain_model import DomainListModel


def snapshot_of(events):
    aggregator = TelemetryAggregator()
    for domain, now in events:
        aggregator.handle_event(domain, now)
    return aggregator.snapshot()


class TestDomainListModel:
    """Test DomainListModel behavior."""

    def test_initial_state(self):
        """Test model starts empty with correct column count."""
        model = DomainListModel()
        assert model.rowCount() == 0
        assert model.columnCount() == 3

    def test_column_headers(self):
        """Test column headers are correct."""
        model = DomainListModel()
        assert model.headerData(0, Qt.Horizontal, Qt.DisplayRole) == "Domain"
        assert model.headerData(1, Qt.Horizontal, Qt.DisplayRole) == "Packets"
        assert model.headerData(2, Qt.Horizontal, Qt.DisplayRole) == "Color"
        assert model.headerData(3, Qt.Horizontal, Qt.DisplayRole) is None

    def test_rows_sorted_by_count(self):
        """Test rows follow request count, busiest first."""
        model = DomainListModel()
        model.update_from_snapshot(
            snapshot_of([("a.com", 0), ("b.com", 10), ("b.com", 20), ("c.com", 30)])
        )

        assert model.rowCount() == 3
        assert model.data(model.index(0, 0), Qt.DisplayRole) == "b.com"
        assert model.data(model.index(0, 1), Qt.DisplayRole) == "2"
        assert model.data(model.index(1, 0), Qt.DisplayRole) == "a.com"
        assert model.data(model.index(2, 0), Qt.DisplayRole) == "c.com"

    def test_color_column(self):
        """Test the color column shows the assigned palette slot."""
        model = DomainListModel()
        model.update_from_snapshot(snapshot_of([("a.com", 0), ("b.com", 10)]))

        assert model.data(model.index(0, 2), Qt.DisplayRole) == "chart-1"
        assert model.data(model.index(1, 2), Qt.DisplayRole) == "chart-2"

    def test_update_replaces_rows(self):
        """Test a newer snapshot replaces the previous rows."""
        model = DomainListModel()
        model.update_from_snapshot(snapshot_of([("a.com", 0)]))
        model.update_from_snapshot(snapshot_of([("x.com", 0), ("y.com", 5)]))

        assert [domain for domain, _ in model.get_rows()] == ["x.com", "y.com"]

    def test_empty_snapshot(self):
        """Test an empty snapshot yields no rows."""
        model = DomainListModel()
        model.update_from_snapshot(snapshot_of([("a.com", 0)]))
        model.update_from_snapshot(MetricsSnapshot.empty())

        assert model.rowCount() == 0

    def test_clear(self):
        """Test clearing all rows."""
        model = DomainListModel()
        model.update_from_snapshot(snapshot_of([("a.com", 0), ("b.com", 1)]))

        model.clear()

        assert model.rowCount() == 0
        assert model.get_rows() == []

    def test_alignment(self):
        """Test the packets column is right aligned."""
        model = DomainListModel()
        model.update_from_snapshot(snapshot_of([("a.com", 0)]))

        alignment = model.data(model.index(0, 1), Qt.TextAlignmentRole)
        assert alignment == Qt.AlignRight | Qt.AlignVCenter

    def test_tooltip(self):
        """Test the domain column tooltip includes the count."""
        model = DomainListModel()
        model.update_from_snapshot(snapshot_of([("a.com", 0), ("a.com", 1)]))

        assert model.data(model.index(0, 0), Qt.ToolTipRole) == "a.com: 2 requests"

    def test_invalid_index(self):
        """Test out-of-range indexes return None."""
        model = DomainListModel()
        assert model.data(model.index(5, 0), Qt.DisplayRole) is None

    def test_read_only_flags(self):
        """Test items are selectable but not editable."""
        model = DomainListModel()
        model.update_from_snapshot(snapshot_of([("a.com", 0)]))

        flags = model.flags(model.index(0, 0))
        assert flags & Qt.ItemIsSelectable
        assert not (flags & Qt.ItemIsEditable)

    def test_mark_stale(self):
        """Test the stale flag is set by changes and cleared by an update."""
        model = DomainListModel()
        assert not model.is_stale

        model.mark_stale()
        assert model.is_stale

        model.update_from_snapshot(snapshot_of([("a.com", 0)]))
        assert not model.is_stale

    def test_aggregator_changes_mark_stale(self):
        """Test wiring to metrics_changed marks the model stale."""
        aggregator = TelemetryAggregator()
        model = DomainListModel()
        aggregator.metrics_changed.connect(model.mark_stale)

        aggregator.handle_event("a.com", 0)

        assert model.is_stale

    def test_ranking_change_reorders_rows(self):
        """Test a domain overtaking another moves up on the next update."""
        model = DomainListModel()
        model.update_from_snapshot(snapshot_of([("a.com", 0), ("a.com", 1), ("b.com", 2)]))
        model.update_from_snapshot(
            snapshot_of([("a.com", 0), ("a.com", 1), ("b.com", 2), ("b.com", 3), ("b.com", 4)])
        )

        assert [domain for domain, _ in model.get_rows()] == ["b.com", "a.com"]
        assert model.data(model.index(0, 1), Qt.DisplayRole) == "3"

    def test_shrinking_update(self):
        """Test fewer domains removes the surplus rows."""
        model = DomainListModel()
        model.update_from_snapshot(snapshot_of([("a.com", 0), ("b.com", 1), ("c.com", 2)]))
        model.update_from_snapshot(snapshot_of([("z.com", 0)]))

        assert model.rowCount() == 1
        assert model.data(model.index(0, 0), Qt.DisplayRole) == "z.com"

    def test_top(self):
        """Test top returns the busiest rows only."""
        model = DomainListModel()
        model.update_from_snapshot(
            snapshot_of([("a.com", 0), ("b.com", 1), ("b.com", 2), ("c.com", 3)])
        )

        assert [domain for domain, _ in model.top(2)] == ["b.com", "a.com"]
