"""Qt model for the per-domain request list using model/view pattern."""

from PySide6.QtCore import QAbstractTableModel, Qt, QModelIndex, Slot

from reqmon.aligner import sorted_domains
from reqmon.models import MetricsSnapshot

HEADERS = ("Domain", "Packets", "Color")
DOMAIN_COLUMN, PACKETS_COLUMN, COLOR_COLUMN = range(len(HEADERS))


class DomainListModel(QAbstractTableModel):
    """Table model listing tracked domains, busiest first.

    The model is pull-based: metrics_changed only marks it stale, and the
    owner calls update_from_snapshot when it is about to render. Ranking is
    recomputed on each update, so the row for a given domain may move.
    """

    def __init__(self, parent=None):
        super().__init__(parent)
        self._rows = []  # [(domain, DomainSnapshot)] in display order
        self._stale = False

    @property
    def is_stale(self) -> bool:
        return self._stale

    @Slot()
    def mark_stale(self):
        """Note that the telemetry changed since the last update."""
        self._stale = True

    def rowCount(self, parent=QModelIndex()):
        return 0 if parent.isValid() else len(self._rows)

    def columnCount(self, parent=QModelIndex()):
        return 0 if parent.isValid() else len(HEADERS)

    def data(self, index, role=Qt.DisplayRole):
        """Return the text, tooltip, or alignment for a cell."""
        if not index.isValid() or not 0 <= index.row() < len(self._rows):
            return None

        domain, metric = self._rows[index.row()]
        col = index.column()

        if role == Qt.DisplayRole:
            return (domain, str(metric.packet_count), metric.color)[col]
        if role == Qt.ToolTipRole and col == DOMAIN_COLUMN:
            return f"{domain}: {metric.packet_count} requests"
        if role == Qt.TextAlignmentRole:
            if col == PACKETS_COLUMN:
                return Qt.AlignRight | Qt.AlignVCenter
            return Qt.AlignLeft | Qt.AlignVCenter
        return None

    def headerData(self, section, orientation, role=Qt.DisplayRole):
        if role != Qt.DisplayRole or orientation != Qt.Horizontal:
            return None
        return HEADERS[section] if 0 <= section < len(HEADERS) else None

    def flags(self, index):
        """Rows are selectable, never editable."""
        if not index.isValid():
            return Qt.NoItemFlags
        return Qt.ItemIsEnabled | Qt.ItemIsSelectable

    def update_from_snapshot(self, snapshot: MetricsSnapshot):
        """Sync rows to the snapshot's domains, sorted by count.

        Row count changes are announced as inserts/removals at the tail;
        everything that remains is reported through dataChanged since the
        ranking may have shuffled it.
        """
        rows = sorted_domains(snapshot.domains)
        old_count, new_count = len(self._rows), len(rows)

        if new_count < old_count:
            self.beginRemoveRows(QModelIndex(), new_count, old_count - 1)
            self._rows = self._rows[:new_count]
            self.endRemoveRows()
        elif new_count > old_count:
            self.beginInsertRows(QModelIndex(), old_count, new_count - 1)
            self._rows = self._rows + rows[old_count:]
            self.endInsertRows()

        self._rows = rows
        if rows:
            self.dataChanged.emit(
                self.index(0, 0), self.index(new_count - 1, len(HEADERS) - 1)
            )
        self._stale = False

    def clear(self):
        """Remove all rows."""
        self.update_from_snapshot(MetricsSnapshot.empty())

    def get_rows(self):
        """Get (domain, metric) pairs in display order."""
        return list(self._rows)

    def top(self, count: int):
        """Get the first ``count`` rows."""
        return self._rows[:count]
