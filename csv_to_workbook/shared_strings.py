"""Document-scoped shared string table."""


class SharedStringTable:
    """Append-only store mapping text to a stable integer id.

    Ids are assigned in first-seen order starting at 0 and never change for
    the lifetime of the owning document. Lookups are a linear scan with an
    exact, case-sensitive comparison; the table is only used for the small
    summary sheet, bulk data cells are written inline.
    """

    def __init__(self, items=None):
        self._items = []
        self.count = 0
        for text in items or []:
            if text not in self._items:
                self._items.append(text)

    def intern(self, text: str) -> int:
        """Return the id of ``text``, adding it to the table if it is new."""
        self.count += 1
        for index, item in enumerate(self._items):
            if item == text:
                return index
        self._items.append(text)
        return len(self._items) - 1

    def lookup(self, index: int) -> str:
        if index < 0:
            raise IndexError(f"shared string id {index} is out of range")
        return self._items[index]

    def __contains__(self, text):
        return text in self._items

    def __iter__(self):
        return iter(self._items)

    def __len__(self):
        return len(self._items)

    def __repr__(self):
        return f"<SharedStringTable unique={len(self._items)} count={self.count}>"
