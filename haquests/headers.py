"""An HTTP header collection that keeps duplicate names."""


class Headers:
    """Header fields keyed by name, case preserved and case-sensitive.

    Several values may share a name. ``build`` and ``items`` list fields
    sorted by name, with values of one name in the order they were added.
    """

    def __init__(self):
        self._fields = []

    def __len__(self):
        return len(self._fields)

    def add(self, key, value):
        """Add a field, keeping any existing fields of the same name."""
        self._fields.append((key, value))

    def set(self, key, value):
        """Replace every field named ``key`` with a single one."""
        self.remove(key)
        self.add(key, value)

    def get(self, key):
        """Return the first value for ``key``, or "" when there is none."""
        return next(iter(self.get_all(key)), "")

    def get_all(self, key):
        """Return every value for ``key`` in the order added."""
        return [value for name, value in self._fields if name == key]

    def has(self, key):
        return any(name == key for name, _ in self._fields)

    def remove(self, key):
        """Remove every field named ``key``."""
        self._fields = [item for item in self._fields if item[0] != key]

    def parse(self, header_section):
        """Add the ``Name: value`` lines of ``header_section``.

        Blank lines and lines without a colon are skipped; values are
        stripped of surrounding spaces and tabs.
        """
        for line in header_section.split("\n"):
            line = line.removesuffix("\r")
            if not line:
                continue
            key, colon, value = line.partition(":")
            if colon:
                self.add(key, value.strip(" \t"))
        return self

    def items(self):
        """Return (name, value) pairs sorted by name."""
        return sorted(self._fields, key=lambda item: item[0])

    def build(self):
        """Return the fields as ``Name: value`` lines, each ending in CRLF."""
        return "".join(f"{key}: {value}\r\n" for key, value in self.items())