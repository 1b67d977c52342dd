"""Class roster document offered on the login screen."""

from __future__ import annotations

from typing import Any, Mapping

from sqlmodel import Field, SQLModel


class Roster(SQLModel):
    """Ordered list of names offered on the login screen."""

    names: list[str] = Field(default_factory=list)

    def with_name(self, name: str, *, limit: int) -> "Roster | None":
        """Return a roster that includes ``name``, or None when nothing changes.

        A full roster silently refuses new names.
        """
        if name in self.names or len(self.names) >= limit:
            return None
        return Roster(names=[*self.names, name])

    @classmethod
    def from_document(cls, data: Mapping[str, Any]) -> "Roster":
        names: list[str] = []
        for raw in data.get("names") or []:
            name = str(raw)
            if name and name not in names:
                names.append(name)
        return cls(names=names)
