from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass

# GBT link decoding error categories, in the order the readout decoder fills its
# per-link error histogram.
DEFAULT_ERROR_NAMES: tuple[str, ...] = (
    "Page data not start with expected RDH",
    "RDH is stopped, but the time is not matching the ~stop packet",
    "Page with RDH.stop does not contain diagnostic word only",
    "RDH page counters for the same RU/trigger are not continuous",
    "RDH and GBT header page counters are not consistent",
    "GBT trigger word was expected but not found",
    "GBT payload header was expected but not found",
    "GBT payload trailer was expected but not found",
    "All lanes were stopped but the page counter in not 0",
    "End of FEE data reached while not all lanes received stop",
    "Data was received for stopped lane",
    "No data was seen for lane (which was not in timeout)",
    "ChipID (on module) was different from the lane ID on the IB stave",
    "Cable data does not start with chip header or empty chip",
    "Active lanes pattern conflicts with expected for given RU type",
    "Jump in RDH_packetCounter",
    "Packet done is missing in the trailer while CRU page is not over",
    "Missing diagnostic GBT word after RDH with stop",
    "GBT word not recognized",
    "Wrong cable ID",
    "Unexpected CRU page alignment padding word",
    "ROF in future, pause decoding to synchronize",
    "Old ROF, discarding",
)


@dataclass(frozen=True)
class ErrorKind:
    index: int
    name: str


class ErrorCatalog:
    """Fixed, ordered set of error kinds; bin ``i`` of every series is kind ``i``."""

    def __init__(self, names: Iterable[str]) -> None:
        cleaned = [str(name).strip() for name in names]
        if not cleaned:
            raise ValueError("error kind catalogue must contain at least one kind")
        if any(not name for name in cleaned):
            raise ValueError("error kind names must be non-empty strings")
        self._kinds = tuple(ErrorKind(index=i, name=name) for i, name in enumerate(cleaned))

    @classmethod
    def default(cls) -> ErrorCatalog:
        return cls(DEFAULT_ERROR_NAMES)

    @classmethod
    def from_names(cls, names: Sequence[str] | None) -> ErrorCatalog:
        if not names:
            return cls.default()
        return cls(names)

    def __len__(self) -> int:
        return len(self._kinds)

    def __iter__(self) -> Iterator[ErrorKind]:
        return iter(self._kinds)

    def __getitem__(self, index: int) -> ErrorKind:
        if not 0 <= index < len(self._kinds):
            raise IndexError(f"error kind index out of range: {index}")
        return self._kinds[index]

    def name_of(self, index: int) -> str:
        return self[index].name
