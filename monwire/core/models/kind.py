from enum import StrEnum, auto
from functools import cache
from types import MappingProxyType
from typing import Mapping, Self, TypeVar


class MessageKind(StrEnum):
    """
    Base class for the closed set of message kinds of a monitoring domain.

    Each domain (probe traffic, core daemon traffic, ...) declares its own
    enumeration by subclassing MessageKind. The value of every member is its
    canonical wire name, so `auto()` produces the member name unchanged.

    Every domain must declare an `UNDEFINED` member. It marks a frame that
    could not be parsed or whose tag is unknown, and is never produced by a
    successful parse.
    """

    @staticmethod
    def _generate_next_value_(name, start, count, last_values):
        return name

    @classmethod
    def from_str(cls, name: str) -> Self:
        """Resolve a wire name, returning UNDEFINED when nothing matches."""
        return kind_table(cls).get(name, cls["UNDEFINED"])

    def to_str(self) -> str:
        return self.value

    @property
    def undefined(self) -> bool:
        return self.name == "UNDEFINED"


K = TypeVar("K", bound=MessageKind)


@cache
def kind_table(kinds: type[K]) -> Mapping[str, K]:
    """
    Return the read-only name -> kind table of a domain enumeration.

    The table is built on first use and shared by every codec of the
    process. It has no write path.
    """
    if "UNDEFINED" not in kinds.__members__:
        raise TypeError(f"{kinds.__name__} does not declare an UNDEFINED kind")

    return MappingProxyType({kind.value: kind for kind in kinds})


class ProbeKind(MessageKind):
    """
    Messages exchanged between the monitor and its probes/drivers.
    """
    UNDEFINED       = auto()
    INIT            = auto()
    FINALIZE        = auto()
    MONITOR_VM      = auto()
    MONITOR_HOST    = auto()
    SYSTEM_HOST     = auto()
    BEACON_HOST     = auto()
    STATE_VM        = auto()
    START_MONITOR   = auto()
    STOP_MONITOR    = auto()
    LOG             = auto()


class MonitorKind(MessageKind):
    """
    Messages exchanged between the monitor and the core daemon.
    """
    UNDEFINED       = auto()
    INIT            = auto()
    FINALIZE        = auto()
    HOST_LIST       = auto()
    UPDATE_HOST     = auto()
    DEL_HOST        = auto()
    START_MONITOR   = auto()
    STOP_MONITOR    = auto()
    HOST_STATE      = auto()
    VM_STATE        = auto()
    HOST_SYSTEM     = auto()
    RAFT_STATUS     = auto()


KIND_DOMAINS: Mapping[str, type[MessageKind]] = MappingProxyType({
    "probe": ProbeKind,
    "monitor": MonitorKind,
})
