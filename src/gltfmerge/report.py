from __future__ import annotations
from dataclasses import dataclass, field


@dataclass
class DroppedNode:
    index: int  # index in the secondary document
    reason: str


@dataclass
class DroppedChild:
    parent: str  # name of the node that declared the child
    child: int  # secondary-local index of the child
    reason: str


@dataclass
class DroppedChannel:
    animation: int  # index of the animation in the secondary document
    channel: int  # index of the channel inside that animation
    hint: str | None
    reason: str


@dataclass
class MergeReport:
    """What a merge appended and what it had to leave out."""

    appended: dict[str, int] = field(default_factory=dict)
    dropped_nodes: list[DroppedNode] = field(default_factory=list)
    dropped_children: list[DroppedChild] = field(default_factory=list)
    dropped_channels: list[DroppedChannel] = field(default_factory=list)
    attachment_node: int | None = None
    timings: dict[str, float] = field(default_factory=dict)  # seconds per pass

    def count(self, category: str, n: int) -> None:
        self.appended[category] = self.appended.get(category, 0) + n

    @property
    def clean(self) -> bool:
        return not (
            self.dropped_nodes or self.dropped_children or self.dropped_channels
        )

    def summary(self) -> str:
        appended = ", ".join(f"{k}={v}" for k, v in self.appended.items() if v)
        return (
            f"appended [{appended or 'nothing'}]; dropped "
            f"{len(self.dropped_nodes)} node(s), "
            f"{len(self.dropped_children)} child reference(s), "
            f"{len(self.dropped_channels)} channel(s)"
        )
