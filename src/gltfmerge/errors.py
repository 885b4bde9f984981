class MergeError(Exception):
    """Base class for every failure raised by the merge engine."""


class DocumentStructureError(MergeError):
    """An input document lacks something the merge relies on."""


class UnresolvedReferenceError(MergeError):
    """A node reference from the secondary document could not be resolved.

    Args:
        kind: What was being resolved ("node", "child", "joint", "channel").
        index: Index of the offending element in the secondary document.
        detail: Human readable explanation.
    """

    def __init__(self, kind: str, index: int, detail: str):
        self.kind = kind
        self.index = index
        self.detail = detail
        super().__init__(f"unresolved {kind} #{index}: {detail}")
