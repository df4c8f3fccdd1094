"""
Per-call registry of reference identities on the current descent path.
"""

# Classes --------------------------------------------------------------------------------------------------------------

class CycleTracker:
    """
    Track reference identities together with the depth they were entered at.

    The tracker holds exactly the references on the path from the root to the
    node being rendered: before each check, entries registered at the current
    depth or deeper are forgotten, so siblings and shared acyclic references are
    expanded each time, and only a true ancestor reports a cycle.

    One tracker serves one top-level value and is discarded afterwards.

    Example:
        >>> tracker = CycleTracker()
        >>> tracker.visit(1001, depth=0)
        False
        >>> tracker.visit(1001, depth=1)
        True
    """

    __slots__ = ("_visited",)

    def __init__(self) -> None:
        self._visited: dict[int, int] = {}

    def __contains__(self, identity: int) -> bool:
        return identity in self._visited

    def __len__(self) -> int:
        return len(self._visited)

    def forget_from(self, depth: int) -> None:
        """Drop every identity registered at `depth` or deeper."""
        stale = [identity for identity, entered in self._visited.items() if entered >= depth]
        for identity in stale:
            del self._visited[identity]

    def visit(self, identity: int, depth: int) -> bool:
        """
        Register `identity` at `depth` unless it is an ancestor already.

        Returns:
            bool: True if the identity is on the current path (a cycle), in which case
            the caller must not descend; False once it has been registered.
        """
        self.forget_from(depth)
        if identity in self._visited:
            return True
        self._visited[identity] = depth
        return False

    def clear(self) -> None:
        self._visited.clear()
