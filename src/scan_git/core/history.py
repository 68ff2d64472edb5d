"""Walk every commit reachable from a head commit."""

import heapq
import itertools
from typing import Iterator, List, Optional, Set, Tuple

from scan_git.core.object_reader import CommitRecord, ObjectGraphReader


class HistoryWalker:
    """Lazy traversal of a commit DAG, newest author date first.

    Each reachable commit is yielded exactly once, however many paths lead
    to it. Commits with equal author dates come out in discovery order, so
    the sequence is deterministic for a given repository state.
    """

    def __init__(self, reader: ObjectGraphReader):
        self.reader = reader

    def walk(self, head_sha: Optional[str]) -> Iterator[CommitRecord]:
        """Yield the commits reachable from ``head_sha``.

        Every call starts a fresh traversal. Nothing is yielded for a None
        head (an unborn branch).

        Raises:
            ObjectReadError: If any commit on the way cannot be read
        """
        if head_sha is None:
            return

        counter = itertools.count()
        queue: List[Tuple[int, int, CommitRecord]] = []
        seen: Set[str] = {head_sha}

        head = self.reader.commit(head_sha)
        heapq.heappush(queue, (-head.authored_date, next(counter), head))

        while queue:
            _, _, commit = heapq.heappop(queue)
            for parent_sha in commit.parents:
                if parent_sha in seen:
                    continue
                seen.add(parent_sha)
                parent = self.reader.commit(parent_sha)
                heapq.heappush(queue, (-parent.authored_date, next(counter), parent))
            yield commit
