"""
simulation/union_find.py

Disjoint-set forest over integer indices, with union by rank and path
compression.
"""


class UnionFind:
    """Disjoint sets over the indices 0..n-1."""

    def __init__(self, n: int):
        self.parent = list(range(n))
        self.rank = [0] * n

    def __len__(self) -> int:
        return len(self.parent)

    def find(self, x: int) -> int:
        root = x
        while self.parent[root] != root:
            root = self.parent[root]
        # Path compression
        while self.parent[x] != root:
            self.parent[x], x = root, self.parent[x]
        return root

    def union(self, a: int, b: int) -> bool:
        """Merge the sets containing a and b. Returns False if already merged."""
        ra = self.find(a)
        rb = self.find(b)
        if ra == rb:
            return False
        if self.rank[ra] < self.rank[rb]:
            self.parent[ra] = rb
        elif self.rank[ra] > self.rank[rb]:
            self.parent[rb] = ra
        else:
            self.parent[rb] = ra
            self.rank[ra] += 1
        return True

    def connected(self, a: int, b: int) -> bool:
        return self.find(a) == self.find(b)

    def groups(self) -> dict[int, list[int]]:
        """Map each root to its members, ordered by first member index."""
        result: dict[int, list[int]] = {}
        for i in range(len(self.parent)):
            result.setdefault(self.find(i), []).append(i)
        return result
