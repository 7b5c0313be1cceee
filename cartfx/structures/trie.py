from __future__ import annotations

"""Prefix tree used for product-name autocomplete.

insert is O(L) in the word length. suggest is O(L) to reach the prefix node
plus the characters of whatever it collects; traversal stops as soon as
`limit` words have been found, so it never walks the whole subtree for a
popular prefix.
"""
from typing import Any, Dict, List, NamedTuple, Optional, Tuple

_MISSING = object()


class TrieNode:
    __slots__ = ("children", "is_terminal", "payloads")

    def __init__(self) -> None:
        self.children: Dict[str, TrieNode] = {}
        self.is_terminal = False
        self.payloads: List[Any] = []


class Suggestion(NamedTuple):
    word: str
    payloads: List[Any]


class Trie:
    def __init__(self) -> None:
        self.root = TrieNode()
        self._words = 0

    def insert(self, word: str, payload: Any = _MISSING) -> None:
        """Add word; a payload (None included) is appended, so repeated inserts accumulate them.

        Case folding is up to the caller.
        """
        node = self.root
        for ch in word:
            child = node.children.get(ch)
            if child is None:
                child = node.children[ch] = TrieNode()
            node = child
        if not node.is_terminal:
            node.is_terminal = True
            self._words += 1
        if payload is not _MISSING:
            node.payloads.append(payload)

    def _find(self, prefix: str) -> Optional[TrieNode]:
        node = self.root
        for ch in prefix:
            node = node.children.get(ch)
            if node is None:
                return None
        return node

    def suggest(self, prefix: str, limit: int = 8) -> List[Suggestion]:
        """Words starting with prefix, depth-first, children in insertion order."""
        if limit <= 0:
            return []
        start = self._find(prefix)
        if start is None:
            return []
        out: List[Suggestion] = []
        stack: List[Tuple[TrieNode, str]] = [(start, prefix)]
        while stack and len(out) < limit:
            node, path = stack.pop()
            if node.is_terminal:
                out.append(Suggestion(path, list(node.payloads)))
            # reversed so the first-inserted child is popped first
            for ch, child in reversed(node.children.items()):
                stack.append((child, path + ch))
        return out

    def __contains__(self, word: object) -> bool:
        if not isinstance(word, str):
            return False
        node = self._find(word)
        return node is not None and node.is_terminal

    def __len__(self) -> int:
        return self._words
