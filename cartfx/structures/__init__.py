"""General-purpose data structures backing the rate cache and product search."""

from .lru import LRUCache
from .sorting import merge_sort, natural_order
from .trie import Suggestion, Trie, TrieNode

__all__ = [
    "LRUCache",
    "Suggestion",
    "Trie",
    "TrieNode",
    "merge_sort",
    "natural_order",
]
