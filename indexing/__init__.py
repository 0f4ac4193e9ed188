"""
BoxDB Indexing Module
=====================
Secondary index answering "how many keys hold value V" in O(1).

Components:
  - value_index: ValueCountIndex (incremental counts, zero entries kept)
"""

from indexing.value_index import ValueCountIndex

__all__ = ["ValueCountIndex"]
