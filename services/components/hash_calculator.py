"""
HashCalculator component for source content hashing.
"""
import hashlib
from typing import Union


class HashCalculator:
    """
    Calculates content hashes to detect changed sources.
    Uses SHA-256 for reliable change detection.

    Remote content and mirrored content must go through the same method,
    otherwise unchanged files would look changed.
    """

    @staticmethod
    def calculate_hash(content: Union[str, bytes]) -> str:
        """
        Calculates the hash of a source file's content.

        Args:
            content: File content; text is encoded as UTF-8

        Returns:
            SHA-256 hash string
        """
        if isinstance(content, str):
            content = content.encode("utf-8")
        return hashlib.sha256(content).hexdigest()
