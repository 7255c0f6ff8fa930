"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

hasher.py
Computes content digests of pipeline artifacts with pluggable hash algorithms.

The digest of the final output file is recorded in the run statistics, so two runs
over identical inputs can be compared without diffing the files.
"""

import xxhash
from promoloader.core.errors import StageIOError
from promoloader.core.interfaces import HashAlgorithm


# Use the same way to implement and use any other hashing algorithm
class XXHashAlgorithmImpl(HashAlgorithm):
    @staticmethod
    def new():
        return xxhash.xxh64()


class FileDigestImpl:
    """
    Streams a file through a hash algorithm chunk by chunk.
    """
    CHUNK_SIZE = 1 << 20

    def __init__(self, algorithm: HashAlgorithm = None):
        self.algorithm = algorithm or XXHashAlgorithmImpl()

    def hexdigest(self, path: str) -> str:
        state = self.algorithm.new()
        try:
            with open(path, 'rb') as f:
                while True:
                    chunk = f.read(self.CHUNK_SIZE)
                    if not chunk:
                        break
                    state.update(chunk)
        except OSError as e:
            raise StageIOError(f"digest {path}: {e}") from e
        return state.hexdigest()
