"""Line reader for deletion input files."""

from pathlib import Path
from typing import Iterator

from domain.exceptions import InputFileError
from shared.logging import get_logger
from shared.types import PathLike

logger = get_logger(__name__)


class LineReader:
    """Reads a text file line by line without loading it into memory."""

    def __init__(self, path: PathLike, encoding: str = 'utf-8'):
        self.path = Path(path)
        self.encoding = encoding

    def check(self) -> None:
        """
        Fail early if the file cannot be opened.

        Raises:
            InputFileError: If the file is missing or unreadable
        """
        try:
            with open(self.path, 'r', encoding=self.encoding):
                pass
        except OSError as e:
            raise InputFileError(f"Cannot open input file {self.path}: {e}") from e

    def __iter__(self) -> Iterator[str]:
        """Yield lines with the trailing newline removed."""
        try:
            # Undecodable bytes are replaced, never raised
            with open(self.path, 'r', encoding=self.encoding, errors='replace', newline='') as f:
                logger.info(f"Reading file {self.path}")
                for line in f:
                    yield line.rstrip('\r\n')
        except OSError as e:
            raise InputFileError(f"Cannot read input file {self.path}: {e}") from e
