"""
StickerSet: finished stickers plus main/tab images, exported as PNG entries
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Optional

from .bitmap import Bitmap

MAIN_FILENAME = "main.png"
TAB_FILENAME = "tab.png"


def sticker_filename(index: int) -> str:
    """1-based, zero-padded file name: 01.png, 02.png, ..."""
    return f"{index:02d}.png"


@dataclass
class StickerSet:
    """Final images ready for a packager"""

    stickers: list[Bitmap] = field(default_factory=list)
    main: Optional[Bitmap] = None
    tab: Optional[Bitmap] = None

    def entries(self) -> Iterator[tuple[str, bytes]]:
        """Yield (file name, PNG bytes) for every image in the set"""
        if self.main is not None:
            yield MAIN_FILENAME, self.main.encode()
        if self.tab is not None:
            yield TAB_FILENAME, self.tab.encode()
        for index, sticker in enumerate(self.stickers, start=1):
            yield sticker_filename(index), sticker.encode()

    def write(self, directory: Path) -> list[Path]:
        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)

        written = []
        for name, data in self.entries():
            path = directory / name
            path.write_bytes(data)
            written.append(path)
        return written
