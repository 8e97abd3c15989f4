from typing import List
from pathlib import Path

PHOTO_SUFFIXES = (".jpg", ".jpeg", ".png")


class PhotoCollector:
    def __init__(self, suffixes=PHOTO_SUFFIXES):
        self.suffixes = tuple(s.lower() for s in suffixes)

    def collect(self, path: str) -> List[Path]:
        folder = Path(path)
        if folder.is_file():
            return [folder]
        if not folder.is_dir():
            raise FileNotFoundError(f"No such file or directory: {path}")

        photos = [p for p in folder.iterdir() if p.is_file() and p.suffix.lower() in self.suffixes]
        photos.sort(key=lambda p: p.name)
        return photos
