from __future__ import annotations

import zlib
from dataclasses import dataclass
from pathlib import Path

import pygame  # type: ignore[import-not-found]

CARD_BACK = "cardback"


@dataclass
class Fonts:
    ui: pygame.font.Font
    small: pygame.font.Font
    big: pygame.font.Font


def placeholder_color(face: str) -> tuple[int, int, int]:
    h = zlib.crc32(face.encode("utf-8"))
    return (60 + h % 160, 60 + (h >> 8) % 160, 60 + (h >> 16) % 160)


class AssetManager:
    def __init__(self, repo_root: Path, assets_dir: Path) -> None:
        self.repo_root = repo_root
        self.assets_dir = assets_dir
        self._cache: dict[tuple[str, int, int], pygame.Surface] = {}

        pygame.font.init()
        self.fonts = Fonts(
            ui=pygame.font.SysFont(None, 28),
            small=pygame.font.SysFont(None, 20),
            big=pygame.font.SysFont(None, 44),
        )

    def face_path(self, face: str) -> Path:
        return self.assets_dir / "faces" / f"{face}.png"

    def get_face(self, face: str, size: tuple[int, int]) -> pygame.Surface:
        key = (face, size[0], size[1])
        if key in self._cache:
            return self._cache[key]

        path = self.face_path(face)
        if path.exists():
            try:
                img = pygame.image.load(path.as_posix()).convert_alpha()
                img = pygame.transform.smoothscale(img, size)
                self._cache[key] = img
                return img
            except pygame.error:
                pass

        # Fallback placeholder: a tinted tile with the face name
        fallback = pygame.Surface(size)
        if face == CARD_BACK:
            fallback.fill((40, 70, 120))
        else:
            fallback.fill(placeholder_color(face))
            label = self.fonts.small.render(face, True, (10, 10, 10))
            fallback.blit(label, label.get_rect(center=(size[0] // 2, size[1] // 2)).topleft)
        self._cache[key] = fallback
        return fallback
