from __future__ import annotations

import json
import os
from pathlib import Path

# Allow headless generation (CI, terminals without a display)
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import pygame  # type: ignore[import-not-found]

from pexeso.client.pygame_app.asset_manager import CARD_BACK, placeholder_color


def _repo_root() -> Path:
    # tools/generate_placeholder_assets.py -> parents: [tools, repo_root]
    return Path(__file__).resolve().parents[1]


def generate_all() -> None:
    root = _repo_root()
    data_dir = root / "src" / "pexeso" / "data"
    faces_dir = root / "assets" / "faces"
    faces_dir.mkdir(parents=True, exist_ok=True)

    faces = json.loads((data_dir / "game.json").read_text(encoding="utf-8"))["faces"]

    pygame.init()
    pygame.font.init()
    font = pygame.font.SysFont(None, 28)

    size = (256, 256)
    for face in faces:
        surf = pygame.Surface(size)
        surf.fill((245, 240, 230))
        pygame.draw.circle(surf, placeholder_color(face), (size[0] // 2, size[1] // 2 - 12), 80)
        pygame.draw.circle(surf, (0, 0, 0), (size[0] // 2, size[1] // 2 - 12), 80, width=3)
        title = font.render(face, True, (20, 20, 20))
        surf.blit(title, title.get_rect(center=(size[0] // 2, size[1] - 28)).topleft)
        pygame.image.save(surf, (faces_dir / f"{face}.png").as_posix())

    _make_card_back(faces_dir / f"{CARD_BACK}.png", size)

    pygame.quit()
    print("Generated placeholder assets under ./assets/faces/")


def _make_card_back(path: Path, size: tuple[int, int]) -> None:
    surf = pygame.Surface(size)
    surf.fill((40, 70, 120))
    step = 24
    for x in range(-size[1], size[0], step):
        pygame.draw.line(surf, (60, 95, 150), (x, 0), (x + size[1], size[1]), 4)
    pygame.draw.rect(surf, (230, 230, 230), pygame.Rect(0, 0, *size), width=8, border_radius=12)
    pygame.image.save(surf, path.as_posix())


if __name__ == "__main__":
    generate_all()
