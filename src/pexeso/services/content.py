from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from jsonschema import Draft202012Validator

from pexeso.engine.types import FaceId


class ContentError(RuntimeError):
    pass


def _load_json(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ContentError(f"Missing content file: {path}") from e
    except json.JSONDecodeError as e:
        raise ContentError(f"Invalid JSON in {path}: {e}") from e


def validate_json(instance: object, schema: object, *, context: str) -> None:
    validator = Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(instance), key=lambda e: [str(p) for p in e.path])
    if errors:
        lines = [f"Schema validation failed for {context}:"]
        for err in errors[:10]:
            loc = "/".join(str(p) for p in err.absolute_path)
            lines.append(f"- {loc}: {err.message}")
        raise ContentError("\n".join(lines))


def _require_int(obj: Mapping[str, object], key: str) -> int:
    v = obj.get(key)
    if not isinstance(v, int):
        raise ContentError(f"Expected int for {key}")
    return v


@dataclass(frozen=True)
class GameConfig:
    faces: tuple[FaceId, ...]
    rows: int
    cols: int
    hide_delay: float = 2.0

    @property
    def deck_size(self) -> int:
        return len(self.faces) * 2


class ContentService:
    def __init__(self, data_dir: Path, schema_dir: Path) -> None:
        self._data_dir = data_dir
        self._schema_dir = schema_dir

    def load_game_config(self, filename: str = "game.json") -> GameConfig:
        path = self._data_dir / filename
        schema = _load_json(self._schema_dir / "game.schema.json")
        raw = _load_json(path)
        validate_json(raw, schema, context=str(path))
        if not isinstance(raw, dict):
            raise ContentError(f"{filename} must be an object")

        faces_raw = raw.get("faces")
        grid = raw.get("grid")
        if not isinstance(faces_raw, list) or not isinstance(grid, dict):
            raise ContentError(f"{filename} needs faces and grid")
        faces = tuple(str(f) for f in faces_raw)
        rows = _require_int(grid, "rows")
        cols = _require_int(grid, "cols")
        # Schema can't express the cross-field rule: every slot holds one card.
        if rows * cols != len(faces) * 2:
            raise ContentError(
                f"Grid {rows}x{cols} holds {rows * cols} cards but {len(faces)} faces need {len(faces) * 2}."
            )
        delay = raw.get("hide_delay", 2.0)
        if not isinstance(delay, (int, float)):
            raise ContentError("hide_delay must be number")
        return GameConfig(faces=faces, rows=rows, cols=cols, hide_delay=float(delay))

    def validate_all(self) -> None:
        # Load is validation (schema + parse)
        _ = self.load_game_config()
