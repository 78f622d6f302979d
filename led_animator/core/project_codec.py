"""
Project Codec - Save and load whole projects
Also reads and writes the single-layer raw bitmap interchange format
"""

import json
import logging
import math
from dataclasses import replace
from typing import Any, Dict, List, Optional

from .bitcodec import bytes_per_frame, pack_bytes, unpack_bytes
from .config import DEFAULT_CONFIG, DEFAULT_FPS, GridConfig
from .grid import Grid, overflow_from_keys, overflow_to_keys
from .keyframes import Offset, ZERO_OFFSET, clamp_offset, upsert_keyframe
from .layer_system import Layer, LayerKind
from .project import Project
from .utils import generate_layer_id, to_int

logger = logging.getLogger(__name__)


class ProjectFormatError(ValueError):
    """Raised when a project or raw bitmap document cannot be loaded."""


def _is_number(value) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def _first_positive(*values) -> Optional[int]:
    for value in values:
        if _is_number(value) and int(value) >= 1:
            return int(value)
    return None


class ProjectCodec:
    """
    Converts projects to and from JSON-compatible dictionaries

    The project format is lossless: every layer keeps its frames, overflow points,
    raw offsets and keyframes. The raw bitmap format only stores merged frames.

    Project schema:
    {
      "schema": 1,
      "meta": {"width": int, "height": int, "framesCount": int, "fps": int},
      "layers": [
         {"id": str, "name": str, "kind": "draw" | "text" | "number", "visible": bool,
          "offsets": [{"x": int, "y": int}, ...],
          "keyframes": [{"f": int, "x": int, "y": int}, ...],
          "frames": [[[0 | 1, ...], ...], ...],
          "framesExt": [["x,y", ...], ...]
         }, ...
      ],
      "selectedLayerId": str
    }
    """

    SCHEMA = 1

    # ----- Project format -----
    @staticmethod
    def serialize(project: Project) -> Dict[str, Any]:
        return {
            "schema": ProjectCodec.SCHEMA,
            "meta": {
                "width": project.config.width,
                "height": project.config.height,
                "framesCount": project.frames_count,
                "fps": project.fps,
            },
            "layers": [ProjectCodec.serialize_layer(layer) for layer in project.layers],
            "selectedLayerId": project.selected_layer_id,
        }

    @staticmethod
    def serialize_layer(layer: Layer) -> Dict[str, Any]:
        return {
            "id": layer.id,
            "name": layer.name,
            "kind": layer.kind.value,
            "visible": layer.visible,
            "offsets": [{"x": o.x, "y": o.y} for o in layer.offsets],
            "keyframes": [{"f": k.frame, "x": k.x, "y": k.y} for k in layer.keyframes],
            "frames": [grid.to_int_rows() for grid in layer.frames],
            "framesExt": [overflow_to_keys(ext) for ext in layer.frames_ext],
        }

    @staticmethod
    def frames_count_of(data: Dict[str, Any]) -> int:
        """Frame count from metadata, trying older field names before falling back to the data"""
        meta = data.get("meta") if isinstance(data.get("meta"), dict) else {}
        declared = _first_positive(
            meta.get("framesCount"),
            data.get("framesCount"),
            meta.get("frames"),
            data.get("frames_count"),
        )
        if declared is not None:
            return declared
        longest = 0
        for layer_data in data.get("layers") or []:
            if isinstance(layer_data, dict) and isinstance(layer_data.get("frames"), list):
                longest = max(longest, len(layer_data["frames"]))
        return max(1, longest)

    @staticmethod
    def deserialize(data: Dict[str, Any], config: GridConfig = DEFAULT_CONFIG,
                    default_fps: int = DEFAULT_FPS) -> Project:
        """
        Rebuild a project from a serialized dictionary

        Args:
            data: Project dictionary
            config: Live matrix dimensions; stored grids are read into these bounds
            default_fps: Used when the document has no usable fps

        Returns:
            Project with every layer sequence padded or truncated to the frame count
        """
        if not isinstance(data, dict):
            raise ProjectFormatError("Invalid project: expected an object")

        meta = data.get("meta") if isinstance(data.get("meta"), dict) else {}
        frames_count = ProjectCodec.frames_count_of(data)
        fps = _first_positive(meta.get("fps"), data.get("fps")) or default_fps

        layers: List[Layer] = []
        for layer_data in data.get("layers") or []:
            if not isinstance(layer_data, dict):
                logger.warning("Skipping malformed layer entry: %r", layer_data)
                continue
            layers.append(ProjectCodec.deserialize_layer(layer_data, frames_count, config))

        selected = data.get("selectedLayerId")
        if not any(layer.id == selected for layer in layers):
            selected = layers[0].id if layers else None

        logger.debug("Loaded project: %d layers, %d frames", len(layers), frames_count)
        return Project(config=config, frames_count=frames_count, fps=fps,
                       layers=tuple(layers), selected_layer_id=selected)

    @staticmethod
    def deserialize_layer(layer_data: Dict[str, Any], frames_count: int,
                          config: GridConfig = DEFAULT_CONFIG) -> Layer:
        name = layer_data.get("name") or "Layer"
        layer_id = layer_data.get("id")
        if not layer_id:
            layer_id = generate_layer_id(name)
            logger.warning("Layer %r has no id, assigned %s", name, layer_id)

        offsets = []
        raw_offsets = layer_data.get("offsets")
        if isinstance(raw_offsets, list):
            for entry in raw_offsets[:frames_count]:
                if isinstance(entry, dict):
                    offsets.append(clamp_offset(
                        Offset(to_int(entry.get("x")), to_int(entry.get("y"))), config))
                else:
                    offsets.append(ZERO_OFFSET)

        keyframes = ()
        raw_keyframes = layer_data.get("keyframes")
        if isinstance(raw_keyframes, list):
            for entry in raw_keyframes:
                if not isinstance(entry, dict):
                    continue
                frame = to_int(entry.get("f", entry.get("frame")), -1)
                if not 0 <= frame < frames_count:
                    continue
                off = clamp_offset(Offset(to_int(entry.get("x")), to_int(entry.get("y"))), config)
                keyframes = upsert_keyframe(keyframes, frame, off.x, off.y)

        frames = []
        raw_frames = layer_data.get("frames")
        if isinstance(raw_frames, list):
            for grid_data in raw_frames[:frames_count]:
                if isinstance(grid_data, list):
                    frames.append(Grid.from_int_rows(grid_data, config))
                else:
                    frames.append(Grid.empty(config))

        frames_ext = []
        raw_ext = layer_data.get("framesExt")
        if isinstance(raw_ext, list):
            for keys in raw_ext[:frames_count]:
                frames_ext.append(overflow_from_keys(keys if isinstance(keys, list) else []))

        if len(frames) != frames_count or len(offsets) != frames_count or len(frames_ext) != frames_count:
            logger.warning("Layer %r sequences do not match %d frames, padding", name, frames_count)

        layer = Layer(
            id=str(layer_id),
            name=str(name),
            kind=LayerKind.parse(layer_data.get("kind")),
            visible=layer_data.get("visible") is not False,
            frames=tuple(frames),
            frames_ext=tuple(frames_ext),
            offsets=tuple(offsets),
            keyframes=keyframes,
        )
        return layer.resized(frames_count, config)

    # ----- Raw bitmap format -----
    @staticmethod
    def serialize_raw(project: Project) -> Dict[str, Any]:
        """Merged frames, byte-packed; layer structure is not kept"""
        return {
            "width": project.config.width,
            "height": project.config.height,
            "fps": project.fps,
            "framesCount": project.frames_count,
            "bytesPerFrame": bytes_per_frame(project.config),
            "frames": [pack_bytes(grid) for grid in project.merged_frames()],
        }

    @staticmethod
    def deserialize_raw(data: Dict[str, Any], config: GridConfig = DEFAULT_CONFIG,
                        default_fps: int = DEFAULT_FPS) -> Project:
        """Rebuild a single draw layer from byte-packed frames"""
        if not ProjectCodec.is_raw_shape(data):
            raise ProjectFormatError("Invalid raw bitmap: expected width, height and frames")

        src_width = max(1, int(math.floor(data["width"])))
        src_height = max(1, int(math.floor(data["height"])))
        frames_data = data["frames"]
        declared = data.get("framesCount")
        if _is_number(declared) and declared:
            frames_count = max(1, int(math.floor(declared)))
        else:
            frames_count = max(1, len(frames_data))

        grids = []
        for f in range(frames_count):
            packed = frames_data[f] if f < len(frames_data) and isinstance(frames_data[f], list) else []
            grids.append(unpack_bytes([to_int(b) for b in packed], src_width, src_height, config))

        fps = _first_positive(data.get("fps")) or default_fps
        layer = Layer.create("Imported Draw", LayerKind.DRAW, frames_count, config)
        layer = replace(layer, frames=tuple(grids))

        if src_width != config.width or src_height != config.height:
            logger.warning("Raw bitmap is %dx%d, importing into %dx%d",
                           src_width, src_height, config.width, config.height)
        return Project.from_single_layer(layer, fps, config)

    # ----- Shape detection -----
    @staticmethod
    def is_project_shape(data: Any) -> bool:
        return isinstance(data, dict) and (isinstance(data.get("layers"), list) or data.get("schema") == 1)

    @staticmethod
    def is_raw_shape(data: Any) -> bool:
        return (
            isinstance(data, dict)
            and isinstance(data.get("frames"), list)
            and _is_number(data.get("width"))
            and _is_number(data.get("height"))
        )

    # ----- Text and files -----
    @staticmethod
    def dumps(data: Dict[str, Any]) -> str:
        return json.dumps(data, ensure_ascii=False)

    @staticmethod
    def loads(text: str, config: GridConfig = DEFAULT_CONFIG, default_fps: int = DEFAULT_FPS) -> Project:
        """
        Parse a project or raw bitmap document

        Raises:
            ProjectFormatError: Not JSON, or neither shape matches
        """
        try:
            data = json.loads(text)
        except (TypeError, ValueError) as e:
            raise ProjectFormatError(f"Invalid JSON: {e}")

        if ProjectCodec.is_project_shape(data):
            return ProjectCodec.deserialize(data, config, default_fps)
        if ProjectCodec.is_raw_shape(data):
            return ProjectCodec.deserialize_raw(data, config, default_fps)
        raise ProjectFormatError("Document is neither a project nor a raw bitmap")

    @staticmethod
    def save_to_file(data: Dict[str, Any], file_path: str):
        with open(file_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, ensure_ascii=False)

    @staticmethod
    def load_from_file(file_path: str, config: GridConfig = DEFAULT_CONFIG,
                       default_fps: int = DEFAULT_FPS) -> Project:
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                text = f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise ProjectFormatError(f"Cannot read {file_path}: {e}")
        return ProjectCodec.loads(text, config, default_fps)
