"""
Project snapshot - the whole animation as one immutable value
"""

from dataclasses import dataclass, field, replace
from typing import Callable, Iterable, List, Optional, Tuple

from .config import (DEFAULT_CONFIG, DEFAULT_FPS, DEFAULT_FRAMES_COUNT, SEED_LAYERS,
                     GridConfig)
from .grid import Grid
from .layer_system import Layer, LayerCompositor, LayerKind


@dataclass(frozen=True)
class Project:
    """
    Attributes:
        config: Matrix dimensions
        frames_count: Number of frames; every layer holds exactly this many
        fps: Playback rate
        layers: Layers bottom to top
        selected_layer_id: Layer that editing operations apply to
    """
    config: GridConfig = DEFAULT_CONFIG
    frames_count: int = DEFAULT_FRAMES_COUNT
    fps: int = DEFAULT_FPS
    layers: Tuple[Layer, ...] = field(default_factory=tuple)
    selected_layer_id: Optional[str] = None

    @classmethod
    def create_default(cls, config: GridConfig = DEFAULT_CONFIG,
                       frames_count: int = DEFAULT_FRAMES_COUNT, fps: int = DEFAULT_FPS) -> 'Project':
        """New project with the draw, text and number seed layers"""
        layers = tuple(
            Layer.create(name, LayerKind(kind), frames_count, config)
            for name, kind in SEED_LAYERS
        )
        return cls(config=config, frames_count=frames_count, fps=fps,
                   layers=layers, selected_layer_id=layers[0].id)

    @classmethod
    def from_single_layer(cls, layer: Layer, fps: int, config: GridConfig = DEFAULT_CONFIG) -> 'Project':
        """Project around one imported draw layer, with empty text and number companions"""
        frames_count = layer.frame_count
        companions = tuple(
            Layer.create(name, LayerKind(kind), frames_count, config)
            for name, kind in SEED_LAYERS if kind != LayerKind.DRAW.value
        )
        return cls(config=config, frames_count=frames_count, fps=fps,
                   layers=(layer,) + companions, selected_layer_id=layer.id)

    # ----- Lookup -----
    def layer(self, layer_id: Optional[str]) -> Optional[Layer]:
        for layer in self.layers:
            if layer.id == layer_id:
                return layer
        return None

    def selected_layer(self) -> Optional[Layer]:
        return self.layer(self.selected_layer_id)

    def layer_names(self) -> List[str]:
        return [layer.name for layer in self.layers]

    # ----- Transformations -----
    def with_layers(self, layers: Iterable[Layer]) -> 'Project':
        layers = tuple(layers)
        selected = self.selected_layer_id
        if not any(layer.id == selected for layer in layers):
            selected = layers[0].id if layers else None
        return replace(self, layers=layers, selected_layer_id=selected)

    def update_layer(self, layer_id: str, update: Callable[[Layer], Layer]) -> 'Project':
        return replace(self, layers=tuple(
            update(layer) if layer.id == layer_id else layer for layer in self.layers
        ))

    def update_all_layers(self, update: Callable[[Layer], Layer]) -> 'Project':
        return replace(self, layers=tuple(update(layer) for layer in self.layers))

    def resized(self, frames_count: int) -> 'Project':
        return replace(
            self,
            frames_count=frames_count,
            layers=tuple(layer.resized(frames_count, self.config) for layer in self.layers),
        )

    # ----- Output -----
    def merge(self, frame_index: int) -> Grid:
        return LayerCompositor.merge(self.layers, frame_index, self.config)

    def merged_frames(self) -> List[Grid]:
        return [self.merge(f) for f in range(self.frames_count)]

    def __repr__(self):
        return f"Project(frames={self.frames_count}, fps={self.fps}, layers={len(self.layers)})"
