"""
Frame renderer - draws merged frames as LED dot images
Used by the preview widget and for animated GIF previews
"""

import logging
from pathlib import Path
from typing import List, Tuple

from PIL import Image, ImageDraw

from .config import playback_interval_ms
from .grid import Grid
from .project import Project
from .utils import create_background

logger = logging.getLogger(__name__)


class FrameRenderer:

    def __init__(self):
        self.cell: int = 18
        self.gap: int = 8
        self.on_color: Tuple[int, int, int] = (255, 255, 255)
        self.off_color: Tuple[int, int, int] = (40, 40, 40)
        self.background_color: Tuple[int, int, int] = (0, 0, 0)
        self.loop: int = 0

    def set_cell_size(self, cell: int, gap: int):
        self.cell = max(1, cell)
        self.gap = max(0, gap)

    def set_colors(self, on_color: Tuple[int, int, int], off_color: Tuple[int, int, int],
                   background_color: Tuple[int, int, int] = (0, 0, 0)):
        self.on_color = on_color
        self.off_color = off_color
        self.background_color = background_color

    def image_size(self, grid: Grid) -> Tuple[int, int]:
        pitch = self.cell + self.gap
        return grid.width * pitch - self.gap, grid.height * pitch - self.gap

    def render_grid(self, grid: Grid) -> Image.Image:
        """Draw every cell as a round LED, lit or unlit"""
        image = create_background(self.image_size(grid), self.background_color)
        draw = ImageDraw.Draw(image)
        pitch = self.cell + self.gap
        for y in range(grid.height):
            for x in range(grid.width):
                left = x * pitch
                top = y * pitch
                color = self.on_color if grid.rows[y][x] else self.off_color
                draw.ellipse((left, top, left + self.cell - 1, top + self.cell - 1), fill=color)
        return image

    def render_frames(self, project: Project) -> List[Image.Image]:
        return [self.render_grid(grid) for grid in project.merged_frames()]

    def get_preview_frames(self, project: Project) -> List[Tuple[Image.Image, int]]:
        """(image, duration_ms) per merged frame"""
        duration = playback_interval_ms(project.fps)
        return [(image, duration) for image in self.render_frames(project)]

    def save_gif(self, project: Project, output_path: str):
        frames = self.render_frames(project)
        if not frames:
            raise ValueError("Frame list is empty")

        output_file = Path(output_path)
        output_file.parent.mkdir(parents=True, exist_ok=True)

        frames[0].save(
            output_path,
            format='GIF',
            save_all=True,
            append_images=frames[1:],
            duration=playback_interval_ms(project.fps),
            loop=self.loop,
            optimize=False,
            disposal=2,
        )
        logger.info("Saved GIF preview %s (%d frames)", output_path, len(frames))

    def get_gif_info(self, gif_path: str) -> dict:
        """
        Get information about a GIF file

        Args:
            gif_path: Path to GIF file

        Returns:
            Dictionary with GIF information
        """
        try:
            with Image.open(gif_path) as gif:
                total_duration = 0
                for frame_index in range(gif.n_frames):
                    gif.seek(frame_index)
                    total_duration += gif.info.get('duration', 100)

                return {
                    'frame_count': gif.n_frames,
                    'size': (gif.width, gif.height),
                    'total_duration_ms': total_duration,
                    'loop': gif.info.get('loop', 0),
                    'file_size_bytes': Path(gif_path).stat().st_size,
                }
        except (OSError, ValueError) as e:
            raise ValueError(f"Failed to read GIF info: {str(e)}")
