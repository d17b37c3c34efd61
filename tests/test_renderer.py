from __future__ import annotations

from typing import Any
import unittest

import numpy as np

from lossplot import ChartModel, ChartStyle, SurfaceUnavailableError
from lossplot.renderer import Renderer, contiguous_true_runs
from lossplot.style import RGBA
from lossplot.surface import DrawingSurface, RasterSurface


class RecordingSurface(DrawingSurface):
    """Logs draw calls instead of rasterizing; text is 7 px per character."""

    char_width = 7

    def __init__(self, width: int, height: int) -> None:
        self._width = width
        self._height = height
        self.ops: list[tuple[Any, ...]] = []
        self.released = False

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def closed(self) -> bool:
        return self.released

    def clear(self, color: RGBA) -> None:
        self.ops.append(("clear", color))

    def draw_line(self, x0: float, y0: float, x1: float, y1: float, color: RGBA, width: float = 1.0) -> None:
        self.ops.append(("line", (x0, y0, x1, y1), color, width))

    def draw_polyline(self, xs: np.ndarray, ys: np.ndarray, color: RGBA, width: float = 1.0) -> None:
        self.ops.append(("polyline", (xs.tolist(), ys.tolist()), color, width))

    def fill_rect(self, x: float, y: float, w: float, h: float, color: RGBA) -> None:
        self.ops.append(("fill_rect", (x, y, w, h), color))

    def stroke_rect(self, x: float, y: float, w: float, h: float, color: RGBA) -> None:
        self.ops.append(("stroke_rect", (x, y, w, h), color))

    def draw_text(
        self,
        x: float,
        y: float,
        text: str,
        color: RGBA,
        *,
        size_px: float,
        anchor: str = "lt",
        bold: bool = False,
        rotate_deg: int = 0,
    ) -> None:
        self.ops.append(("text", text, (x, y), anchor, rotate_deg))

    def measure_text(self, text: str, *, size_px: float, rotate_deg: int = 0) -> tuple[int, int]:
        return (len(text) * self.char_width, int(size_px))

    def pixels(self) -> np.ndarray:
        return np.zeros((self._height, self._width, 4), dtype=np.uint8)

    def close(self) -> None:
        self.released = True


class ExplodingSurface(RecordingSurface):
    def draw_polyline(self, xs: np.ndarray, ys: np.ndarray, color: RGBA, width: float = 1.0) -> None:
        raise RuntimeError("stroke failed")


def _index_of(ops: list[tuple[Any, ...]], predicate) -> list[int]:
    return [i for i, op in enumerate(ops) if predicate(op)]


class RendererOrderTests(unittest.TestCase):
    def _record(self, model: ChartModel) -> RecordingSurface:
        surface = RecordingSurface(model.width, model.height)
        Renderer(model).draw(surface)
        return surface

    def test_layers_are_drawn_back_to_front(self) -> None:
        style = ChartStyle()
        model = (
            ChartModel(600, 400)
            .set_title("Training Loss")
            .set_x_label("epoch")
            .set_y_label("loss")
            .plot([0.0, 20.0, 97.0], color=(255, 0, 0), label="train")
        )
        ops = self._record(model).ops

        self.assertEqual(ops[0], ("clear", style.background))
        grid = _index_of(ops, lambda op: op[0] == "line" and op[2] == style.grid_color)
        axes = _index_of(ops, lambda op: op[0] == "line" and op[2] == style.axis_color)
        series = _index_of(ops, lambda op: op[0] == "polyline")
        title = _index_of(ops, lambda op: op[0] == "text" and op[1] == "Training Loss")
        x_label = _index_of(ops, lambda op: op[0] == "text" and op[1] == "epoch")
        y_label = _index_of(ops, lambda op: op[0] == "text" and op[1] == "loss")
        legend_box = _index_of(ops, lambda op: op[0] == "fill_rect")
        legend_text = _index_of(ops, lambda op: op[0] == "text" and op[1] == "train")

        self.assertEqual(len(axes), 2)
        self.assertEqual(len(series), 1)
        self.assertLess(max(grid), min(axes))
        tick_labels = [i for i in range(max(axes) + 1, series[0]) if ops[i][0] == "text"]
        self.assertGreater(len(tick_labels), 0)
        self.assertLess(series[0], title[0])
        self.assertLess(title[0], x_label[0])
        self.assertLess(x_label[0], y_label[0])
        self.assertLess(y_label[0], legend_box[0])
        self.assertLess(legend_box[0], legend_text[0])
        self.assertEqual(ops[y_label[0]][4], 90)

    def test_grid_lines_follow_ticks(self) -> None:
        style = ChartStyle()
        model = ChartModel(600, 400).plot_xy([(0.0, 0.0), (97.0, 97.0)])
        ops = self._record(model).ops
        grid = [op for op in ops if op[0] == "line" and op[2] == style.grid_color]
        # ticks 0, 20, ..., 100 on both axes
        self.assertEqual(len(grid), 12)
        x_labels = [op[1] for op in ops if op[0] == "text" and op[3] == "mb"]
        self.assertEqual(x_labels, ["0", "20", "40", "60", "80", "100"])
        y_labels = [op[1] for op in ops if op[0] == "text" and op[3] == "rm"]
        self.assertEqual(y_labels, ["0", "20", "40", "60", "80", "100"])

    def test_grid_disabled_draws_no_grid_lines(self) -> None:
        style = ChartStyle()
        model = ChartModel(600, 400).show_grid(False).plot([1.0, 2.0])
        ops = self._record(model).ops
        self.assertFalse(any(op[0] == "line" and op[2] == style.grid_color for op in ops))

    def test_empty_model_only_clears(self) -> None:
        model = ChartModel(750, 500).set_title("t").set_x_label("x").plot([], label="nothing")
        ops = self._record(model).ops
        self.assertEqual([op[0] for op in ops], ["clear"])

    def test_short_series_are_skipped_and_others_kept_in_order(self) -> None:
        model = (
            ChartModel(600, 400)
            .plot([1.0, 2.0], color=(1, 1, 1))
            .plot([5.0], color=(2, 2, 2))
            .plot([3.0, 1.0, 2.0], color=(3, 3, 3))
        )
        polylines = [op for op in self._record(model).ops if op[0] == "polyline"]
        self.assertEqual([op[2][:3] for op in polylines], [(1, 1, 1), (3, 3, 3)])
        self.assertEqual([op[3] for op in polylines], [2.0, 2.0])

    def test_polyline_points_are_mapped_pixels(self) -> None:
        model = ChartModel(200, 200).plot_xy([(0.0, 0.0), (1.0, 10.0)])
        (polyline,) = [op for op in self._record(model).ops if op[0] == "polyline"]
        xs, ys = polyline[1]
        self.assertEqual(xs, [70.0, 180.0])
        self.assertEqual(ys, [150.0, 40.0])
        self.assertLess(ys[1], ys[0])


class LegendTests(unittest.TestCase):
    def test_only_labeled_series_get_entries(self) -> None:
        model = ChartModel(750, 500).plot([3.0, 2.0, 1.0], label="Training Loss").plot([2.0, 2.5, 2.2])
        self.assertTrue(model.legend_enabled)
        layout = Renderer(model).legend_layout(RasterSurface(750, 500))
        assert layout is not None
        self.assertEqual([entry.label for entry in layout.entries], ["Training Loss"])

    def test_box_geometry(self) -> None:
        style = ChartStyle()
        model = ChartModel(600, 400).plot([1.0, 2.0], label="abc").plot([2.0, 1.0], label="abcdefgh")
        surface = RecordingSurface(600, 400)
        layout = Renderer(model).legend_layout(surface)
        assert layout is not None
        rect = model.plot_rect()
        text_w = len("abcdefgh") * RecordingSurface.char_width
        self.assertEqual(layout.text_width, text_w)
        self.assertEqual(layout.width, style.legend_indicator_width + text_w + style.legend_padding)
        self.assertEqual(layout.height, 2 * style.legend_row_height + style.legend_padding)
        self.assertEqual(layout.x, rect.right - layout.width - style.legend_inset)
        self.assertEqual(layout.y, rect.top + style.legend_inset)

    def test_box_width_grows_with_longest_label(self) -> None:
        widths = []
        for label in ["a", "loss", "validation loss", "validation loss (smoothed)"]:
            model = ChartModel(600, 400).plot([1.0, 2.0], label="x").plot([2.0, 1.0], label=label)
            layout = Renderer(model).legend_layout(RasterSurface(600, 400))
            assert layout is not None
            widths.append(layout.width)
        self.assertEqual(widths, sorted(widths))
        self.assertLess(widths[0], widths[-1])

    def test_legend_not_drawn_when_disabled_or_unlabeled(self) -> None:
        for model in (
            ChartModel(600, 400).plot([1.0, 2.0], label="loss").show_legend(False),
            ChartModel(600, 400).show_legend(True).plot([1.0, 2.0]),
        ):
            surface = RecordingSurface(600, 400)
            Renderer(model).draw(surface)
            self.assertFalse(any(op[0] in {"fill_rect", "stroke_rect"} for op in surface.ops))

    def test_swatch_uses_series_color(self) -> None:
        model = ChartModel(600, 400).plot([1.0, 2.0], color=(9, 8, 7), label="loss")
        surface = RecordingSurface(600, 400)
        Renderer(model).draw(surface)
        swatches = [op for op in surface.ops if op[0] == "line" and op[2] == (9, 8, 7, 255)]
        self.assertEqual(len(swatches), 1)
        x0, y0, x1, y1 = swatches[0][1]
        self.assertEqual(y0, y1)
        self.assertEqual(x1 - x0, 20)


class SurfaceLifecycleTests(unittest.TestCase):
    def test_surface_is_released_after_render(self) -> None:
        created: list[RecordingSurface] = []

        def factory(width: int, height: int) -> RecordingSurface:
            surface = RecordingSurface(width, height)
            created.append(surface)
            return surface

        model = ChartModel(300, 200, surface_factory=factory).plot([1.0, 2.0])
        frame = model.render()
        self.assertEqual(frame.shape, (200, 300, 4))
        self.assertEqual(len(created), 1)
        self.assertTrue(created[0].released)

    def test_surface_is_released_when_drawing_fails(self) -> None:
        created: list[RecordingSurface] = []

        def factory(width: int, height: int) -> RecordingSurface:
            surface = ExplodingSurface(width, height)
            created.append(surface)
            return surface

        model = ChartModel(300, 200, surface_factory=factory).plot([1.0, 2.0])
        with self.assertRaises(RuntimeError):
            model.render()
        self.assertTrue(created[0].released)

    def test_surface_released_on_background_only_render(self) -> None:
        created: list[RecordingSurface] = []

        def factory(width: int, height: int) -> RecordingSurface:
            surface = RecordingSurface(width, height)
            created.append(surface)
            return surface

        ChartModel(300, 200, surface_factory=factory).render()
        self.assertTrue(created[0].released)

    def test_acquisition_failure_is_a_hard_error(self) -> None:
        def factory(width: int, height: int) -> RecordingSurface:
            raise MemoryError("no room")

        model = ChartModel(300, 200, surface_factory=factory).plot([1.0, 2.0])
        with self.assertRaises(SurfaceUnavailableError) as ctx:
            model.render()
        self.assertIsInstance(ctx.exception.__cause__, MemoryError)


class RunSplittingTests(unittest.TestCase):
    def test_contiguous_true_runs(self) -> None:
        mask = np.asarray([True, True, False, True, False, False, True, True, True])
        self.assertEqual(contiguous_true_runs(mask), [(0, 2), (3, 4), (6, 9)])
        self.assertEqual(contiguous_true_runs(np.asarray([], dtype=bool)), [])


if __name__ == "__main__":
    unittest.main()
