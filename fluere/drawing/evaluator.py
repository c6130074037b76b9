"""
Pixel values for a knot field: knot field + coordinates → byte index into a color table.
Each pixel depends only on the field and its own coordinates, so rows are filled in
parallel and checked for cancellation between rows.
"""
import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor

import numpy as np

from ..errors import InvalidParameterError, RenderCancelled
from .knots import KnotField
from .styles import STYLE_EVALUATORS

logger = logging.getLogger(__name__)

# Row chunks per worker; more chunks than workers evens out uneven rows
CHUNKS_PER_WORKER = 4


def evaluate(field: KnotField, xs, ys) -> np.ndarray:
    """
    Byte values for integer pixel coordinates (xs, ys broadcast together).
    Even x+y uses style1, odd uses style2 (checkerboard).
    """
    xs, ys = np.broadcast_arrays(np.asarray(xs, dtype=np.int64), np.asarray(ys, dtype=np.int64))
    out = np.empty(xs.shape, dtype=np.uint8)
    even = (xs + ys) % 2 == 0
    for style, mask in ((field.style1, even), (field.style2, ~even)):
        if mask.any():
            out[mask] = STYLE_EVALUATORS[style](
                field, xs[mask].astype(np.float64), ys[mask].astype(np.float64)
            )
    return out


def pixel_value(field: KnotField, x: int, y: int) -> int:
    """Value (0-255) of a single pixel."""
    return int(evaluate(field, [x], [y])[0])


def _row_chunks(height: int, n_chunks: int) -> list[range]:
    size = max(1, -(-height // n_chunks))
    return [range(start, min(start + size, height)) for start in range(0, height, size)]


def fill_pixels(
    field: KnotField,
    *,
    workers: int = 1,
    cancel_event: threading.Event | None = None,
    out=None,
) -> np.ndarray:
    """
    Compute the whole index image: (height, width) uint8, row-major.
    - workers > 1 splits rows across a thread pool (numpy releases the GIL in the heavy ops).
    - cancel_event, when set, stops the fill between rows and raises RenderCancelled.
    - out, if given, is a caller-allocated writable buffer of width*height bytes;
      it is written only once the whole image is done.
    Returns a read-only array.
    """
    target = None
    if out is not None:
        target = np.frombuffer(memoryview(out).cast("B"), dtype=np.uint8)
        if target.size != field.width * field.height:
            raise InvalidParameterError(
                f"output buffer holds {target.size} bytes, need {field.width * field.height}",
                name="out",
                value=target.size,
            )
        if not target.flags.writeable:
            raise InvalidParameterError("output buffer is read-only", name="out")

    image = np.empty((field.height, field.width), dtype=np.uint8)
    cols = np.arange(field.width, dtype=np.int64)

    def render_rows(rows: range) -> None:
        for row in rows:
            if cancel_event is not None and cancel_event.is_set():
                raise RenderCancelled(f"fill cancelled at row {row} of {field.height}")
            image[row] = evaluate(field, cols, row)

    started = time.perf_counter()
    workers = max(1, int(workers))
    if workers == 1 or field.height == 1:
        render_rows(range(field.height))
    else:
        chunks = _row_chunks(field.height, workers * CHUNKS_PER_WORKER)
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = [pool.submit(render_rows, rows) for rows in chunks]
            for future in futures:
                future.result()
    logger.debug(
        "Filled %dx%d index image (%d knots, %d workers) in %.3fs",
        field.width, field.height, field.num_knots, workers, time.perf_counter() - started,
    )

    if target is not None:
        target[:] = image.ravel()
    image.flags.writeable = False
    return image
