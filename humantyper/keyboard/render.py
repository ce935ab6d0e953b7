from __future__ import annotations
import asyncio
import logging
import math
from typing import Tuple

from PIL import Image, ImageDraw

from .telemetry import KeystrokeRecorder

logger = logging.getLogger(__name__)


def _quantile(values, q):
    """Robust quantile (0..1). Returns value at the given fraction."""
    if not values:
        return 0.0
    q = min(1.0, max(0.0, float(q)))
    data = sorted(values)
    idx = q * (len(data) - 1)
    lo = int(math.floor(idx))
    hi = int(math.ceil(idx))
    if lo == hi:
        return data[lo]
    frac = idx - lo
    return data[lo] * (1 - frac) + data[hi] * frac


def _delay_to_rgb(delay, d_min, d_max):
    """
    Map a per-character delay to RGB:
      - quick  => green (60, 205, 60)
      - middle => amber (255, 190, 40)
      - long   => red   (255, 60, 60)
    """
    if d_max <= d_min:
        t = 0.0
    else:
        t = (delay - d_min) / (d_max - d_min)
    t = max(0.0, min(1.0, t))

    if t <= 0.5:
        u = t / 0.5
        c0, c1 = (60, 205, 60), (255, 190, 40)
    else:
        u = (t - 0.5) / 0.5
        c0, c1 = (255, 190, 40), (255, 60, 60)
    return tuple(int(a + (b - a) * u) for a, b in zip(c0, c1))


def _label(ch: str) -> str:
    return {" ": "_", "\n": "|", "\t": ">"}.get(ch, ch)


async def save_typing_timeline_jpeg(
    rec: KeystrokeRecorder,
    outfile: str = "typing_timeline.jpg",
    *,
    background_color: Tuple[int, int, int] = (12, 12, 14),
    bar_width: int = 6,
    chart_height: int = 240,
    canvas_margin: int = 20,
    annotate: bool = True,
) -> str:
    """
    Render the planned delay after every character as a bar chart, coloured
    from quick (green) to long (red), with a legend on the right. Failed
    deliveries are marked below the axis. Rendering runs in a worker thread.
    """
    events_snapshot = [e for e in rec.events if e.kind in ("char", "failed", "pause")]

    def _render() -> str:
        # pair each emitted/failed char with the pause that follows it
        bars = []
        pending = None
        for ev in events_snapshot:
            if ev.kind in ("char", "failed"):
                pending = ev
            elif pending is not None:
                bars.append((pending.value, ev.dt, pending.kind == "failed"))
                pending = None

        plot_width = max(200, len(bars) * bar_width)
        canvas_width = plot_width + canvas_margin * 2 + 90  # extra room for legend
        canvas_height = chart_height + canvas_margin * 2 + 30
        image = Image.new("RGB", (canvas_width, canvas_height), background_color)
        draw = ImageDraw.Draw(image)

        if not bars:
            if annotate:
                draw.text(
                    (canvas_margin, canvas_margin),
                    "No keystrokes recorded",
                    fill=(180, 180, 180),
                )
            image.save(outfile, format="JPEG", quality=92, optimize=True)
            return outfile

        delays = [dt for _, dt, _ in bars]
        d_min = _quantile(delays, 0.05)
        d_max = max(_quantile(delays, 0.95), d_min + 1e-6)
        d_top = max(delays)
        baseline = canvas_margin + chart_height

        for i, (ch, dt, failed) in enumerate(bars):
            x0 = canvas_margin + i * bar_width
            h = max(1, int(chart_height * dt / d_top))
            draw.rectangle(
                [x0, baseline - h, x0 + bar_width - 2, baseline],
                fill=_delay_to_rgb(dt, d_min, d_max),
            )
            if failed:
                draw.line(
                    [(x0, baseline + 4), (x0 + bar_width - 2, baseline + 4)],
                    fill=(200, 80, 255),
                    width=2,
                )
            elif ch in (" ", "\n") and bar_width >= 6:
                draw.text((x0, baseline + 6), _label(ch), fill=(150, 150, 150))

        legend_left = canvas_margin + plot_width + 20
        legend_top = canvas_margin
        legend_width = 18
        for i in range(chart_height):
            t = i / max(1, chart_height - 1)
            here = d_max - t * (d_max - d_min)
            draw.line(
                [
                    (legend_left, legend_top + i),
                    (legend_left + legend_width, legend_top + i),
                ],
                fill=_delay_to_rgb(here, d_min, d_max),
                width=1,
            )
        draw.rectangle(
            [
                legend_left - 1,
                legend_top - 1,
                legend_left + legend_width + 1,
                legend_top + chart_height + 1,
            ],
            outline=(200, 200, 200),
            width=1,
        )
        label_x = legend_left + legend_width + 6
        draw.text(
            (label_x, legend_top - 2), f"long\n{d_max * 1000:.0f} ms", fill=(220, 220, 220)
        )
        draw.text(
            (label_x, legend_top + chart_height - 22),
            f"quick\n{d_min * 1000:.0f} ms",
            fill=(220, 220, 220),
        )

        if annotate:
            p50 = _quantile(delays, 0.50)
            summary = (
                f"Chars: {len(bars)} | delay ms min {min(delays) * 1000:.0f} | "
                f"p50 {p50 * 1000:.0f} | max {d_top * 1000:.0f} | "
                f"failed {sum(1 for b in bars if b[2])}"
            )
            draw.text(
                (canvas_margin, canvas_height - canvas_margin - 6),
                summary,
                fill=(200, 200, 200),
            )

        image.save(outfile, format="JPEG", quality=92, optimize=True)
        return outfile

    outfile_path = await asyncio.to_thread(_render)
    logger.debug("Typing timeline saved to %s", outfile_path)
    return outfile_path
