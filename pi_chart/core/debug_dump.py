#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Debug dump of one render pass.

Replays the session against a RecordingSurface and writes the draw
commands plus the window metadata as JSON, for offline inspection of where
every gridline, label and marker landed.
"""
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from .chart_session import ChartSession
from .surface import RecordingSurface

log = logging.getLogger(__name__)


def _to_iso_utc(ts: float) -> str:
    return datetime.fromtimestamp(ts, tz=timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def dump_render_commands(session: ChartSession, out_path: str | Path,
                         viewport_width: Optional[float] = None) -> Path:
    surface = RecordingSurface()
    report = session.render(surface, viewport_width)
    window = session.store.window_bounds()
    payload = {
        "timeframe": session.timeframe.name,
        "account": session.account,
        "window": None if window is None else {"start": _to_iso_utc(window[0]), "end": _to_iso_utc(window[1])},
        "samples": len(session.store.samples),
        "events": len(session.events),
        "report": {
            "width": report.width,
            "height": report.height,
            "samples_drawn": report.samples_drawn,
            "markers": {d.value: n for d, n in report.markers.items()},
            "events_dropped": report.events_dropped,
        },
        "commands": surface.to_dicts(),
    }
    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    with out.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)
    log.info(f"[debug_dump] wrote {len(payload['commands'])} draw commands to {out}")
    return out
