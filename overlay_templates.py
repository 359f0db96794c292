"""
Evaluate overlay text formats such as "%WALLPAPER1% - %DATEFMT%".

Placeholders are enclosed in percent signs and matched case-insensitively.
Per-wallpaper placeholders take a 1-based screen number; numbers outside the
range of wallpapers fall back to the first one.

  %DATE% %DATEFMT% %TIME% %DAYOFWEEK%
  %USERNAME% %MACHINENAME% %OSVERSION%
  %SYSTEMRUNTIME% %SYSTEMRUNTIMEFMT%
  %SYSTEMSTARTTIME% %SYSTEMSTARTTIMED% %SYSTEMSTARTTIMEDFMT%
  %LB%                          line break
  %WALLPAPERn% %WALLPAPERFILEn% %WALLPAPERPATHn%
  %CAPTIONn% %ARTISTn%          EXIF caption / artist of the image
"""

import getpass
import platform
import re
import time
from datetime import datetime, timedelta
from pathlib import Path
from typing import Sequence

import piexif

from wallpaper_specs import WallpaperSpec

PER_WALLPAPER = re.compile(r"^(WALLPAPERFILE|WALLPAPERPATH|WALLPAPER|CAPTION|ARTIST)(\d+)$")


def xp_decode(raw) -> str:
    """Decode Windows XP-style UTF-16LE EXIF value (bytes or tuple of ints)."""
    if isinstance(raw, (list, tuple)):
        raw = bytes(raw)
    return raw.decode("utf-16-le").rstrip("\x00")


def read_exif_info(filepath: Path) -> dict:
    try:
        ifd = piexif.load(str(filepath)).get("0th", {})
    except (piexif.InvalidImageDataError, OSError, ValueError):
        return {}
    info = {}
    raw = ifd.get(piexif.ImageIFD.XPComment)
    if raw:
        info["caption"] = xp_decode(raw)
    raw = ifd.get(piexif.ImageIFD.ImageDescription)
    if raw:
        info["description"] = raw.decode("utf-8", errors="replace").rstrip("\x00")
    raw = ifd.get(piexif.ImageIFD.Artist)
    if raw:
        info["artist"] = raw.decode("utf-8", errors="replace").rstrip("\x00")
    return info


def _format_runtime(runtime: timedelta) -> str:
    hours, rest = divmod(runtime.seconds, 3600)
    minutes, seconds = divmod(rest, 60)
    if runtime.days > 0:
        return f"{runtime.days}.{hours:02}:{minutes:02}:{seconds:02}"
    return f"{hours:02}:{minutes:02}:{seconds:02}"


def _format_runtime_long(runtime: timedelta) -> str:
    hours, rest = divmod(runtime.seconds, 3600)
    minutes = rest // 60
    if runtime.days > 0:
        return f"{runtime.days} days, {hours} hours, {minutes} minutes"
    return f"{hours} hours, {minutes} minutes"


def _wallpaper_value(kind: str, number: int, wallpapers: Sequence[WallpaperSpec]) -> str:
    if not wallpapers:
        return ""
    if number <= 0 or number > len(wallpapers):
        number = 1
    path = wallpapers[number - 1].image_path
    if path is None:
        return ""

    if kind == "WALLPAPER":
        return path.stem
    if kind == "WALLPAPERFILE":
        return path.name
    if kind == "WALLPAPERPATH":
        return str(path)

    info = read_exif_info(path)
    if kind == "CAPTION":
        return info.get("caption") or info.get("description", "")
    return info.get("artist", "")


def evaluate_parameter(name: str, wallpapers: Sequence[WallpaperSpec],
                       now: datetime, uptime: timedelta) -> str:
    name = name.upper()
    start = now - uptime

    if name == "DATE":
        return now.strftime("%d.%m.%y")
    if name == "DATEFMT":
        return f"{now:%B} {now.day}, {now:%Y}"
    if name == "TIME":
        return now.strftime("%I:%M:%S")
    if name == "DAYOFWEEK":
        return now.strftime("%A")
    if name == "USERNAME":
        return getpass.getuser()
    if name == "MACHINENAME":
        return platform.node()
    if name == "OSVERSION":
        return platform.platform()
    if name == "SYSTEMRUNTIME":
        return _format_runtime(uptime)
    if name == "SYSTEMRUNTIMEFMT":
        return _format_runtime_long(uptime)
    if name == "SYSTEMSTARTTIME":
        return start.strftime("%I:%M:%S")
    if name == "SYSTEMSTARTTIMED":
        return start.strftime("%d.%m.%y, %I:%M:%S")
    if name == "SYSTEMSTARTTIMEDFMT":
        return f"{start:%B} {start.day}, {start:%Y %I:%M:%S}"
    if name == "LB":
        return "\n"

    match = PER_WALLPAPER.match(name)
    if match:
        return _wallpaper_value(match.group(1), int(match.group(2)), wallpapers)
    return ""


def evaluate_template(template: str, wallpapers: Sequence[WallpaperSpec],
                      now: datetime | None = None,
                      uptime: timedelta | None = None) -> str:
    """Return `template` with every %PARAMETER% replaced by its value."""
    if now is None:
        now = datetime.now()
    if uptime is None:
        uptime = timedelta(seconds=int(time.monotonic()))

    pieces = []
    param_start = None
    for i, char in enumerate(template):
        if char == "%":
            if param_start is None:
                param_start = i
            else:
                pieces.append(evaluate_parameter(template[param_start + 1:i], wallpapers, now, uptime))
                param_start = None
        elif param_start is None:
            pieces.append(char)
    return "".join(pieces)


def resolve_overlay_texts(overlays, wallpapers, now=None) -> list[str | None]:
    """Evaluate every overlay's format; None entries stay None."""
    return [
        None if overlay is None else evaluate_template(overlay.format, wallpapers, now)
        for overlay in overlays
    ]
