"""Still-frame extraction through an external ffmpeg binary."""

from __future__ import annotations

import subprocess
from pathlib import Path

from ..core.errors import ScreenshotError
from ..utils.logging import get_logger

LOGGER = get_logger(__name__)


def screenshot_path(video: Path) -> Path:
    """``episode.mp4`` -> ``episode.png`` in the same directory."""
    return video.with_suffix(".png")


class ScreenshotGenerator:
    def __init__(self, ffmpeg_bin: str = "ffmpeg", *, timeout: float | None = 300.0) -> None:
        self.ffmpeg_bin = ffmpeg_bin
        self.timeout = timeout

    def command(self, video: Path, at_second: int, output: Path) -> list[str]:
        return [
            self.ffmpeg_bin,
            "-i",
            str(video),
            "-ss",
            str(at_second),
            "-vframes",
            "1",
            "-y",
            str(output),
        ]

    def capture(self, video: Path, at_second: int) -> Path:
        output = screenshot_path(video)
        if output.exists():
            LOGGER.info(
                "Screenshot already exists, skipping ffmpeg",
                extra={"event": "screenshot.skip", "path": str(output)},
            )
            return output

        cmd = self.command(video, at_second, output)
        LOGGER.debug("Running ffmpeg", extra={"event": "screenshot.run", "command": cmd})
        try:
            subprocess.run(cmd, capture_output=True, text=True, timeout=self.timeout, check=True)
        except FileNotFoundError as exc:
            raise ScreenshotError(
                "ffmpeg binary not found", details={"ffmpeg_bin": self.ffmpeg_bin}
            ) from exc
        except subprocess.TimeoutExpired as exc:
            raise ScreenshotError(
                "ffmpeg timed out", details={"video": str(video), "timeout": self.timeout}
            ) from exc
        except subprocess.CalledProcessError as exc:
            raise ScreenshotError(
                "ffmpeg failed",
                details={
                    "video": str(video),
                    "returncode": exc.returncode,
                    "stderr": (exc.stderr or "")[-2000:],
                },
            ) from exc

        if not output.exists() or output.stat().st_size == 0:
            raise ScreenshotError(
                "ffmpeg produced no image", details={"video": str(video), "output": str(output)}
            )
        LOGGER.info(
            "Screenshot captured",
            extra={"event": "screenshot.captured", "path": str(output), "second": at_second},
        )
        return output


__all__ = ["ScreenshotGenerator", "screenshot_path"]
