"""AI background generation: one image per lyric scene."""

import base64
from pathlib import Path
from typing import Callable, List, Optional, Protocol, Sequence

from google import genai
from google.genai import types

from ....config import IMAGE_ASPECT_RATIO, IMAGE_MIME_TYPE, IMAGE_MODEL, get_api_key
from ....exceptions import SceneGenerationError
from ....utils.logging import get_logger
from ...models import BackgroundRecord, Scene

logger = get_logger(__name__)

ProgressFn = Callable[[int, str], None]


class ImageGenerator(Protocol):
    """Produces zero or one image reference for a block of lyrics."""

    def generate(
        self, scene_text: str, song_title: str, artist: str
    ) -> Optional[str]: ...


def build_scene_prompt(scene_text: str, song_title: str, artist: str) -> str:
    """Prompt asking for a cinematic 16:9 still inspired by the scene lyrics."""
    return (
        f'Create a music-video still for the song "{song_title}" by {artist}.\n'
        "The mood of the image is inspired by these lyrics:\n"
        "---\n"
        f"{scene_text}\n"
        "---\n"
        "Make it emotional and cinematic. Anime, realistic or abstract styles are "
        "all fine as long as the image matches the feeling of the lyrics.\n"
        "Use a 16:9 widescreen composition. Do not render any text."
    )


class GeminiImageGenerator:
    """Image generator backed by the Imagen model through google-genai."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = IMAGE_MODEL,
        output_dir: Optional[Path] = None,
    ):
        self.api_key = api_key or get_api_key()
        if not self.api_key:
            raise SceneGenerationError(
                "No API key: set GOOGLE_API_KEY or GEMINI_API_KEY"
            )
        self.model = model
        self.output_dir = Path(output_dir) if output_dir else None
        self._client = None
        self._count = 0

    @property
    def client(self):
        if self._client is None:
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    def generate(self, scene_text: str, song_title: str, artist: str) -> Optional[str]:
        """Generate one image; returns a file path or a data URI, or None."""
        prompt = build_scene_prompt(scene_text, song_title, artist)
        try:
            response = self.client.models.generate_images(
                model=self.model,
                prompt=prompt,
                config=types.GenerateImagesConfig(
                    number_of_images=1,
                    output_mime_type=IMAGE_MIME_TYPE,
                    aspect_ratio=IMAGE_ASPECT_RATIO,
                ),
            )
        except Exception as e:
            raise SceneGenerationError(f"Image request failed: {e}") from e

        if not response.generated_images:
            return None
        image_bytes = response.generated_images[0].image.image_bytes
        if not image_bytes:
            return None
        return self._store(image_bytes)

    def _store(self, image_bytes: bytes) -> str:
        self._count += 1
        if self.output_dir is None:
            encoded = base64.b64encode(image_bytes).decode("ascii")
            return f"data:{IMAGE_MIME_TYPE};base64,{encoded}"
        self.output_dir.mkdir(parents=True, exist_ok=True)
        path = self.output_dir / f"scene_{self._count:03d}.jpg"
        path.write_bytes(image_bytes)
        return str(path)


def generate_backgrounds(
    scenes: Sequence[Scene],
    generator: ImageGenerator,
    song_title: str,
    artist: str,
    track_duration: float,
    on_progress: Optional[ProgressFn] = None,
) -> List[BackgroundRecord]:
    """Request one background per scene and return the successful ones.

    A scene whose request fails or returns nothing is skipped and reported;
    there is no retry here. The last record is stretched to the end of the
    track so the final image stays up until the video ends.
    """

    def report(percent: int, message: str) -> None:
        if on_progress is not None:
            on_progress(percent, message)

    report(5, "Analysing lyrics...")
    total = len(scenes)
    report(10, f"Split lyrics into {total} scenes")

    records: List[BackgroundRecord] = []
    for i, scene in enumerate(scenes):
        percent = 10 + (i * 85) // total
        report(percent, f"Generating image for scene {i + 1}/{total}...")
        try:
            image_ref = generator.generate(scene.text, song_title, artist)
        except Exception as e:
            logger.warning(f"Scene {i + 1} generation failed: {e}")
            report(percent, f"Scene {i + 1} failed, skipped")
            continue
        if not image_ref:
            logger.warning(f"Scene {i + 1} produced no image, skipped")
            report(percent, f"Scene {i + 1} produced no image, skipped")
            continue
        records.append(
            BackgroundRecord(
                image_ref=image_ref,
                start_time=scene.start_time,
                end_time=scene.end_time,
            )
        )

    if records:
        last = records[-1]
        records[-1] = BackgroundRecord(
            image_ref=last.image_ref,
            start_time=last.start_time,
            end_time=track_duration,
        )

    logger.info(f"Generated {len(records)} backgrounds for {total} scenes")
    report(100, "Background generation complete")
    return records
