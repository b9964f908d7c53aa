"""Audio loading and preprocessing utilities."""

import numpy as np
import librosa
from pathlib import Path
from typing import Optional

from ..core import SampleBuffer
from ..core.constants import SILENCE_RMS


class AudioLoader:
    """Loads short recordings into mono sample buffers."""

    SUPPORTED_FORMATS = {".wav", ".mp3", ".flac", ".ogg", ".m4a", ".webm"}

    def __init__(
        self,
        target_sr: Optional[int] = None,
        mono: bool = True,
        normalize: bool = True,
        silence_rms: float = SILENCE_RMS,
    ):
        """
        Initialize AudioLoader.

        Args:
            target_sr: Target sample rate for resampling (None keeps the file's rate)
            mono: Convert to mono if True
            normalize: Normalize audio amplitude if True
            silence_rms: Audio quieter than this RMS is left unscaled, so
                near-silence is not amplified into a signal
        """
        self.target_sr = target_sr
        self.mono = mono
        self.normalize = normalize
        self.silence_rms = silence_rms

    def load(
        self,
        path: str,
        offset: float = 0.0,
        duration: Optional[float] = None,
    ) -> SampleBuffer:
        """
        Load audio file and preprocess.

        Args:
            path: Path to audio file
            offset: Start reading this many seconds in
            duration: Only read this many seconds (None for the rest)

        Returns:
            Mono SampleBuffer

        Raises:
            ValueError: If file format not supported or can't be decoded
            FileNotFoundError: If file doesn't exist
        """
        path = Path(path)

        if not path.exists():
            raise FileNotFoundError(f"Audio file not found: {path}")

        if path.suffix.lower() not in self.SUPPORTED_FORMATS:
            raise ValueError(
                f"Unsupported format: {path.suffix}. "
                f"Supported: {sorted(self.SUPPORTED_FORMATS)}"
            )

        try:
            audio, sr = librosa.load(
                str(path),
                sr=self.target_sr,
                mono=self.mono,
                offset=offset,
                duration=duration,
            )
        except Exception as e:
            raise ValueError(f"Could not decode {path.name}: {e}") from e

        if audio.ndim > 1:
            # mono=False keeps channels first; analysis needs one channel
            audio = np.mean(audio, axis=0)

        if self.normalize:
            audio = self._normalize(audio)

        return SampleBuffer(samples=audio, sample_rate=int(sr))

    def _normalize(self, audio: np.ndarray) -> np.ndarray:
        """Normalize audio to [-1, 1] range using peak normalization.

        Near-silent audio is returned unchanged.
        """
        if len(audio) == 0:
            return audio
        if np.sqrt(np.mean(np.square(audio, dtype=np.float64))) < self.silence_rms:
            return audio
        peak = np.abs(audio).max()
        if peak > 0:
            audio = audio / peak
        return audio
