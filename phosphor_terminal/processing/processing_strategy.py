"""
Execution strategies for the terminal effect.

The same visual intent has two renditions:
- SequentialEffect: multi-pass CPU pipeline (palette ramp, tone, bloom,
  scanlines, optional lens distortion)
- UnifiedEffect: single per-pixel pass dispatched on a GPU backend, then
  the same optional lens distortion

EffectContext picks one based on available hardware and falls back to the
sequential pipeline if the GPU path fails.
"""

from abc import ABC, abstractmethod
from typing import Optional, Tuple
import numpy as np

from ..config import settings
from ..utils.errors import GPUError, format_user_error
from ..utils.logger import get_logger
from .buffers import as_rgba, ensure_same_shape
from .parameters import EffectParameters
from .pipeline import apply_lens_distortion, apply_palette_style

logger = get_logger(__name__)


class StyleEffect(ABC):
    """Abstract base class for terminal effect strategies."""

    @abstractmethod
    def apply(self, image: np.ndarray, params: EffectParameters) -> np.ndarray:
        """
        Render the effect.

        Args:
            image: Decoded RGBA (or RGB) uint8 image.
            params: Effect parameters.

        Returns:
            New (H, W, 4) uint8 image.
        """
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """Check if this strategy can run on the current machine."""
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the name of this strategy."""
        pass


class SequentialEffect(StyleEffect):
    """Multi-pass CPU pipeline."""

    def __init__(self, workers: Optional[int] = None):
        self._workers = workers

    @property
    def name(self) -> str:
        return "sequential"

    def is_available(self) -> bool:
        return True  # CPU is always available

    def apply(self, image: np.ndarray, params: EffectParameters) -> np.ndarray:
        result = apply_palette_style(image, params, workers=self._workers)
        if params.lens_enabled:
            result = apply_lens_distortion(result, params.curvature, params.vignette_intensity)
        return result


class UnifiedEffect(StyleEffect):
    """Single-pass shader on the GPU engine, followed by the optional lens stage."""

    def __init__(self):
        self._engine = None
        self._available = None

    @property
    def name(self) -> str:
        return "unified"

    def is_available(self) -> bool:
        if self._available is None:
            try:
                from ..utils.gpu import has_gpu_engine
                self._available = has_gpu_engine()
            except Exception as e:
                logger.debug("GPU probe failed: %s", e)
                self._available = False
        return self._available

    def _get_engine(self):
        if self._engine is None:
            from ..utils.gpu import get_gpu_engine
            self._engine = get_gpu_engine()
        if self._engine is None:
            raise GPUError("No GPU backend available for the unified pass")
        return self._engine

    def apply(self, image: np.ndarray, params: EffectParameters) -> np.ndarray:
        source = as_rgba(image, step="unified_pass")
        params = params.clamped()
        result = self._get_engine().process_unified(
            source, params.contrast, params.brightness, params.color_shift
        )
        result = ensure_same_shape(source, result, "unified_pass")
        if params.lens_enabled:
            result = apply_lens_distortion(result, params.curvature, params.vignette_intensity)
        return result


class EffectContext:
    """
    Selects and runs an effect strategy.

    A failing GPU backend is reported once; afterwards the context stays on
    the sequential strategy.
    """

    def __init__(
        self,
        prefer_unified: bool = settings.PREFER_GPU,
        sequential: Optional[StyleEffect] = None,
        unified: Optional[StyleEffect] = None,
    ):
        """
        Args:
            prefer_unified: Use the GPU strategy when it is available.
            sequential: Override for the CPU strategy.
            unified: Override for the GPU strategy.
        """
        self._sequential = sequential or SequentialEffect()
        self._unified = unified or UnifiedEffect()
        self._prefer_unified = prefer_unified
        self._unified_failed = False

    def get_strategy(self) -> StyleEffect:
        """Get the best available strategy."""
        if self._prefer_unified and not self._unified_failed and self._unified.is_available():
            return self._unified
        return self._sequential

    def process(
        self,
        image: np.ndarray,
        params: Optional[EffectParameters] = None,
    ) -> Tuple[np.ndarray, str]:
        """
        Render with automatic fallback.

        Returns:
            Tuple of (rendered RGBA uint8 image, strategy name used).
        """
        params = params or EffectParameters()
        strategy = self.get_strategy()

        try:
            return strategy.apply(image, params), strategy.name
        except GPUError as e:
            if strategy is not self._unified:
                raise
            self._unified_failed = True
            logger.warning(
                "Unified pass unavailable, falling back to sequential pipeline: %s",
                format_user_error(e),
            )
            return self._sequential.apply(image, params), f"{self._sequential.name} (fallback)"
