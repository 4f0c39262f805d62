"""
GPU Shader Loader - Compiles and caches WGSL shaders.

Shaders live next to this module in ``shaders/<name>.wgsl`` and are
compiled once per process on the active wgpu device.
"""

import os
from typing import Any, Dict
from .logger import get_logger

logger = get_logger(__name__)

SHADER_DIR = os.path.join(os.path.dirname(__file__), "shaders")


class ShaderLoader:
    """On-demand WGSL shader compiler with caching."""

    _cache: Dict[str, Any] = {}

    @classmethod
    def get_shader_path(cls, shader_name: str) -> str:
        return os.path.join(SHADER_DIR, f"{shader_name}.wgsl")

    @classmethod
    def shader_exists(cls, shader_name: str) -> bool:
        return os.path.exists(cls.get_shader_path(shader_name))

    @classmethod
    def read_source(cls, shader_name: str) -> str:
        path = cls.get_shader_path(shader_name)
        if not os.path.exists(path):
            raise FileNotFoundError(f"Shader not found: {path}")
        with open(path, "r", encoding="utf-8") as f:
            return f.read()

    @classmethod
    def load(cls, shader_name: str) -> Any:
        """
        Load and compile a shader by name.

        Args:
            shader_name: Name of the shader file (without .wgsl extension)

        Returns:
            Compiled wgpu shader module
        """
        if shader_name in cls._cache:
            return cls._cache[shader_name]

        code = cls.read_source(shader_name)

        from .gpu_device import GPUDevice
        gpu = GPUDevice.get()
        if not gpu.is_wgpu or not gpu.wgpu_device:
            raise RuntimeError("wgpu device required for shader compilation")

        module = gpu.wgpu_device.create_shader_module(code=code)
        cls._cache[shader_name] = module
        logger.debug("Compiled shader: %s", shader_name)
        return module

    @classmethod
    def clear_cache(cls) -> None:
        cls._cache.clear()
