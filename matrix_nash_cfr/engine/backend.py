"""
Backend abstraction for GPU/CPU computation.

Provides a unified interface for array operations that works with both:
- NumPy (CPU)
- CuPy (GPU)

Usage:
    backend = get_backend('cupy')  # or 'numpy'
    x = backend.array([1, 2, 3])
    y = backend.zeros(10)
"""

from typing import Literal
from dataclasses import dataclass
import numpy as np

# Try to import CuPy and verify CUDA is fully functional
CUPY_AVAILABLE = False
CUPY_ERROR_MSG = None
cp = None


def _ensure_cuda_in_path():
    """Ensure CUDA bin directory is in PATH (Windows fix)."""
    import os
    import sys
    if sys.platform == 'win32':
        cuda_path = os.environ.get('CUDA_PATH', '')
        if cuda_path:
            cuda_bin = os.path.join(cuda_path, 'bin')
            if cuda_bin not in os.environ.get('PATH', ''):
                os.environ['PATH'] = cuda_bin + ';' + os.environ.get('PATH', '')


def _test_cupy_functional():
    """Test that CuPy and CUDA are fully functional."""
    _ensure_cuda_in_path()
    import cupy as _cp
    arr = _cp.array([1.0, 2.0])
    # This triggers NVRTC compilation
    _ = _cp.maximum(arr, 0)
    # And this triggers cuBLAS
    _ = _cp.eye(2) @ arr
    return _cp


try:
    cp = _test_cupy_functional()
    CUPY_AVAILABLE = True
except ImportError as e:
    CUPY_ERROR_MSG = f"CuPy not installed: {e}"
except Exception as e:
    # CuPy installed but CUDA not working (missing DLLs, no GPU, etc.)
    CUPY_ERROR_MSG = f"CuPy/CUDA not functional: {e}"
    cp = None


BackendType = Literal['numpy', 'cupy']


@dataclass
class Backend:
    """
    Array backend abstraction.

    Provides consistent interface for array operations across NumPy and CuPy.
    Defaults to float64: accumulators must be reproducible at double precision.
    """
    name: BackendType
    xp: any  # numpy or cupy module

    def array(self, data, dtype=np.float64):
        """Create array from data."""
        return self.xp.array(data, dtype=dtype)

    def zeros(self, shape, dtype=np.float64):
        """Create zero-filled array."""
        return self.xp.zeros(shape, dtype=dtype)

    def full(self, shape, fill_value, dtype=np.float64):
        """Create array filled with value."""
        return self.xp.full(shape, fill_value, dtype=dtype)

    def copy(self, arr):
        """Copy array."""
        return arr.copy()

    def asnumpy(self, arr):
        """Convert to numpy array (for results)."""
        if self.name == 'cupy':
            return cp.asnumpy(arr)
        return np.asarray(arr)

    def dense_to_backend(self, numpy_array: np.ndarray):
        """
        Convert numpy array to backend array.

        Args:
            numpy_array: NumPy array

        Returns:
            Backend-compatible array
        """
        if self.name == 'numpy':
            return numpy_array
        else:
            return cp.asarray(numpy_array)

    def maximum(self, arr, val):
        """Element-wise maximum."""
        return self.xp.maximum(arr, val)

    def sum(self, arr, axis=None):
        """Sum array."""
        return self.xp.sum(arr, axis=axis)

    def matvec(self, A, x):
        """Dense matrix-vector multiply: y = A @ x"""
        return A @ x

    def dot(self, x, y) -> float:
        """Inner product as a Python float."""
        return float(self.xp.dot(x, y))

    def argmax(self, arr) -> int:
        """Index of the first maximum."""
        return int(self.xp.argmax(arr))


# Global backend cache
_backends = {}


def get_backend(name: BackendType = 'numpy') -> Backend:
    """
    Get or create a backend instance.

    Args:
        name: 'numpy' for CPU or 'cupy' for GPU

    Returns:
        Backend instance
    """
    if name in _backends:
        return _backends[name]

    if name == 'numpy':
        backend = Backend(name='numpy', xp=np)
    elif name == 'cupy':
        if not CUPY_AVAILABLE:
            raise ImportError(
                f"CuPy GPU backend not available.\n"
                f"Reason: {CUPY_ERROR_MSG}\n"
                f"Install with: pip install cupy-cuda12x (for CUDA 12)\n"
                f"Or use backend='numpy' for CPU computation."
            )
        backend = Backend(name='cupy', xp=cp)
    else:
        raise ValueError(f"Unknown backend: {name}. Use 'numpy' or 'cupy'.")

    _backends[name] = backend
    return backend


def is_cupy_available() -> bool:
    """Check if CuPy is available."""
    return CUPY_AVAILABLE
