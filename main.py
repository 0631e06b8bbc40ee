"""PySide6 entrypoint: launches the main application window from jpeg_compressor.main.

Any command-line argument is treated as an image path to preload.
"""

import sys

try:
    from jpeg_compressor.main import main
except Exception as exc:
    # Provide a clear error if imports fail due to PYTHONPATH issues
    raise RuntimeError("Failed to import jpeg_compressor. Ensure project root is on PYTHONPATH.") from exc


if __name__ == "__main__":
    sys.exit(main())
