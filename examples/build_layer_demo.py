"""Simple demonstration of reproducible layer building."""

import asyncio
import logging
import os
import sys
import tempfile
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, "src")

from reproducible_layer import (
    ReproducibleLayerBuilder,
    build_layer,
    read_layer_names,
    write_layer,
)

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def create_source_tree(root: Path) -> None:
    """Create a small application tree."""
    (root / "lib").mkdir(parents=True)
    (root / "app.jar").write_bytes(b"application jar")
    (root / "lib" / "util.jar").write_bytes(b"utility jar")


async def main():
    with tempfile.TemporaryDirectory() as workdir:
        src = Path(workdir) / "src"
        create_source_tree(src)

        builder = (
            ReproducibleLayerBuilder()
            .register([src / "app.jar"], "/app")
            .register([src / "lib"], "/app/lib")
        )

        first = await build_layer(builder)

        # Touch every file; the layer must not change
        for path in src.rglob("*"):
            os.utime(path, (0, 1_234_567_890))
        second = await build_layer(builder)

        logger.info(f"First build:  {first.digest}")
        logger.info(f"Second build: {second.digest}")
        logger.info(f"Reproducible: {first.data == second.data}")

        output = Path(workdir) / "layer.tar"
        await write_layer(second, output)
        for name in read_layer_names(output):
            logger.info(f"  {name}")


if __name__ == "__main__":
    asyncio.run(main())
