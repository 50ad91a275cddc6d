"""Layer tar file reader implementation."""

import asyncio
import tarfile
from pathlib import Path
from typing import Dict, List, Optional, Union

from ..exceptions import TarReadError


class LayerTarReader:
    """Async reader for layer tar files written by the builder."""

    def __init__(self, tar_path: Union[str, Path]) -> None:
        """Initialize tar reader.

        Args:
            tar_path: Path to the layer tar file
        """
        self.tar_path = Path(tar_path)
        if not self.tar_path.exists():
            raise TarReadError(f"Tar file not found: {tar_path}")
        self._tar_file: Optional[tarfile.TarFile] = None

    async def __aenter__(self) -> "LayerTarReader":
        """Enter async context manager."""
        loop = asyncio.get_event_loop()
        try:
            self._tar_file = await loop.run_in_executor(
                None, tarfile.open, str(self.tar_path), "r"
            )
        except tarfile.TarError as e:
            raise TarReadError(f"Cannot open layer tar {self.tar_path}: {e}") from e
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit async context manager."""
        await self.close()

    async def close(self) -> None:
        """Close the tar file."""
        if self._tar_file:
            loop = asyncio.get_event_loop()
            await loop.run_in_executor(None, self._tar_file.close)
            self._tar_file = None

    async def get_members(self) -> List[tarfile.TarInfo]:
        """Get tar members in stream order.

        Raises:
            TarReadError: If the tar file is not open or is corrupt
        """
        if not self._tar_file:
            raise TarReadError("Tar file not opened")

        try:
            loop = asyncio.get_event_loop()
            return await loop.run_in_executor(None, self._tar_file.getmembers)
        except tarfile.TarError as e:
            raise TarReadError(f"Failed to list layer members: {e}") from e

    async def get_names(self) -> List[str]:
        """Get member names in stream order."""
        return [member.name for member in await self.get_members()]

    async def get_file_contents(self) -> Dict[str, bytes]:
        """Get the content of every regular file keyed by member name."""
        loop = asyncio.get_event_loop()
        members = await self.get_members()
        contents = {}
        for member in members:
            if member.isreg():
                contents[member.name] = await loop.run_in_executor(
                    None, self._extract_file_content, member
                )
        return contents

    def _extract_file_content(self, member: tarfile.TarInfo) -> bytes:
        """Extract file content from tar (sync helper).

        Raises:
            TarReadError: If file cannot be extracted
        """
        if not self._tar_file:
            raise TarReadError("Tar file not opened")

        try:
            file_obj = self._tar_file.extractfile(member)
            if file_obj is None:
                raise TarReadError(f"Could not extract {member.name}")

            with file_obj:
                return file_obj.read()
        except tarfile.TarError as e:
            raise TarReadError(f"Failed to extract {member.name}: {e}") from e


def read_layer_names(tar_path: Union[str, Path]) -> List[str]:
    """Synchronously list member names of a layer tar in stream order.

    Raises:
        TarReadError: If the file is missing or not a readable tar
    """
    try:
        with tarfile.open(tar_path, "r") as tar:
            return tar.getnames()
    except (tarfile.TarError, OSError) as e:
        raise TarReadError(f"Cannot read layer tar {tar_path}: {e}") from e
