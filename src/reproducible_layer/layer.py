"""Async functional style layer build operations."""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from itertools import chain
from pathlib import Path
from typing import Optional, Sequence, Tuple, Union

import aiofiles

from .core.builder import (
    ReproducibleLayerBuilder,
    expand_group,
    serialize_entries,
    sort_entries,
)
from .core.types import LayerConfig, SourceGroup
from .tar.models import ArchiveEntryRecord, LayerBlob

logger = logging.getLogger(__name__)

LayerSource = Union[ReproducibleLayerBuilder, Sequence[SourceGroup]]


async def _expand_all_groups(
    groups: Sequence[SourceGroup], executor: Optional[ThreadPoolExecutor]
) -> list[list[ArchiveEntryRecord]]:
    """Expand all groups concurrently in the executor.

    Args:
        groups: Source groups to expand
        executor: Thread pool, or None for the loop's default executor

    Returns:
        One record list per group, in group order
    """
    loop = asyncio.get_event_loop()
    tasks = [loop.run_in_executor(executor, expand_group, group) for group in groups]

    return await asyncio.gather(*tasks)


def _sort_and_serialize(
    expanded: Sequence[Sequence[ArchiveEntryRecord]], config: LayerConfig
) -> Tuple[int, bytes]:
    """Merge expanded groups, sort them and write the tar (sync helper).

    Returns:
        Number of entries written and the layer bytes
    """
    records = sort_entries(chain.from_iterable(expanded))
    return len(records), serialize_entries(records, config)


async def build_layer(
    source: LayerSource, config: Optional[LayerConfig] = None
) -> LayerBlob:
    """등록된 소스 그룹으로 재현 가능한 레이어를 비동기로 빌드합니다.

    그룹별 디렉토리 확장은 스레드 풀에서 동시에 실행되고, 정렬과 직렬화는
    하나의 순차 단계로 실행되므로 결과는 동기 빌드와 바이트 단위로 동일합니다.

    Args:
        source: ReproducibleLayerBuilder 또는 SourceGroup 목록
        config: 레이어 설정 (선택사항, builder의 설정 또는 기본값 사용)

    Returns:
        LayerBlob: tar 바이트와 원본 소스 경로 목록

    Raises:
        EnumerationError: 소스 파일을 읽거나 탐색할 수 없는 경우
        SerializationError: tar 엔트리를 쓸 수 없는 경우
        AmbiguousEntryError: 같은 이름에 서로 다른 내용이 등록된 경우

    Examples:
        # builder로 빌드
        builder = ReproducibleLayerBuilder().register(["app.jar"], "/app")
        blob = await build_layer(builder)

        # SourceGroup 목록으로 빌드
        groups = [SourceGroup.create(["./lib"], "/app/lib")]
        blob = await build_layer(groups, LayerConfig(archive_format="gnu"))
    """
    if isinstance(source, ReproducibleLayerBuilder):
        groups = source.groups
        config = config or source.config
    else:
        groups = tuple(source)
    config = config or LayerConfig()

    executor = None
    if config.max_workers:
        executor = ThreadPoolExecutor(max_workers=config.max_workers)
    try:
        expanded = await _expand_all_groups(groups, executor)
        # Sorting and serialization stay a single sequential step
        entry_count, data = await asyncio.get_event_loop().run_in_executor(
            executor, _sort_and_serialize, expanded, config
        )
    finally:
        if executor is not None:
            executor.shutdown(wait=True)

    blob = LayerBlob(
        data=data,
        source_files=[path for group in groups for path in group.source_files],
    )
    logger.info("Built layer with %d entries (%s)", entry_count, blob.digest)
    return blob


async def write_layer(blob: LayerBlob, output_path: Union[str, Path]) -> str:
    """레이어 blob을 파일로 비동기 저장합니다.

    Args:
        blob: build_layer 또는 ReproducibleLayerBuilder.build의 결과
        output_path: 저장할 tar 파일 경로 (상위 디렉토리는 자동 생성)

    Returns:
        str: 저장된 레이어의 digest (예: "sha256:abc123...")

    Examples:
        digest = await write_layer(blob, "./out/layer.tar")
        print(f"레이어 저장 완료: {digest}")
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    async with aiofiles.open(output_path, "wb") as f:
        await f.write(blob.data)

    logger.debug("Wrote %d bytes to %s", blob.size, output_path)
    return blob.digest


async def build_layer_to_file(
    source: LayerSource,
    output_path: Union[str, Path],
    config: Optional[LayerConfig] = None,
) -> LayerBlob:
    """레이어를 빌드하고 파일로 저장하는 편의 함수입니다.

    Args:
        source: ReproducibleLayerBuilder 또는 SourceGroup 목록
        output_path: 저장할 tar 파일 경로
        config: 레이어 설정 (선택사항)

    Returns:
        LayerBlob: 빌드된 레이어

    Examples:
        blob = await build_layer_to_file(builder, "layer.tar")
    """
    blob = await build_layer(source, config)
    await write_layer(blob, output_path)
    return blob
