# internal/analyzer/identify.py

from __future__ import annotations

from typing import Any, List, Optional

import yaml

from internal.errors import DescriptorDepthExceeded
from internal.models.volume import (
    MAX_DESCRIPTOR_DEPTH,
    ContainerVolume,
    ResourceTypeDescriptor,
    ResourceTypeVolume,
    ResourceVolume,
    TaskCacheVolume,
    Volume,
    sort_volumes,
)

TABLE_HEADERS = ["handle", "worker", "type", "identifier"]

NOT_APPLICABLE = "n/a"


def present_map(mapping: Any) -> str:
    """
    Flatten a version-like mapping into one compact token.

    {"ref": "abc", "branch": "main"} -> "branch:main,ref:abc"
    Keys are ordered lexically at every level.
    """
    if mapping is None or mapping == {}:
        return ""

    dumped = yaml.safe_dump(
        mapping,
        default_flow_style=False,
        sort_keys=True,
        allow_unicode=True,
        width=float("inf"),
    )
    lines = dumped.strip().split("\n")
    return ",".join(lines).replace(" ", "")


def present_resource_type(descriptor: Optional[ResourceTypeDescriptor], _depth: int = 0) -> str:
    if descriptor is None:
        return ""
    if _depth > MAX_DESCRIPTOR_DEPTH:
        raise DescriptorDepthExceeded(MAX_DESCRIPTOR_DEPTH)

    if descriptor.base is not None:
        return present_map(descriptor.base.as_mapping())

    if descriptor.inner is not None:
        inner = present_resource_type(descriptor.inner, _depth + 1)
        version = present_map(descriptor.version)
        return f"type:resource({inner}),version:{version}"

    return ""


def volume_identifier(volume: Volume, detailed: bool = False) -> str:
    if isinstance(volume, ContainerVolume):
        if not detailed:
            return volume.container_handle
        identifier = f"container:{volume.container_handle},path:{volume.path}"
        if volume.parent_handle:
            identifier = f"{identifier},parent:{volume.parent_handle}"
        return identifier

    if isinstance(volume, TaskCacheVolume):
        return f"{volume.pipeline_name}/{volume.job_name}/{volume.step_name}"

    if isinstance(volume, ResourceVolume):
        if detailed:
            return present_resource_type(volume.resource_type)
        return present_map(volume.version)

    if isinstance(volume, ResourceTypeVolume):
        if volume.base_resource_type is None:
            return ""
        if detailed:
            return present_map(volume.base_resource_type.as_mapping())
        return volume.base_resource_type.name

    return NOT_APPLICABLE


def volume_rows(volumes: List[Volume], detailed: bool = False) -> List[List[str]]:
    return [
        [v.id, v.worker_name, v.type, volume_identifier(v, detailed=detailed)]
        for v in sort_volumes(volumes)
    ]
