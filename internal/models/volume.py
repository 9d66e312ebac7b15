# internal/models/volume.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

MAX_DESCRIPTOR_DEPTH = 64

KIND_CONTAINER = "container"
KIND_TASK_CACHE = "task-cache"
KIND_RESOURCE = "resource"
KIND_RESOURCE_TYPE = "resource-type"


@dataclass(frozen=True)
class BaseResourceType:
    name: str
    version: Any = None

    def as_mapping(self) -> Dict[str, Any]:
        if self.version is None:
            return {"name": self.name}
        return {"name": self.name, "version": self.version}


@dataclass(frozen=True)
class ResourceTypeDescriptor:
    """
    Identity of the resource type that fetched a volume.

    Terminates at `base`; otherwise `inner` points at the custom resource
    type this one was itself fetched with. Neither set means unknown.
    """

    base: Optional[BaseResourceType] = None
    inner: Optional["ResourceTypeDescriptor"] = None
    version: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class _VolumeCommon:
    id: str
    worker_name: str
    type: str
    raw: Dict[str, Any] = field(repr=False, compare=False)


@dataclass(frozen=True)
class ContainerVolume(_VolumeCommon):
    container_handle: str = ""
    path: str = ""
    parent_handle: str = ""


@dataclass(frozen=True)
class TaskCacheVolume(_VolumeCommon):
    pipeline_name: str = ""
    job_name: str = ""
    step_name: str = ""


@dataclass(frozen=True)
class ResourceVolume(_VolumeCommon):
    resource_type: ResourceTypeDescriptor = field(default_factory=ResourceTypeDescriptor)

    @property
    def version(self) -> Dict[str, Any]:
        return self.resource_type.version


@dataclass(frozen=True)
class ResourceTypeVolume(_VolumeCommon):
    base_resource_type: Optional[BaseResourceType] = None


@dataclass(frozen=True)
class UnknownVolume(_VolumeCommon):
    pass


Volume = Union[ContainerVolume, TaskCacheVolume, ResourceVolume, ResourceTypeVolume, UnknownVolume]


def _str(raw: Dict[str, Any], key: str) -> str:
    v = raw.get(key)
    return v if isinstance(v, str) else ""


def _mapping(v: Any) -> Dict[str, Any]:
    return dict(v) if isinstance(v, dict) else {}


def base_resource_type_from_wire(raw: Any) -> Optional[BaseResourceType]:
    if not isinstance(raw, dict):
        return None
    return BaseResourceType(name=_str(raw, "name"), version=raw.get("version"))


def descriptor_from_wire(raw: Any) -> ResourceTypeDescriptor:
    """
    Parse a (possibly nested) resource_type object.

    Walks the chain iteratively; depth is only bounded when presenting.
    """
    levels: List[Dict[str, Any]] = []
    while isinstance(raw, dict):
        levels.append(raw)
        raw = raw.get("resource_type")

    descriptor: Optional[ResourceTypeDescriptor] = None
    for level in reversed(levels):
        descriptor = ResourceTypeDescriptor(
            base=base_resource_type_from_wire(level.get("base_resource_type")),
            inner=descriptor,
            version=_mapping(level.get("version")),
        )
    return descriptor or ResourceTypeDescriptor()


def volume_from_wire(raw: Dict[str, Any]) -> Volume:
    """Parse one API volume record. Unrecognized shapes become UnknownVolume."""
    common = {
        "id": _str(raw, "id"),
        "worker_name": _str(raw, "worker_name"),
        "type": _str(raw, "type"),
        "raw": raw,
    }
    kind = common["type"]

    if kind == KIND_CONTAINER:
        return ContainerVolume(
            **common,
            container_handle=_str(raw, "container_handle"),
            path=_str(raw, "path"),
            parent_handle=_str(raw, "parent_handle"),
        )
    if kind == KIND_TASK_CACHE:
        return TaskCacheVolume(
            **common,
            pipeline_name=_str(raw, "pipeline_name"),
            job_name=_str(raw, "job_name"),
            step_name=_str(raw, "step_name"),
        )
    if kind == KIND_RESOURCE:
        return ResourceVolume(**common, resource_type=descriptor_from_wire(raw.get("resource_type")))
    if kind == KIND_RESOURCE_TYPE:
        return ResourceTypeVolume(
            **common,
            base_resource_type=base_resource_type_from_wire(raw.get("base_resource_type")),
        )

    return UnknownVolume(**common)


def volumes_from_wire(payload: Any) -> List[Volume]:
    if not isinstance(payload, list):
        return []
    return [volume_from_wire(v) for v in payload if isinstance(v, dict)]


def sort_volumes(volumes: List[Volume]) -> List[Volume]:
    # Worker first, then handle; handles are only unique per worker.
    return sorted(volumes, key=lambda v: (v.worker_name, v.id))
