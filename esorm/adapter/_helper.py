import copy
import re
from typing import Any, Mapping

from esorm.core import warn
from esorm.core.exceptions import BadRequestError, IdentityMissingError

from ._models import (
    CollectionDefinition,
    ConnectionConfig,
    ElasticsearchSettings,
    IndexDescriptor,
)

COMPATIBLE_MIMETYPE = re.compile(r"^application/(json|x-ndjson)$")


class Helper:
    @staticmethod
    def get_identity(config: dict[str, Any] | ConnectionConfig | None) -> str:
        if isinstance(config, ConnectionConfig):
            identity = config.identity
        elif isinstance(config, dict):
            identity = config.get("identity")
        else:
            identity = None
        if not identity:
            raise IdentityMissingError()
        return str(identity)

    @staticmethod
    def get_connection_config(
        config: dict[str, Any] | ConnectionConfig,
        defaults: dict[str, Any] | None = None,
    ) -> ConnectionConfig:
        if isinstance(config, dict):
            config = ConnectionConfig.from_dict(config)
        if not isinstance(config, ConnectionConfig):
            raise BadRequestError("Connection config format error")
        values = ConnectionConfig.from_dict(defaults or {}).to_dict(
            exclude_none=True
        )
        values.update(config.model_dump(exclude_unset=True, exclude_none=True))
        return ConnectionConfig.from_dict(values)

    @staticmethod
    def get_hosts(hosts: list[str] | str | None) -> list[str]:
        if hosts is None:
            return []
        if isinstance(hosts, str):
            hosts = [h.strip() for h in hosts.split(",") if h.strip()]
        return [
            host if "://" in host else f"http://{host}" for host in hosts
        ]

    @staticmethod
    def get_compatible_headers(
        headers: Mapping[str, str] | None,
        compatible_with: str,
    ) -> dict[str, str]:
        result = dict(headers or {})
        for key, value in result.items():
            if key.lower() in ("accept", "content-type"):
                result[key] = COMPATIBLE_MIMETYPE.sub(
                    "application/vnd.elasticsearch+\\g<1>; "
                    f"compatible-with={compatible_with}",
                    value,
                )
        return result

    @staticmethod
    def get_collection_mapping(
        name: str,
        settings: ElasticsearchSettings,
    ) -> dict[str, Any]:
        mappings = settings.mappings or {}
        if isinstance(mappings.get(name), dict):
            return copy.deepcopy(mappings[name])
        return copy.deepcopy(mappings)

    @staticmethod
    def merge_mapping(
        target: dict[str, Any],
        mapping: dict[str, Any],
        index: str,
        collection: str,
    ) -> None:
        for key, value in mapping.items():
            if key == "properties" and isinstance(value, dict):
                properties = target.setdefault("properties", {})
                for field, definition in value.items():
                    if field in properties and properties[field] != definition:
                        warn(
                            f"Field {field!r} of index {index!r} is "
                            f"redefined by collection {collection!r}"
                        )
                    properties[field] = definition
                continue
            if key in target and target[key] != value:
                warn(
                    f"Mapping key {key!r} of index {index!r} is "
                    f"redefined by collection {collection!r}"
                )
            target[key] = value

    @staticmethod
    def group_indexes(
        collections: dict[str, CollectionDefinition],
    ) -> dict[str, IndexDescriptor]:
        """Group collections by target index.

        Collections without an Elasticsearch block are skipped. Indexes
        keep the order in which their first collection is enumerated.
        """
        descriptors: dict[str, IndexDescriptor] = {}
        for name, definition in collections.items():
            settings = definition.elasticsearch
            if settings is None:
                continue
            descriptor = descriptors.get(settings.index)
            if descriptor is None:
                descriptor = IndexDescriptor(index=settings.index)
                descriptors[settings.index] = descriptor
            descriptor.collections.append(name)
            Helper.merge_mapping(
                descriptor.mappings,
                Helper.get_collection_mapping(name, settings),
                index=settings.index,
                collection=name,
            )
        return descriptors
