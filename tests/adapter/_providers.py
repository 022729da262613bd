from typing import Any

from esorm.adapter import Adapter, ConnectionRegistry


class AdapterProvider:
    ELASTICSEARCH = "elasticsearch"


provider_parameters: dict[str, dict[str, Any]] = {
    AdapterProvider.ELASTICSEARCH: {},
}


def get_component(
    provider_type: str = AdapterProvider.ELASTICSEARCH,
    registry: ConnectionRegistry | None = None,
    defaults: dict[str, Any] | None = None,
) -> Adapter:
    return Adapter(
        registry=registry,
        defaults=defaults,
        __provider__=dict(
            type=provider_type,
            parameters=provider_parameters[provider_type],
        ),
    )
