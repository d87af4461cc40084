from dependency_injector import containers, providers

from stateaudit.config import Settings
from stateaudit.decoder.layout import StorageLayoutStore
from stateaudit.decoder.slot_decoder import SlotDecoder
from stateaudit.identity.probes import OnChainProber
from stateaudit.identity.registry import RegistryClient
from stateaudit.identity.resolver import IdentityResolver
from stateaudit.infra.blockchain.evm.rpc_client import EVMRPCClient
from stateaudit.infra.http.rate_limited_client import RateLimitedClient
from stateaudit.report.renderer import MarkdownRenderer
from stateaudit.report.service import AuditService


class Container(containers.DeclarativeContainer):
    settings = providers.Singleton(Settings)

    http_client = providers.Singleton(
        RateLimitedClient,
        rate_per_second=settings.provided.http_rate_per_second,
        timeout=settings.provided.http_timeout,
    )

    rpc_client = providers.Singleton(
        EVMRPCClient,
        rpc_url=settings.provided.rpc_url,
        http_client=http_client,
    )

    registry = providers.Singleton(
        RegistryClient,
        source=settings.provided.registry_url,
        http_client=http_client,
    )

    layout_store = providers.Singleton(
        StorageLayoutStore,
        base=settings.provided.storage_layout_base,
        http_client=http_client,
    )

    prober = providers.Singleton(OnChainProber, rpc=rpc_client)

    resolver = providers.Singleton(
        IdentityResolver,
        registry=registry,
        prober=prober,
        chain_id=settings.provided.chain_id,
    )

    slot_decoder = providers.Singleton(SlotDecoder, layout_store=layout_store)

    renderer = providers.Singleton(MarkdownRenderer)

    audit_service = providers.Singleton(
        AuditService,
        resolver=resolver,
        decoder=slot_decoder,
        renderer=renderer,
        sort=settings.provided.sort_state_diffs,
    )
