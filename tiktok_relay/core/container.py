"""Dependency Injection Container.

This module provides a centralized DI container using dependency-injector.
Lifecycles:
- Singleton: One instance for the entire application (HTTP client, orchestrator)
- Factory: New instance every time

Usage:
    # In FastAPI
    from tiktok_relay.core.container import container

    orchestrator = container.upload_orchestrator()
    result = await orchestrator.handle_upload(request)

    # In tests
    with container.upload_orchestrator.override(fake_orchestrator):
        ...
"""

from dependency_injector import containers, providers

from tiktok_relay.core.config import Config, get_config


class InfrastructureContainer(containers.DeclarativeContainer):
    """Infrastructure layer dependencies (HTTP client and outbound API clients)."""

    global_config = providers.Dependency(instance_of=Config)
    upload_config = providers.Dependency()

    # ============================================
    # HTTP Client
    # ============================================

    http_client = providers.Singleton(
        "tiktok_relay.infrastructure.http_client.HTTPClient",
        timeout=global_config.provided.api_timeout_seconds,
    )

    # ============================================
    # TikTok Clients
    # ============================================

    tiktok_auth_client = providers.Singleton(
        "tiktok_relay.infrastructure.tiktok_auth.TikTokAuthClient",
        http_client=http_client,
        client_key=global_config.provided.tiktok_client_key,
        client_secret=global_config.provided.tiktok_client_secret,
        refresh_token=global_config.provided.tiktok_refresh_token,
        base_url=global_config.provided.tiktok_api_base_url,
        timeout=global_config.provided.api_timeout_seconds,
    )

    tiktok_api_client = providers.Singleton(
        "tiktok_relay.infrastructure.tiktok_api.TikTokAPIClient",
        http_client=http_client,
        base_url=global_config.provided.tiktok_api_base_url,
        timeout=global_config.provided.api_timeout_seconds,
    )

    # ============================================
    # Video Source
    # ============================================

    video_source_client = providers.Singleton(
        "tiktok_relay.infrastructure.video_source.VideoSourceClient",
        http_client=http_client,
        timeout=upload_config.provided.transfer.download_timeout,
        max_size=upload_config.provided.transfer.max_video_size,
    )


class ConfigContainer(containers.DeclarativeContainer):
    """Configuration models container.

    Provides typed Pydantic config models for services.
    """

    global_config = providers.Dependency(instance_of=Config)

    upload_config = providers.Singleton(
        lambda config: config.upload_config(),
        config=global_config,
    )


class ServiceContainer(containers.DeclarativeContainer):
    """Service layer dependencies.

    Services receive infrastructure dependencies via injection.
    """

    infrastructure = providers.DependenciesContainer()
    configs = providers.DependenciesContainer()

    upload_orchestrator = providers.Singleton(
        "tiktok_relay.services.uploader.orchestrator.UploadOrchestrator",
        auth_client=infrastructure.tiktok_auth_client,
        api_client=infrastructure.tiktok_api_client,
        video_source=infrastructure.video_source_client,
        config=configs.upload_config,
    )


class ApplicationContainer(containers.DeclarativeContainer):
    """Root application container.

    Composes all sub-containers and provides the main entry point.
    """

    # Global Config singleton (environment variables)
    # Uses get_config() to ensure same instance across the app
    config = providers.Singleton(get_config)

    configs = providers.Container(
        ConfigContainer,
        global_config=config,
    )

    infrastructure = providers.Container(
        InfrastructureContainer,
        global_config=config,
        upload_config=configs.upload_config,
    )

    services = providers.Container(
        ServiceContainer,
        infrastructure=infrastructure,
        configs=configs,
    )

    # ============================================
    # Convenience accessors (shortcuts)
    # ============================================

    http_client = providers.Singleton(
        lambda client: client,
        client=infrastructure.http_client,
    )

    upload_orchestrator = providers.Singleton(
        lambda svc: svc,
        svc=services.upload_orchestrator,
    )


def create_container() -> ApplicationContainer:
    """Create and configure the application container.

    Returns:
        Configured ApplicationContainer instance
    """
    return ApplicationContainer()


# Global container instance
container = create_container()


# ============================================
# FastAPI Integration
# ============================================


def get_container() -> ApplicationContainer:
    """Get the global container (for FastAPI Depends)."""
    return container


def get_upload_orchestrator():
    """FastAPI dependency for the upload orchestrator."""
    return container.upload_orchestrator()


# ============================================
# Testing Utilities
# ============================================


def override_orchestrator(orchestrator):
    """Context manager to override the orchestrator for testing.

    Usage:
        with override_orchestrator(fake):
            # POST /upload uses fake.handle_upload
            ...
    """
    return container.upload_orchestrator.override(orchestrator)


def override_config(config: Config):
    """Context manager to override the global Config for testing."""
    return container.config.override(config)


__all__ = [
    "ApplicationContainer",
    "ConfigContainer",
    "InfrastructureContainer",
    "ServiceContainer",
    "container",
    "create_container",
    "get_config",
    "get_container",
    "get_upload_orchestrator",
    "override_config",
    "override_orchestrator",
]
