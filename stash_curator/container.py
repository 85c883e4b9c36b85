"""
Container d'injection de dependances via dependency-injector.

Fournit une gestion centralisee des dependances pour la CLI :
configuration, client Stash, systeme de fichiers et services.
"""

from dependency_injector import containers, providers

from .adapters.file_system import FileSystemAdapter
from .adapters.stash import StashClient
from .config import Settings
from .services.library_organizer import LibraryOrganizerService
from .services.rating import RatingEngine
from .services.rating_updater import RatingsUpdaterService
from .services.scene_copier import SceneCopierService
from .services.space_filler import SpaceFillerService


class Container(containers.DeclarativeContainer):
    """Container DI de l'application.

    Utilisation :
        container = Container()
        engine = container.rating_engine()
        snapshot = await engine.load_snapshot()
    """

    # Configuration - singleton charge une seule fois
    config = providers.Singleton(Settings)

    # Adapters - implementations concretes des ports
    file_system = providers.Singleton(FileSystemAdapter)

    # Client Stash - Singleton pour partager la connexion HTTP entre services
    stash_client = providers.Singleton(
        StashClient,
        url=config.provided.stash_url,
        api_key=config.provided.stash_api_key,
        timeout=config.provided.request_timeout,
    )

    # Services
    rating_engine = providers.Factory(RatingEngine, catalog=stash_client)
    ratings_updater_service = providers.Factory(
        RatingsUpdaterService, catalog=stash_client
    )
    space_filler_service = providers.Factory(SpaceFillerService, catalog=stash_client)
    library_organizer_service = providers.Factory(
        LibraryOrganizerService,
        file_system=file_system,
        catalog=stash_client,
    )
    scene_copier_service = providers.Factory(
        SceneCopierService,
        file_system=file_system,
        catalog=stash_client,
    )
