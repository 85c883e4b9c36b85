"""
Client GraphQL pour le serveur Stash.

Implemente ICatalogService : lecture des scenes et artefacts, ecriture
des notes et declenchement d'un scan des metadonnees. Les erreurs reseau
et les erreurs GraphQL sont traduites en CatalogFetchError (lecture) ou
CatalogUpdateError (ecriture).

Usage:
    client = StashClient(url="http://localhost:9999", api_key="xxx")
    scenes = await client.find_scenes()
    await client.update_rating(None, scenes[0].id, 42)
    await client.close()
"""

from typing import Any, Optional

import httpx
from loguru import logger

from stash_curator.adapters.stash import queries
from stash_curator.adapters.stash.mappers import (
    FIND_ALL,
    artifact_filter,
    map_performer,
    map_scene,
    map_studio,
    map_tag,
    scene_filter_to_graphql,
)
from stash_curator.adapters.stash.retry import StashBusyError, send_with_retry
from stash_curator.core.entities import (
    ArtifactKind,
    Gender,
    Performer,
    Scene,
    Studio,
    Tag,
)
from stash_curator.core.ports.catalog import (
    CatalogError,
    CatalogFetchError,
    CatalogUpdateError,
    ICatalogService,
)
from stash_curator.core.value_objects import SceneFilter


class StashClient(ICatalogService):
    """
    Client GraphQL Stash.

    Toutes les requetes passent par l'endpoint `<url>/graphql` avec
    l'en-tete `ApiKey`. Les recherches demandent `per_page: -1` pour
    obtenir le catalogue complet en une seule reponse.

    Attributes:
        GRAPHQL_PATH: Chemin de l'endpoint GraphQL
    """

    GRAPHQL_PATH = "/graphql"

    _UPDATE_MUTATIONS = {
        None: queries.SCENE_UPDATE,
        ArtifactKind.PERFORMER: queries.PERFORMER_UPDATE,
        ArtifactKind.STUDIO: queries.STUDIO_UPDATE,
    }

    def __init__(
        self,
        url: str,
        api_key: Optional[str] = None,
        timeout: float = 30.0,
        max_attempts: int = 5,
    ) -> None:
        """
        Initialise le client Stash.

        Args:
            url: URL de base du serveur (ex: http://localhost:9999)
            api_key: Cle API Stash, vide si l'authentification est desactivee
            timeout: Timeout HTTP en secondes
            max_attempts: Tentatives maximum sur erreur transitoire
        """
        self._url = url.rstrip("/")
        self._api_key = api_key
        self._timeout = timeout
        self._max_attempts = max_attempts
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def endpoint(self) -> str:
        """URL complete de l'endpoint GraphQL."""
        return f"{self._url}{self.GRAPHQL_PATH}"

    def _get_client(self) -> httpx.AsyncClient:
        """
        Retourne le client HTTP, le cree si necessaire (lazy init).

        Returns:
            httpx.AsyncClient configure pour le serveur Stash
        """
        if self._client is None or self._client.is_closed:
            headers = {
                "Accept": "application/json",
                "Content-Type": "application/json",
            }
            if self._api_key:
                headers["ApiKey"] = self._api_key
            self._client = httpx.AsyncClient(headers=headers, timeout=self._timeout)
        return self._client

    async def _execute(
        self,
        query: str,
        variables: Optional[dict[str, Any]] = None,
        error_cls: type[CatalogError] = CatalogFetchError,
    ) -> dict[str, Any]:
        """
        Envoie une requete GraphQL et retourne le champ `data`.

        Args:
            query: Document GraphQL
            variables: Variables de la requete
            error_cls: Exception a lever en cas d'echec

        Returns:
            Contenu du champ `data` de la reponse

        Raises:
            CatalogFetchError ou CatalogUpdateError selon error_cls
        """
        client = self._get_client()
        try:
            response = await send_with_retry(
                client,
                "POST",
                self.endpoint,
                max_attempts=self._max_attempts,
                json={"query": query, "variables": variables or {}},
            )
            payload = response.json()
        except (httpx.HTTPError, StashBusyError, ValueError) as e:
            raise error_cls(f"Requete Stash echouee: {e}") from e

        if not isinstance(payload, dict):
            raise error_cls(f"Reponse Stash inattendue: {type(payload).__name__}")

        errors = payload.get("errors")
        if errors:
            messages = "; ".join(
                str(err.get("message", err)) if isinstance(err, dict) else str(err)
                for err in errors
            )
            raise error_cls(f"Erreur GraphQL Stash: {messages}")

        return payload.get("data") or {}

    async def find_scenes(self, scene_filter: Optional[SceneFilter] = None) -> list[Scene]:
        """Recupere toutes les scenes correspondant au filtre."""
        data = await self._execute(
            queries.FIND_SCENES,
            {
                "filter": FIND_ALL,
                "scene_filter": scene_filter_to_graphql(scene_filter),
            },
        )
        scenes = [map_scene(s) for s in (data.get("findScenes") or {}).get("scenes", [])]
        logger.debug(f"{len(scenes)} scenes recuperees depuis Stash")
        return scenes

    async def find_performers(
        self,
        gender: Optional[Gender] = None,
        scene_count_above: Optional[int] = None,
        engagement_above: Optional[int] = None,
        favorite: Optional[bool] = None,
    ) -> list[Performer]:
        """Recupere les performers ; le favori est filtre via `filter_favorites`."""
        data = await self._execute(
            queries.FIND_PERFORMERS,
            {
                "filter": FIND_ALL,
                "performer_filter": artifact_filter(
                    gender=gender,
                    scene_count_above=scene_count_above,
                    engagement_above=engagement_above,
                    favorite=favorite,
                    favorite_key="filter_favorites",
                ),
            },
        )
        performers = data.get("findPerformers") or {}
        return [map_performer(p) for p in performers.get("performers", [])]

    async def find_studios(
        self,
        scene_count_above: Optional[int] = None,
        favorite: Optional[bool] = None,
    ) -> list[Studio]:
        data = await self._execute(
            queries.FIND_STUDIOS,
            {
                "filter": FIND_ALL,
                "studio_filter": artifact_filter(
                    scene_count_above=scene_count_above, favorite=favorite
                ),
            },
        )
        studios = data.get("findStudios") or {}
        return [map_studio(s) for s in studios.get("studios", [])]

    async def find_tags(
        self,
        scene_count_above: Optional[int] = None,
        favorite: Optional[bool] = None,
    ) -> list[Tag]:
        data = await self._execute(
            queries.FIND_TAGS,
            {
                "filter": FIND_ALL,
                "tag_filter": artifact_filter(
                    scene_count_above=scene_count_above, favorite=favorite
                ),
            },
        )
        tags = data.get("findTags") or {}
        return [map_tag(t) for t in tags.get("tags", [])]

    async def update_rating(
        self, kind: Optional[ArtifactKind], entity_id: str, rating: int
    ) -> None:
        """
        Ecrit la note rating100 d'une scene, d'un performer ou d'un studio.

        Raises:
            CatalogUpdateError: Si la mutation echoue ou si le type
                d'artefact n'accepte pas de note (tags)
        """
        mutation = self._UPDATE_MUTATIONS.get(kind)
        if mutation is None:
            raise CatalogUpdateError(f"Notation non supportee pour {kind.value}")

        await self._execute(
            mutation,
            {"input": {"id": entity_id, "rating100": rating}},
            error_cls=CatalogUpdateError,
        )
        logger.debug(f"Note {rating} ecrite pour {kind.value if kind else 'scene'} {entity_id}")

    async def trigger_metadata_scan(self) -> Optional[str]:
        """Lance un scan des metadonnees ; retourne l'ID du job."""
        data = await self._execute(
            queries.METADATA_SCAN,
            {"input": {}},
            error_cls=CatalogUpdateError,
        )
        job_id = data.get("metadataScan")
        logger.info(f"Scan des metadonnees Stash lance (job {job_id})")
        return str(job_id) if job_id is not None else None

    async def download_image(self, url: str) -> bytes:
        """
        Telecharge une image servie par Stash (capture de scene, photo).

        L'en-tete ApiKey du client authentifie la requete.

        Raises:
            CatalogFetchError: Si le telechargement echoue
        """
        client = self._get_client()
        try:
            response = await send_with_retry(
                client,
                "GET",
                url,
                max_attempts=self._max_attempts,
                headers={"Accept": "image/*"},
            )
        except (httpx.HTTPError, StashBusyError) as e:
            raise CatalogFetchError(f"Telechargement de {url} echoue: {e}") from e
        return response.content

    async def close(self) -> None:
        """Ferme le client HTTP."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None
