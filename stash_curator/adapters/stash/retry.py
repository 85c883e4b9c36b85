"""
Politique de retry des echanges avec le serveur Stash.

Stash repond 429 quand un reverse proxy limite le debit et 503 pendant
un scan ou une generation lourde ; dans les deux cas l'en-tete
Retry-After, s'il est present, donne le delai a respecter. Sans en-tete,
et pour les erreurs de transport (serveur redemarre, timeout), le delai
suit un backoff exponentiel avec jitter.

Usage:
    response = await send_with_retry(client, "POST", "/graphql", json=payload)
    image = await send_with_retry(client, "GET", screenshot_url)
"""

from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Optional

import httpx
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_random_exponential,
)
from tenacity.wait import wait_base

# Statuts transitoires de Stash : limitation de debit et serveur occupe
RETRYABLE_STATUS_CODES = frozenset({429, 503})


class StashBusyError(Exception):
    """
    Le serveur Stash demande de patienter (429 ou 503).

    Attributes:
        status_code: Statut HTTP recu
        retry_after: Delai demande en secondes (en-tete Retry-After),
                     ou None si non specifie ou illisible.
    """

    def __init__(self, status_code: int, retry_after: Optional[float] = None) -> None:
        self.status_code = status_code
        self.retry_after = retry_after
        super().__init__(f"Stash occupe (HTTP {status_code}), nouvel essai dans {retry_after}s")


def parse_retry_after(value: Optional[str]) -> Optional[float]:
    """
    Lit l'en-tete Retry-After : nombre de secondes ou date HTTP.

    Returns:
        Delai en secondes (jamais negatif), None si absent ou illisible
    """
    if not value:
        return None
    value = value.strip()
    if value.isdigit():
        return float(value)
    try:
        moment = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return max(0.0, (moment - datetime.now(timezone.utc)).total_seconds())


class wait_retry_after(wait_base):
    """
    Attente tenacity respectant le Retry-After de Stash.

    Le delai demande par le serveur est plafonne a max_wait ; a defaut,
    la strategie de repli (backoff exponentiel) s'applique.
    """

    def __init__(self, fallback: wait_base, max_wait: float) -> None:
        self.fallback = fallback
        self.max_wait = max_wait

    def __call__(self, retry_state: RetryCallState) -> float:
        exception = retry_state.outcome.exception() if retry_state.outcome else None
        if isinstance(exception, StashBusyError) and exception.retry_after is not None:
            return min(exception.retry_after, self.max_wait)
        return self.fallback(retry_state)


def with_retry(max_attempts: int = 5, max_wait: int = 30):
    """
    Decorateur relancant sur StashBusyError et erreurs de transport.

    Args:
        max_attempts: Nombre maximum de tentatives (defaut: 5)
        max_wait: Delai maximum entre les tentatives en secondes (defaut: 30)

    Returns:
        Decorateur a appliquer sur une fonction async
    """
    return retry(
        retry=retry_if_exception_type((StashBusyError, httpx.TransportError)),
        wait=wait_retry_after(
            wait_random_exponential(multiplier=1, min=1, max=max_wait), max_wait
        ),
        stop=stop_after_attempt(max_attempts),
        reraise=True,
    )


async def send_with_retry(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    max_attempts: int = 5,
    max_wait: int = 30,
    **kwargs,
) -> httpx.Response:
    """
    Envoie une requete a Stash avec retry automatique.

    Les reponses 429 et 503 deviennent des StashBusyError relancees ; les
    autres erreurs HTTP sont propagees immediatement.

    Args:
        client: Client httpx async a utiliser
        method: Methode HTTP (POST pour GraphQL, GET pour les images)
        url: URL a appeler
        max_attempts: Nombre maximum de tentatives (defaut: 5)
        max_wait: Delai maximum entre deux tentatives en secondes
        **kwargs: Arguments supplementaires passes a client.request()

    Returns:
        httpx.Response en cas de succes

    Raises:
        StashBusyError: Si Stash reste occupe apres epuisement des tentatives
        httpx.TransportError: Si le serveur reste injoignable
        httpx.HTTPStatusError: Pour les autres erreurs HTTP
    """

    @with_retry(max_attempts=max_attempts, max_wait=max_wait)
    async def _do_request() -> httpx.Response:
        response = await client.request(method, url, **kwargs)
        if response.status_code in RETRYABLE_STATUS_CODES:
            raise StashBusyError(
                response.status_code, parse_retry_after(response.headers.get("Retry-After"))
            )
        response.raise_for_status()
        return response

    return await _do_request()
