"""
Variable sources.

A source answers three read-only questions: which collections exist, which
variables a collection holds, and what a variable looks like. Export code
only talks to the VariableSource protocol; tests use InMemoryVariableSource
and the server uses FigmaRestVariableSource.
"""

import asyncio
import logging
from typing import Optional, List, Dict, Any, Protocol

import httpx

from tokens.config import Settings
from tokens.errors import SourceUnavailable
from tokens.models import VariableCollection, VariableRecord

logger = logging.getLogger(__name__)


class VariableSource(Protocol):
    async def list_collections(self) -> List[VariableCollection]:
        ...

    async def list_variables_in(self, collection_id: str) -> List[str]:
        ...

    async def get_variable(self, variable_id: str) -> Optional[VariableRecord]:
        ...


class InMemoryVariableSource:
    """Serves collections and variables from memory."""

    def __init__(
        self,
        collections: Optional[List[VariableCollection]] = None,
        variables: Optional[List[VariableRecord]] = None
    ):
        self._collections: Dict[str, VariableCollection] = {c.id: c for c in collections or []}
        self._variables: Dict[str, VariableRecord] = {v.id: v for v in variables or []}

    @classmethod
    def from_payload(cls, payload: Dict[str, Any], include_remote: bool = False) -> "InMemoryVariableSource":
        """
        Load a Figma `GET /v1/files/:key/variables/local` response body.

        Both the full body and its `meta` object are accepted.
        """
        meta = payload.get('meta', payload)
        collections = [
            VariableCollection.from_api(c)
            for c in (meta.get('variableCollections') or {}).values()
        ]
        if not include_remote:
            collections = [c for c in collections if not c.remote]
        variables = [
            VariableRecord.from_api(v)
            for v in (meta.get('variables') or {}).values()
        ]
        return cls(collections, variables)

    async def list_collections(self) -> List[VariableCollection]:
        return list(self._collections.values())

    async def list_variables_in(self, collection_id: str) -> List[str]:
        collection = self._collections.get(collection_id)
        if collection is None:
            raise SourceUnavailable(f"Unknown variable collection '{collection_id}'")
        return list(collection.variable_ids)

    async def get_variable(self, variable_id: str) -> Optional[VariableRecord]:
        return self._variables.get(variable_id)


class FigmaRestVariableSource:
    """
    Reads local variables of a Figma file through the REST API.

    The whole `variables/local` payload is fetched on first use and kept for
    the lifetime of the source; create one source per export.
    """

    def __init__(
        self,
        file_key: str,
        settings: Optional[Settings] = None,
        include_remote: bool = False,
        client: Optional[httpx.AsyncClient] = None
    ):
        self.file_key = file_key
        self.settings = settings or Settings.from_env()
        self.include_remote = include_remote
        self._client = client
        self._loaded: Optional[InMemoryVariableSource] = None
        self._lock = asyncio.Lock()

    async def _fetch_payload(self) -> Dict[str, Any]:
        token = self.settings.require_token()
        url = f"{self.settings.api_base}/files/{self.file_key}/variables/local"
        logger.info("Fetching local variables for file %s", self.file_key)

        if self._client is not None:
            response = await self._client.get(
                url, headers={"X-Figma-Token": token}, timeout=self.settings.request_timeout
            )
            response.raise_for_status()
            return response.json()

        async with httpx.AsyncClient() as client:
            response = await client.get(
                url, headers={"X-Figma-Token": token}, timeout=self.settings.request_timeout
            )
            response.raise_for_status()
            return response.json()

    async def _source(self) -> InMemoryVariableSource:
        async with self._lock:
            if self._loaded is None:
                try:
                    payload = await self._fetch_payload()
                except httpx.HTTPError as e:
                    raise SourceUnavailable(f"Could not read variables of file '{self.file_key}': {e}") from e
                if payload.get('error'):
                    raise SourceUnavailable(
                        f"Figma API error for file '{self.file_key}': {payload.get('message', 'unknown error')}"
                    )
                self._loaded = InMemoryVariableSource.from_payload(payload, self.include_remote)
            return self._loaded

    async def list_collections(self) -> List[VariableCollection]:
        return await (await self._source()).list_collections()

    async def list_variables_in(self, collection_id: str) -> List[str]:
        return await (await self._source()).list_variables_in(collection_id)

    async def get_variable(self, variable_id: str) -> Optional[VariableRecord]:
        return await (await self._source()).get_variable(variable_id)
