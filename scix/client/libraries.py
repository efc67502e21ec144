"""Personal library (biblib) operations for ``SciXClient``."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from scix.core.constants import DEFAULT_ADD_BY_QUERY_ROWS
from scix.core.parse import load_json, load_json_object
from scix.core.types import Library, LibraryDetail

if TYPE_CHECKING:
    from scix.client.transport import Transport
    from scix.core.types import SearchResponse


class LibraryOperations:
    """Mixin holding the biblib endpoints. Expects ``transport`` and ``search``."""

    transport: Transport

    if TYPE_CHECKING:

        async def search(self, query: str, rows: int = 10) -> SearchResponse: ...

    async def list_libraries(self) -> list[Library]:
        parsed = load_json_object(await self.transport.get("/biblib/libraries"), "libraries")
        entries = parsed.get("libraries")
        libraries = []
        for entry in entries if isinstance(entries, list) else []:
            if isinstance(entry, dict) and isinstance(entry.get("id"), str):
                libraries.append(Library.from_api(entry["id"], entry))
        return libraries

    async def get_library(self, library_id: str) -> LibraryDetail:
        """Fetch a library's metadata together with its bibcodes."""
        parsed = load_json_object(
            await self.transport.get(f"/biblib/libraries/{library_id}"), "library"
        )
        metadata = parsed.get("metadata")
        documents = parsed.get("documents")
        return LibraryDetail(
            metadata=Library.from_api(library_id, metadata if isinstance(metadata, dict) else {}),
            documents=[d for d in documents if isinstance(d, str)] if isinstance(documents, list) else [],
        )

    async def create_library(
        self,
        name: str,
        description: str = "",
        public: bool = False,
        bibcodes: list[str] | None = None,
    ) -> Library:
        body: dict[str, Any] = {"name": name, "description": description, "public": public}
        if bibcodes is not None:
            body["bibcode"] = list(bibcodes)
        parsed = load_json_object(
            await self.transport.post_json("/biblib/libraries", body), "create library"
        )
        library_id = parsed.get("id")
        return Library(
            id=library_id if isinstance(library_id, str) else "",
            name=name,
            description=description,
            num_documents=len(bibcodes) if bibcodes else 0,
            public=public,
        )

    async def edit_library(
        self,
        library_id: str,
        name: str | None = None,
        description: str | None = None,
        public: bool | None = None,
    ) -> None:
        """Update only the metadata fields that are given."""
        body: dict[str, Any] = {}
        if name is not None:
            body["name"] = name
        if description is not None:
            body["description"] = description
        if public is not None:
            body["public"] = public
        await self.transport.put_json(f"/biblib/documents/{library_id}", body)

    async def delete_library(self, library_id: str) -> None:
        await self.transport.delete(f"/biblib/documents/{library_id}")

    async def _change_documents(self, library_id: str, bibcodes: list[str], action: str) -> None:
        await self.transport.post_json(
            f"/biblib/documents/{library_id}", {"bibcode": list(bibcodes), "action": action}
        )

    async def add_documents(self, library_id: str, bibcodes: list[str]) -> None:
        await self._change_documents(library_id, bibcodes, "add")

    async def remove_documents(self, library_id: str, bibcodes: list[str]) -> None:
        await self._change_documents(library_id, bibcodes, "remove")

    async def get_permissions(self, library_id: str) -> Any:
        return load_json(await self.transport.get(f"/biblib/permissions/{library_id}"), "permissions")

    async def update_permissions(self, library_id: str, email: str, permission: str) -> None:
        """Grant ``permission`` ("owner", "admin", "write" or "read") to a collaborator."""
        await self.transport.post_json(
            f"/biblib/permissions/{library_id}", {"email": email, "permission": permission}
        )

    async def transfer_library(self, library_id: str, email: str) -> None:
        await self.transport.post_json(f"/biblib/transfer/{library_id}", {"email": email})

    async def get_annotation(self, library_id: str, bibcode: str) -> str:
        parsed = load_json_object(
            await self.transport.get(f"/biblib/libraries/{library_id}/notes/{bibcode}"),
            "annotation",
        )
        content = parsed.get("content")
        return content if isinstance(content, str) else ""

    async def set_annotation(self, library_id: str, bibcode: str, content: str) -> None:
        await self.transport.post_json(
            f"/biblib/libraries/{library_id}/notes/{bibcode}", {"content": content}
        )

    async def delete_annotation(self, library_id: str, bibcode: str) -> None:
        await self.transport.delete(f"/biblib/libraries/{library_id}/notes/{bibcode}")

    async def library_operation(
        self,
        library_id: str,
        action: str,
        source_library_ids: list[str] | None = None,
    ) -> Any:
        """Run a set operation: union, intersection, difference, copy or empty.

        ``source_library_ids`` is needed by every action except "empty".
        """
        body: dict[str, Any] = {"action": action}
        if source_library_ids is not None:
            body["libraries"] = list(source_library_ids)
        return load_json(
            await self.transport.post_json(f"/biblib/libraries/operations/{library_id}", body),
            "operation",
        )

    async def add_documents_by_query(
        self, library_id: str, query: str, rows: int | None = None
    ) -> int:
        """Search, then add every hit to the library. Returns the number added."""
        results = await self.search(query, DEFAULT_ADD_BY_QUERY_ROWS if rows is None else rows)
        bibcodes = [paper.bibcode for paper in results.papers]
        if not bibcodes:
            return 0
        await self.add_documents(library_id, bibcodes)
        return len(bibcodes)
