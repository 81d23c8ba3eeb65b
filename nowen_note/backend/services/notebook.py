"""
Notebook Service.

Business logic for the notebook hierarchy: tree assembly, moves that
must not create cycles, and subtree deletion that keeps the search
index clean.
"""

from collections.abc import Iterable
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from nowen_note.backend.core.exceptions import NotFoundError, ValidationError
from nowen_note.backend.models.notebook import DEFAULT_NOTEBOOK_ICON, Notebook
from nowen_note.backend.repositories.notebook import NotebookRepository
from nowen_note.backend.repositories.search import SearchRepository
from nowen_note.backend.schemas.notebook import NotebookCreate, NotebookNode, NotebookUpdate
from nowen_note.backend.services.base import BaseService


def _sibling_key(node: NotebookNode) -> tuple[int, str]:
    return (node.sort_order, node.name)


def build_notebook_tree(notebooks: Iterable[Any]) -> list[NotebookNode]:
    """
    Assemble a flat list of notebooks into a forest.

    A notebook whose parent is missing, is itself, or is not among the
    input becomes a root. If parent links form a cycle, the first node
    found repeating on a parent walk is cut loose and becomes a root, so
    every input notebook appears exactly once. Siblings are ordered by
    sort_order, then name.

    Works without recursion; apart from the parent walks, which stop at
    nodes already proven acyclic, every step is a single pass.
    """
    nodes: dict[str, NotebookNode] = {}
    order: list[str] = []
    for notebook in notebooks:
        if notebook.id in nodes:
            continue
        nodes[notebook.id] = NotebookNode.model_validate(notebook)
        order.append(notebook.id)

    parent_of: dict[str, str | None] = {}
    for node_id in order:
        parent_id = nodes[node_id].parent_id
        if parent_id is not None and parent_id != node_id and parent_id in nodes:
            parent_of[node_id] = parent_id
        else:
            parent_of[node_id] = None

    acyclic: set[str] = set()
    for node_id in order:
        seen: set[str] = set()
        current = node_id
        while current is not None and current not in acyclic:
            if current in seen:
                parent_of[current] = None
                break
            seen.add(current)
            current = parent_of[current]
        acyclic.update(seen)

    roots: list[NotebookNode] = []
    for node_id in order:
        node = nodes[node_id]
        parent_id = parent_of[node_id]
        if parent_id is None:
            roots.append(node)
        else:
            nodes[parent_id].children.append(node)

    for node in nodes.values():
        node.children.sort(key=_sibling_key)
    roots.sort(key=_sibling_key)
    return roots


class NotebookService(BaseService):
    """Service for notebook business logic."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = NotebookRepository(session)
        self.search = SearchRepository(session)

    async def list_notebooks(self, user_id: str) -> list[Notebook]:
        """Flat list of the user's notebooks."""
        return await self.repo.list_for_user(user_id)

    async def get_tree(self, user_id: str) -> list[NotebookNode]:
        """The user's notebooks as a nested forest."""
        notebooks = await self.repo.list_for_user(user_id)
        return build_notebook_tree(notebooks)

    async def get_notebook(self, user_id: str, notebook_id: str) -> Notebook:
        """
        Get an owned notebook.

        Raises:
            NotFoundError: If missing or owned by another user
        """
        return await self.repo.get_owned(user_id, notebook_id)

    async def _require_parent(self, user_id: str, parent_id: str) -> None:
        if not await self.repo.owned_exists(user_id, parent_id):
            raise NotFoundError("Parent notebook not found")

    async def create_notebook(self, user_id: str, data: NotebookCreate) -> Notebook:
        """Create a notebook, appended after its siblings unless sort_order is given."""
        self._validate_required({"name": data.name}, ["name"])
        if data.parent_id is not None:
            await self._require_parent(user_id, data.parent_id)

        sort_order = data.sort_order
        if sort_order is None:
            sort_order = await self.repo.next_sort_order(user_id, data.parent_id)

        self._log_operation("Creating notebook", user_id=user_id, parent_id=data.parent_id)
        notebook = await self._execute_db_operation(
            "create_notebook",
            self.repo.create(
                user_id=user_id,
                parent_id=data.parent_id,
                name=data.name.strip(),
                description=data.description,
                icon=data.icon or DEFAULT_NOTEBOOK_ICON,
                color=data.color,
                sort_order=sort_order,
            ),
        )
        self._log_debug("Notebook created", notebook_id=notebook.id)
        return notebook

    async def update_notebook(
        self,
        user_id: str,
        notebook_id: str,
        data: NotebookUpdate,
    ) -> Notebook:
        """
        Rename, move, reorder or toggle a notebook.

        Raises:
            NotFoundError: If the notebook or the new parent is not owned
            ValidationError: If the move would put the notebook under itself
                or one of its descendants
        """
        notebook = await self.repo.get_owned(user_id, notebook_id)
        changes = data.model_dump(exclude_unset=True)

        for field in ("name", "icon", "sort_order", "is_expanded"):
            if field in changes and changes[field] is None:
                del changes[field]
        if "name" in changes:
            self._validate_required(changes, ["name"])
            changes["name"] = changes["name"].strip()

        new_parent = changes.get("parent_id")
        if new_parent is not None and new_parent != notebook.parent_id:
            await self._require_parent(user_id, new_parent)
            subtree = await self.repo.subtree_ids(user_id, notebook_id)
            if new_parent in subtree:
                raise ValidationError(
                    "Cannot move a notebook into itself or its descendants",
                    details={"parent_id": new_parent},
                )

        self._log_operation("Updating notebook", notebook_id=notebook_id, fields=sorted(changes))
        return await self._execute_db_operation(
            "update_notebook",
            self.repo.apply(notebook, **changes),
        )

    async def delete_notebook(self, user_id: str, notebook_id: str) -> None:
        """
        Delete a notebook with all sub-notebooks and their notes.

        Search entries of the affected notes are removed first, inside
        the same transaction; the store cascades the rest.
        """
        if not await self.repo.owned_exists(user_id, notebook_id):
            raise NotFoundError("Notebook not found")

        note_ids = await self.repo.subtree_note_ids(user_id, notebook_id)
        self._log_operation(
            "Deleting notebook",
            notebook_id=notebook_id,
            note_count=len(note_ids),
        )
        await self.search.remove_many(note_ids)
        await self._execute_db_operation(
            "delete_notebook",
            self.repo.delete_owned(user_id, notebook_id),
        )
