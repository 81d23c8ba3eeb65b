"""
Seed Service.

Populates an empty database with the default account and, when the
seed_demo_content feature is on, a small set of demo notebooks, notes
and tags.
"""

import json
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from nowen_note.backend.core.config import get_app_config
from nowen_note.backend.core.security import hash_password
from nowen_note.backend.models.user import User
from nowen_note.backend.repositories.note import NoteRepository
from nowen_note.backend.repositories.notebook import NotebookRepository
from nowen_note.backend.repositories.search import SearchRepository
from nowen_note.backend.repositories.tag import TagRepository
from nowen_note.backend.repositories.user import UserRepository
from nowen_note.backend.services.base import BaseService

DEFAULT_EMAIL = "admin@nowen-note.local"


def _doc(*blocks: dict[str, Any]) -> str:
    return json.dumps({"type": "doc", "content": list(blocks)}, ensure_ascii=False)


def _paragraph(text: str) -> dict[str, Any]:
    return {"type": "paragraph", "content": [{"type": "text", "text": text}]}


def _heading(text: str, level: int = 2) -> dict[str, Any]:
    return {"type": "heading", "attrs": {"level": level}, "content": [{"type": "text", "text": text}]}


def _code(text: str, language: str) -> dict[str, Any]:
    return {"type": "codeBlock", "attrs": {"language": language}, "content": [{"type": "text", "text": text}]}


# (key, parent key, name, icon, sort_order)
DEMO_NOTEBOOKS = [
    ("work", None, "工作笔记", "💼", 0),
    ("diary", None, "个人日记", "📔", 1),
    ("tech", None, "技术学习", "🧑‍💻", 2),
    ("frontend", "tech", "前端笔记", "⚛️", 0),
]

TIPTAP_IMPORT = 'import { useEditor } from "@tiptap/react"'

DEMO_NOTES = [
    {
        "notebook": "work",
        "title": "项目启动会议纪要",
        "content": _doc(_paragraph("今天讨论了 nowen-note 项目的整体架构方案...")),
        "content_text": "今天讨论了 nowen-note 项目的整体架构方案...",
    },
    {
        "notebook": "work",
        "title": "Q1 目标与 OKR",
        "content": _doc(_paragraph("2026 年 Q1 核心目标：完成 nowen-note v1.0 发布")),
        "content_text": "2026 年 Q1 核心目标：完成 nowen-note v1.0 发布",
        "is_pinned": True,
    },
    {
        "notebook": "diary",
        "title": "周末计划",
        "content": _doc(_paragraph("周六去图书馆，周日整理房间")),
        "content_text": "周六去图书馆，周日整理房间",
    },
    {
        "notebook": "tech",
        "title": "React Server Components 学习",
        "content": _doc(_paragraph("RSC 是 React 18 引入的新范式，可以在服务端渲染组件...")),
        "content_text": "RSC 是 React 18 引入的新范式，可以在服务端渲染组件...",
    },
    {
        "notebook": "frontend",
        "title": "Tiptap 编辑器集成指南",
        "content": _doc(
            _heading("Tiptap 快速开始"),
            _paragraph("Tiptap 是基于 ProseMirror 的现代富文本编辑器框架..."),
            _code(TIPTAP_IMPORT, "typescript"),
        ),
        "content_text": (
            "Tiptap 快速开始 Tiptap 是基于 ProseMirror 的现代富文本编辑器框架... "
            + TIPTAP_IMPORT
        ),
        "is_favorite": True,
    },
]

DEMO_TAGS = [
    ("重要", "#f85149"),
    ("技术", "#58a6ff"),
    ("灵感", "#7ee787"),
]


class SeedService(BaseService):
    """Service that prepares a fresh database."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.users = UserRepository(session)
        self.notebooks = NotebookRepository(session)
        self.notes = NoteRepository(session)
        self.tags = TagRepository(session)
        self.search = SearchRepository(session)

    async def seed_if_empty(self, demo_content: bool | None = None) -> bool:
        """
        Seed the database unless an account already exists.

        Args:
            demo_content: Override the seed_demo_content feature flag

        Returns:
            True if anything was seeded
        """
        if await self.users.count() > 0:
            self._log_debug("Database already seeded")
            return False

        if demo_content is None:
            demo_content = get_app_config().features.seed_demo_content

        user = await self.create_default_user()
        if demo_content:
            await self.create_demo_content(user)
        self._log_operation("Database seeded", demo_content=demo_content)
        return True

    async def create_default_user(self) -> User:
        """Create the default account with the configured credentials."""
        auth_config = get_app_config().security.auth
        return await self._execute_db_operation(
            "create_default_user",
            self.users.create(
                username=auth_config.default_username,
                email=DEFAULT_EMAIL,
                password_hash=hash_password(auth_config.default_password),
            ),
        )

    async def create_demo_content(self, user: User) -> None:
        """Add the demo notebooks, notes and tags for a user."""
        notebook_ids: dict[str, str] = {}
        for key, parent_key, name, icon, sort_order in DEMO_NOTEBOOKS:
            notebook = await self.notebooks.create(
                user_id=user.id,
                parent_id=notebook_ids[parent_key] if parent_key else None,
                name=name,
                icon=icon,
                sort_order=sort_order,
            )
            notebook_ids[key] = notebook.id

        for item in DEMO_NOTES:
            note = await self.notes.create(
                user_id=user.id,
                notebook_id=notebook_ids[item["notebook"]],
                title=item["title"],
                content=item["content"],
                content_text=item["content_text"],
                is_pinned=item.get("is_pinned", False),
                is_favorite=item.get("is_favorite", False),
            )
            await self.search.replace(note.id, note.title, note.content_text)

        for name, color in DEMO_TAGS:
            await self.tags.create(user_id=user.id, name=name, color=color)
