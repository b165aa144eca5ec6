"""SQLite persistence for briefs, brands, actors and assets."""

import json
import logging
import sqlite3
from pathlib import Path
from typing import Any, Optional
from uuid import uuid4

from .config import config
from .errors import StorageError
from .models import Actor, Asset, Brand, Brief, Scene, Visual

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS asset (
    id TEXT PRIMARY KEY,
    filename TEXT NOT NULL,
    url TEXT NOT NULL,
    mime_type TEXT NOT NULL,
    file_size_bytes INTEGER NOT NULL,
    uploaded_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%f', 'now'))
);

CREATE TABLE IF NOT EXISTS brand (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    description TEXT,
    website TEXT,
    primary_contact_name TEXT,
    primary_contact_email TEXT,
    logo_asset_id TEXT REFERENCES asset(id)
);

CREATE TABLE IF NOT EXISTS actor (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    nationality TEXT,
    gender TEXT,
    actor_type TEXT NOT NULL,
    visual_description TEXT,
    profile_image TEXT,
    elevenlabs_voice_id TEXT UNIQUE
);

CREATE TABLE IF NOT EXISTS brief (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    language TEXT NOT NULL,
    source_url TEXT,
    brand_id TEXT REFERENCES brand(id),
    actor_id TEXT REFERENCES actor(id),
    created_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%f', 'now'))
);

CREATE TABLE IF NOT EXISTS scene (
    id TEXT PRIMARY KEY,
    brief_id TEXT NOT NULL REFERENCES brief(id) ON DELETE CASCADE,
    scene_number INTEGER NOT NULL CHECK (scene_number > 0),
    scene_title TEXT NOT NULL DEFAULT '',
    script TEXT NOT NULL CHECK (length(script) > 0),
    tone TEXT,
    time_seconds REAL,
    visual_description TEXT,
    image_url TEXT NOT NULL,
    UNIQUE (brief_id, scene_number)
);
"""


class Database:
    """Client for the application's SQLite database."""

    def __init__(self, db_path: Optional[str | Path] = None):
        """
        Open (and if needed create) the database.

        Args:
            db_path: Path to the SQLite file, or ":memory:". Defaults to config.database.
        """
        self.db_path = str(db_path or config.database)
        self.conn = sqlite3.connect(self.db_path, check_same_thread=False)
        self.conn.row_factory = sqlite3.Row  # Enable dict-like access
        self.conn.execute("PRAGMA foreign_keys = ON")
        self.conn.executescript(SCHEMA)

    def close(self) -> None:
        self.conn.close()

    # Briefs

    def create_brief(
        self,
        brief: Brief,
        brand_id: Optional[str] = None,
        actor_id: Optional[str] = None,
    ) -> str:
        """
        Insert a brief and all of its scenes in one transaction.

        Either the brief row and every scene row are written, or none are.

        Returns:
            Brief ID (UUID)

        Raises:
            StructuralError: If the brief is not complete.
            StorageError: If any insert fails.
        """
        brief.validate_complete()
        brief_id = str(uuid4())

        try:
            with self.conn:
                self.conn.execute(
                    """
                    INSERT INTO brief (id, title, language, source_url, brand_id, actor_id)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (brief_id, brief.title, brief.language, brief.source_url, brand_id, actor_id),
                )
                self.conn.executemany(
                    """
                    INSERT INTO scene (id, brief_id, scene_number, scene_title, script,
                                       tone, time_seconds, visual_description, image_url)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    [self._scene_row(brief_id, scene) for scene in brief.scenes],
                )
        except sqlite3.Error as e:
            logger.error(f"Failed to create brief '{brief.title}': {e}")
            raise StorageError(f"Failed to create brief: {e}") from e

        logger.info(f"Brief '{brief.title}' and {len(brief.scenes)} scenes created: {brief_id}")
        return brief_id

    def get_brief(self, brief_id: str) -> Optional[Brief]:
        """
        Get a brief with its scenes.

        Returns:
            The Brief, or None if not found
        """
        row = self.conn.execute("SELECT * FROM brief WHERE id = ?", (brief_id,)).fetchone()
        if row is None:
            return None

        scene_rows = self.conn.execute(
            "SELECT * FROM scene WHERE brief_id = ? ORDER BY scene_number", (brief_id,)
        ).fetchall()

        return Brief(
            title=row["title"],
            language=row["language"],
            source_url=row["source_url"],
            scenes=[self._scene_from_row(r) for r in scene_rows],
        )

    def list_briefs(self) -> list[dict[str, Any]]:
        """List briefs, newest first."""
        rows = self.conn.execute(
            "SELECT id, title, created_at FROM brief ORDER BY created_at DESC, rowid DESC"
        ).fetchall()
        return [dict(row) for row in rows]

    # Catalog

    def create_asset(self, asset: Asset) -> str:
        """Record an uploaded file and return its ID."""
        asset_id = str(uuid4())
        self._insert(
            "INSERT INTO asset (id, filename, url, mime_type, file_size_bytes) VALUES (?, ?, ?, ?, ?)",
            (asset_id, asset.filename, asset.url, asset.mime_type, asset.file_size_bytes),
        )
        return asset_id

    def list_assets(self) -> list[Asset]:
        """List assets, newest first."""
        rows = self.conn.execute(
            "SELECT * FROM asset ORDER BY uploaded_at DESC, rowid DESC"
        ).fetchall()
        return [Asset(**dict(row)) for row in rows]

    def create_brand(self, brand: Brand) -> str:
        """Insert a brand and return its ID."""
        brand_id = str(uuid4())
        self._insert(
            """
            INSERT INTO brand (id, name, description, website, primary_contact_name,
                               primary_contact_email, logo_asset_id)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                brand_id,
                brand.name,
                brand.description,
                brand.website,
                brand.primary_contact_name,
                brand.primary_contact_email,
                brand.logo_asset_id,
            ),
        )
        return brand_id

    def list_brands(self) -> list[Brand]:
        """List brands by name with their logo URL resolved."""
        rows = self.conn.execute(
            """
            SELECT brand.*, asset.url AS logo_url
            FROM brand LEFT JOIN asset ON brand.logo_asset_id = asset.id
            ORDER BY brand.name
            """
        ).fetchall()
        return [Brand(**dict(row)) for row in rows]

    def create_actor(self, actor: Actor) -> str:
        """Insert an actor and return its ID."""
        actor_id = str(uuid4())
        self._insert(
            """
            INSERT INTO actor (id, name, nationality, gender, actor_type,
                               visual_description, profile_image, elevenlabs_voice_id)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                actor_id,
                actor.name,
                actor.nationality,
                actor.gender.value if actor.gender else None,
                actor.actor_type.value,
                actor.visual_description,
                actor.profile_image,
                actor.elevenlabs_voice_id,
            ),
        )
        return actor_id

    def list_actors(self) -> list[Actor]:
        """List actors by name."""
        rows = self.conn.execute("SELECT * FROM actor ORDER BY name").fetchall()
        return [Actor(**dict(row)) for row in rows]

    def _insert(self, sql: str, params: tuple) -> None:
        try:
            with self.conn:
                self.conn.execute(sql, params)
        except sqlite3.Error as e:
            logger.error(f"Insert failed: {e}")
            raise StorageError(f"Database write failed: {e}") from e

    @staticmethod
    def _scene_row(brief_id: str, scene: Scene) -> tuple:
        return (
            str(uuid4()),
            brief_id,
            scene.scene_number,
            scene.scene_title,
            scene.script,
            json.dumps(scene.tone, ensure_ascii=False) if scene.tone is not None else None,
            scene.time_seconds,
            scene.visual.description,
            scene.visual.image_url,
        )

    @staticmethod
    def _scene_from_row(row: sqlite3.Row) -> Scene:
        return Scene(
            scene_number=row["scene_number"],
            scene_title=row["scene_title"],
            script=row["script"],
            tone=json.loads(row["tone"]) if row["tone"] else None,
            time_seconds=row["time_seconds"],
            visual=Visual(description=row["visual_description"], image_url=row["image_url"]),
        )
