"""SQLAlchemy Core tables for the parts of the WordPress schema the fixer touches.

Only the columns read or written here are declared. The tables are owned by WordPress;
``create_all_tables`` exists for local fixtures and tests.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import cache
from typing import TYPE_CHECKING

from sqlalchemy import (
    BigInteger,
    Column,
    DateTime,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

ATTACHMENT_POST_TYPE = "attachment"
ATTACHMENT_STATUS = "inherit"
ATTACHED_FILE_KEY = "_wp_attached_file"
IMAGE_ALT_KEY = "_wp_attachment_image_alt"
CATEGORY_TAXONOMY = "category"


@dataclass(frozen=True, slots=True)
class WordPressTables:
    metadata: MetaData
    posts: Table
    postmeta: Table
    terms: Table
    term_taxonomy: Table
    term_relationships: Table


@cache
def wordpress_tables(prefix: str = "wp_") -> WordPressTables:
    """Return table definitions for the given table prefix."""

    metadata = MetaData()

    posts = Table(
        f"{prefix}posts",
        metadata,
        Column("ID", BigInteger().with_variant(Integer, "sqlite"), primary_key=True),
        Column("post_date_gmt", DateTime, nullable=True),
        Column("post_content", Text, nullable=False, default=""),
        Column("post_title", Text, nullable=False, default=""),
        Column("post_status", String(20), nullable=False, default="publish"),
        Column("post_name", String(200), nullable=False, default=""),
        Column("post_parent", BigInteger, nullable=False, default=0),
        Column("guid", String(255), nullable=False, default=""),
        Column("post_type", String(20), nullable=False, default="post"),
        Column("post_mime_type", String(100), nullable=False, default=""),
        Index(f"{prefix}type_status_date", "post_type", "post_status", "post_date_gmt"),
    )

    postmeta = Table(
        f"{prefix}postmeta",
        metadata,
        Column("meta_id", BigInteger().with_variant(Integer, "sqlite"), primary_key=True),
        Column("post_id", BigInteger, nullable=False, default=0, index=True),
        Column("meta_key", String(255), nullable=True),
        Column("meta_value", Text, nullable=True),
    )

    terms = Table(
        f"{prefix}terms",
        metadata,
        Column("term_id", BigInteger().with_variant(Integer, "sqlite"), primary_key=True),
        Column("name", String(200), nullable=False, default=""),
        Column("slug", String(200), nullable=False, default="", index=True),
    )

    term_taxonomy = Table(
        f"{prefix}term_taxonomy",
        metadata,
        Column(
            "term_taxonomy_id",
            BigInteger().with_variant(Integer, "sqlite"),
            primary_key=True,
        ),
        Column("term_id", BigInteger, nullable=False, default=0),
        Column("taxonomy", String(32), nullable=False, default=""),
    )

    term_relationships = Table(
        f"{prefix}term_relationships",
        metadata,
        Column("object_id", BigInteger, primary_key=True, default=0),
        Column("term_taxonomy_id", BigInteger, primary_key=True, default=0),
        Column("term_order", Integer, nullable=False, default=0),
    )

    return WordPressTables(
        metadata=metadata,
        posts=posts,
        postmeta=postmeta,
        terms=terms,
        term_taxonomy=term_taxonomy,
        term_relationships=term_relationships,
    )


def create_all_tables(engine: Engine, *, prefix: str = "wp_") -> WordPressTables:
    tables = wordpress_tables(prefix)
    tables.metadata.create_all(engine)
    return tables
