"""
Persistence of area layers.

A ``LayerRecord`` stores the layer's display settings in columns and its
features as a JSON document, since features are only ever read back as a
whole.  ``load_layer`` rebuilds the API model from a record.
"""

from __future__ import annotations

import json
import logging
import uuid
from datetime import datetime
from typing import List, Optional

from sqlmodel import SQLModel, Field, select

from ..api.models import AreaFeature, AreaLayer, AreaLayerCreate
from .db import create_db_and_tables, get_session

logger = logging.getLogger(__name__)


class LayerRecord(SQLModel, table=True):
    """Database model representing a stored area layer."""

    layer_id: str = Field(primary_key=True)
    display_name: str
    color: str = "#ffffff"
    line_width: float = 1.0
    line_simplify_tolerance: float = 0.0
    ground_plane: str = "xz"
    feature_count: int = 0
    features_json: str = "[]"
    created_at: datetime = Field(default_factory=datetime.utcnow)


def init_db() -> None:
    """Initialise the database and create tables if they do not exist."""
    create_db_and_tables()


def insert_layer(payload: AreaLayerCreate) -> LayerRecord:
    """Persist a new layer and return its record.

    Args:
        payload: Layer settings and features supplied by the client.

    Returns:
        The stored ``LayerRecord`` with a freshly generated identifier.
    """
    features = [f.model_dump() for f in payload.features]
    record = LayerRecord(
        layer_id=uuid.uuid4().hex,
        display_name=payload.displayName,
        color=payload.color,
        line_width=payload.lineWidth,
        line_simplify_tolerance=payload.lineSimplifyTolerance,
        ground_plane=payload.groundPlane,
        feature_count=len(features),
        features_json=json.dumps(features),
    )
    with get_session() as session:
        session.add(record)
        session.commit()
        session.refresh(record)
    logger.info("Stored layer %s (%s) with %d features", record.layer_id, record.display_name, record.feature_count)
    return record


def get_layer_record(layer_id: str) -> Optional[LayerRecord]:
    """Retrieve a ``LayerRecord`` by identifier, or ``None``."""
    with get_session() as session:
        return session.get(LayerRecord, layer_id)


def list_layers() -> List[LayerRecord]:
    """Return all layer records in insertion order."""
    with get_session() as session:
        statement = select(LayerRecord).order_by(LayerRecord.created_at)
        return list(session.exec(statement))


def delete_layer(layer_id: str) -> bool:
    """Delete a layer.  Returns ``False`` when it did not exist."""
    with get_session() as session:
        record = session.get(LayerRecord, layer_id)
        if record is None:
            return False
        session.delete(record)
        session.commit()
    return True


def load_layer(record: LayerRecord) -> AreaLayer:
    """Rebuild the full :class:`AreaLayer` model from a record."""
    features = [AreaFeature.model_validate(f) for f in json.loads(record.features_json)]
    return AreaLayer(
        layerId=record.layer_id,
        displayName=record.display_name,
        color=record.color,
        lineWidth=record.line_width,
        lineSimplifyTolerance=record.line_simplify_tolerance,
        groundPlane=record.ground_plane,
        features=features,
    )
