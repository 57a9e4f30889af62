from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .fields import FieldDefinition
from .path_resolver import DataBag, PathResolver, default_resolver
from .records import OrderRecord
from .sentinels import ERROR_LOADING_FIELD, NOT_APPLICABLE, display_text
from .transforms import TransformationPipeline, default_pipeline

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving one field, with enough provenance for the preview tool."""

    value: Any
    raw: Any = None
    source_path: Optional[str] = None
    from_upstream: bool = False

    @property
    def display(self) -> str:
        return display_text(self.value)


def _join_list(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return ", ".join("" if v is None else str(v) for v in value)
    return value


class ValueResolver:
    """Resolves the display value of a field for one order.

    Once an upstream payload is supplied every field reads from it (or the
    local product bag through a `product:` path) and nothing else: a field
    whose paths find nothing stays empty rather than falling back to local
    order values.
    """

    def __init__(self, paths: Optional[PathResolver] = None, pipeline: Optional[TransformationPipeline] = None):
        self.paths = paths or default_resolver
        self.pipeline = pipeline or default_pipeline

    def explain(
        self,
        field: FieldDefinition,
        order: OrderRecord,
        upstream_payload: Optional[Dict[str, Any]] = None,
    ) -> Resolution:
        try:
            return self._resolve(field, order, upstream_payload)
        except Exception:
            logger.exception("Error resolving field %s for order %s", field.id, getattr(order, 'id', None))
            return Resolution(ERROR_LOADING_FIELD)

    def resolve(
        self,
        field: FieldDefinition,
        order: OrderRecord,
        upstream_payload: Optional[Dict[str, Any]] = None,
    ) -> Any:
        return self.explain(field, order, upstream_payload).value

    def display(
        self,
        field: FieldDefinition,
        order: OrderRecord,
        upstream_payload: Optional[Dict[str, Any]] = None,
    ) -> str:
        return self.explain(field, order, upstream_payload).display

    def _resolve(self, field: FieldDefinition, order: OrderRecord, upstream_payload: Optional[Dict[str, Any]]) -> Resolution:
        raw: Any = None
        source_path: Optional[str] = None
        from_upstream = False

        if upstream_payload is not None:
            if field.source_paths:
                bag = DataBag(payload=upstream_payload, product=order.product)
                raw, source_path = self.paths.resolve_first(field.source_paths, bag)
                from_upstream = raw is not None
        else:
            raw = order.get(field.id)

        raw = _join_list(raw)
        transformed = self.pipeline.apply(raw, field)
        if transformed is not None:
            return Resolution(transformed, raw, source_path, from_upstream)
        if from_upstream and field.transformation.is_extract:
            return Resolution(NOT_APPLICABLE, raw, source_path, from_upstream)
        return Resolution(raw, raw, source_path, from_upstream)


default_value_resolver = ValueResolver()
